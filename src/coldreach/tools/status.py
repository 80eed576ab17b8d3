"""Diagnostics: which collaborators are configured, store size, versions."""

from __future__ import annotations

import importlib.metadata
import platform
from typing import TYPE_CHECKING, Any

from coldreach.backends import JsonFileBackend

if TYPE_CHECKING:
    from coldreach.config import ColdReachConfig
    from coldreach.entitlement_store import EntitlementStore


async def service_status_tool(
    config: ColdReachConfig,
    store: EntitlementStore,
) -> dict[str, Any]:
    """Report configuration state for diagnostics.

    Admin tool. Secrets are reported as 'present' or 'missing', never echoed.
    Call this during setup, or when generation or payments aren't working.

    Returns dict with:
        gemini: model and api key status.
        razorpay: key id, secret status, currency.
        store: backend kind, file path (file backend only), user count.
        versions: python and installed package versions.
    """
    result: dict[str, Any] = {
        "success": True,
        "gemini": {
            "model": config.gemini_model,
            "api_key_status": "present" if config.gemini_api_key else "missing",
            "max_output_tokens": config.gemini_max_output_tokens,
        },
        "razorpay": {
            "key_id": config.razorpay_key_id or None,
            "key_secret_status": "present" if config.razorpay_key_secret else "missing",
            "currency": config.razorpay_currency,
        },
    }

    backend = store.backend
    store_info: dict[str, Any] = {"backend": type(backend).__name__}
    if isinstance(backend, JsonFileBackend):
        store_info["path"] = str(backend.path)
    store_info["users"] = await store.count()
    result["store"] = store_info

    # Versions actually imported in this process
    versions: dict[str, str] = {"python": platform.python_version()}
    for pkg in ("coldreach", "fastapi", "httpx"):
        try:
            versions[pkg] = importlib.metadata.version(pkg)
        except importlib.metadata.PackageNotFoundError:
            versions[pkg] = "unknown"
    result["versions"] = versions

    return result
