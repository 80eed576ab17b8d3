"""Async HTTP client for the Razorpay Orders API."""

from __future__ import annotations

from typing import Any

import httpx


# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------


class RazorpayError(Exception):
    """Base exception for Razorpay operations."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RazorpayAuthError(RazorpayError):
    """401/403: bad key id or key secret."""


class RazorpayBadRequestError(RazorpayError):
    """400: request rejected (amount, currency, notes...)."""


class RazorpayNotFoundError(RazorpayError):
    """404: resource not found."""


class RazorpayServerError(RazorpayError):
    """5xx: gateway-side error."""


class RazorpayConnectionError(RazorpayError):
    """Network/DNS failure."""


class RazorpayTimeoutError(RazorpayError):
    """Request timeout."""


_STATUS_MAP: dict[int, type[RazorpayError]] = {
    400: RazorpayBadRequestError,
    401: RazorpayAuthError,
    403: RazorpayAuthError,
    404: RazorpayNotFoundError,
}

_BASE_URL = "https://api.razorpay.com/v1"


def _error_message(response: httpx.Response) -> str:
    """Pull ``error.description`` out of a Razorpay error body, else raw text."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("description"):
            return str(error["description"])
    return response.text


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class RazorpayClient:
    """Async client for Razorpay's REST API v1.

    Constructor accepts explicit params, no env-var loading.
    Authenticates with HTTP basic auth (key id / key secret).
    """

    def __init__(self, key_id: str, key_secret: str, base_url: str = _BASE_URL) -> None:
        self._key_id = key_id
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            auth=(key_id, key_secret),
            timeout=httpx.Timeout(connect=5.0, read=15.0, write=10.0, pool=5.0),
        )

    @property
    def key_id(self) -> str:
        return self._key_id

    async def _request(
        self,
        method: str,
        endpoint: str,
        json_data: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and map errors to the Razorpay exception hierarchy."""
        try:
            response = await self._client.request(method, endpoint, json=json_data)
        except httpx.ConnectError as exc:
            raise RazorpayConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise RazorpayTimeoutError(str(exc)) from exc

        if response.status_code >= 400:
            message = _error_message(response)
            exc_cls = _STATUS_MAP.get(response.status_code)
            if exc_cls is not None:
                raise exc_cls(message, status_code=response.status_code)
            if response.status_code >= 500:
                raise RazorpayServerError(message, status_code=response.status_code)
            raise RazorpayError(message, status_code=response.status_code)

        return response.json()

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """POST /orders: create an order. ``amount`` is in the smallest unit."""
        payload: dict[str, Any] = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
        }
        if notes is not None:
            payload["notes"] = notes
        return await self._request("POST", "/orders", json_data=payload)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> RazorpayClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
