"""Payment tools: create_order, verify_payment, get_user."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from coldreach.constants import INVALID_SIGNATURE_MESSAGE, PLAN_CREDIT_GRANTS, Plan
from coldreach.signature import SignatureMismatch, verify_signature

if TYPE_CHECKING:
    from coldreach.entitlement_store import EntitlementStore
    from coldreach.razorpay_client import RazorpayClient

logger = logging.getLogger(__name__)

_SMALLEST_UNIT_FACTOR = 100  # rupees -> paise


def _now_ms() -> int:
    return int(time.time() * 1000)


def credit_grant_for(plan: str | None) -> int:
    """Credits granted for buying ``plan``: 100 for starter, 500 otherwise."""
    return PLAN_CREDIT_GRANTS[Plan.classify(plan)]


async def create_order_tool(
    razorpay: RazorpayClient,
    amount: float,
    plan: str,
    email: str,
    currency: str = "INR",
) -> dict[str, Any]:
    """Create a gateway order for ``amount`` (major currency units).

    Nothing is stored locally; entitlement only changes when the completed
    payment is verified.

    Raises:
        RazorpayError: The gateway rejected or failed the request.
    """
    order = await razorpay.create_order(
        amount=int(round(amount * _SMALLEST_UNIT_FACTOR)),
        currency=currency,
        receipt=f"rcpt_{_now_ms()}",
        notes={"email": email, "plan": plan},
    )
    logger.info("Created order %s for %s (%s).", order.get("id"), email, plan)
    return {
        "success": True,
        "orderId": order.get("id", ""),
        "amount": order.get("amount"),
        "currency": order.get("currency", currency),
        "razorpayKeyId": razorpay.key_id,
    }


async def verify_payment_tool(
    store: EntitlementStore,
    secret: str,
    order_id: str,
    payment_id: str,
    signature: str,
    email: str,
    plan: str,
) -> dict[str, Any]:
    """Verify a completed payment's signature and grant the purchased plan.

    The grant overwrites plan, credits and lastPayment; it never adds to a
    remaining balance. A mismatched signature changes nothing.

    Returns dict with:
        success: True on a verified payment.
        message: "Payment verified!" or "Invalid signature".
        plan/credits: The granted plan and credit balance (success only).
    """
    try:
        verify_signature(order_id, payment_id, signature, secret)
    except SignatureMismatch:
        return {"success": False, "message": INVALID_SIGNATURE_MESSAGE}

    credits = credit_grant_for(plan)
    await store.update(email, {"plan": plan, "credits": credits, "lastPayment": _now_ms()})
    logger.info("Payment %s verified: %s -> %s (%d credits).", payment_id, email, plan, credits)

    return {
        "success": True,
        "message": "Payment verified!",
        "plan": plan,
        "credits": credits,
    }


async def get_user_tool(store: EntitlementStore, email: str) -> dict[str, Any]:
    """Read-only. The caller's entitlement record (default if never written)."""
    user = await store.get(email)
    return {"success": True, "user": user.to_dict()}
