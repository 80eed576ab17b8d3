"""Tests for payment tools: create_order, verify_payment, get_user."""

from unittest.mock import AsyncMock

import pytest

from coldreach.backends import MemoryBackend
from coldreach.entitlement_store import EntitlementStore
from coldreach.razorpay_client import RazorpayClient, RazorpayServerError
from coldreach.signature import compute_signature
from coldreach.tools.payments import (
    create_order_tool,
    credit_grant_for,
    get_user_tool,
    verify_payment_tool,
)

SECRET = "rzp_secret"
EMAIL = "ada@example.com"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mock_razorpay(order: dict | None = None, error: Exception | None = None):
    """Create a mock RazorpayClient."""
    client = AsyncMock(spec=RazorpayClient)
    client.key_id = "rzp_test_key"
    if error:
        client.create_order = AsyncMock(side_effect=error)
    else:
        client.create_order = AsyncMock(
            return_value=order or {"id": "order_1", "amount": 49900, "currency": "INR"}
        )
    return client


async def _verify(store: EntitlementStore, plan: str = "starter", signature: str | None = None):
    return await verify_payment_tool(
        store,
        secret=SECRET,
        order_id="order_1",
        payment_id="pay_1",
        signature=signature if signature is not None else compute_signature("order_1", "pay_1", SECRET),
        email=EMAIL,
        plan=plan,
    )


# ---------------------------------------------------------------------------
# credit_grant_for
# ---------------------------------------------------------------------------


class TestCreditGrant:
    def test_starter(self) -> None:
        assert credit_grant_for("starter") == 100

    def test_other_plans_get_500(self) -> None:
        assert credit_grant_for("pro") == 500
        assert credit_grant_for("agency") == 500
        assert credit_grant_for("startr") == 500
        assert credit_grant_for(None) == 500


# ---------------------------------------------------------------------------
# create_order
# ---------------------------------------------------------------------------


class TestCreateOrder:
    @pytest.mark.asyncio
    async def test_success(self) -> None:
        razorpay = _mock_razorpay()
        result = await create_order_tool(razorpay, amount=499, plan="starter", email=EMAIL)
        assert result == {
            "success": True,
            "orderId": "order_1",
            "amount": 49900,
            "currency": "INR",
            "razorpayKeyId": "rzp_test_key",
        }
        kwargs = razorpay.create_order.call_args[1]
        assert kwargs["amount"] == 49900
        assert kwargs["currency"] == "INR"
        assert kwargs["receipt"].startswith("rcpt_")
        assert kwargs["notes"] == {"email": EMAIL, "plan": "starter"}

    @pytest.mark.asyncio
    async def test_fractional_amount_rounds_to_smallest_unit(self) -> None:
        razorpay = _mock_razorpay()
        await create_order_tool(razorpay, amount=4.99, plan="starter", email=EMAIL, currency="USD")
        kwargs = razorpay.create_order.call_args[1]
        assert kwargs["amount"] == 499
        assert kwargs["currency"] == "USD"

    @pytest.mark.asyncio
    async def test_gateway_error_propagates(self) -> None:
        razorpay = _mock_razorpay(error=RazorpayServerError("down", status_code=502))
        with pytest.raises(RazorpayServerError):
            await create_order_tool(razorpay, amount=499, plan="starter", email=EMAIL)


# ---------------------------------------------------------------------------
# verify_payment
# ---------------------------------------------------------------------------


class TestVerifyPayment:
    @pytest.mark.asyncio
    async def test_starter_grant(self) -> None:
        store = EntitlementStore(MemoryBackend())
        result = await _verify(store, plan="starter")
        assert result == {"success": True, "message": "Payment verified!", "plan": "starter", "credits": 100}
        user = await store.get(EMAIL)
        assert user.plan == "starter"
        assert user.credits == 100
        assert user.last_payment is not None

    @pytest.mark.asyncio
    async def test_other_plan_grant(self) -> None:
        store = EntitlementStore(MemoryBackend())
        result = await _verify(store, plan="pro")
        assert result["credits"] == 500
        assert (await store.get(EMAIL)).plan == "pro"

    @pytest.mark.asyncio
    async def test_reverification_overwrites_balance(self) -> None:
        store = EntitlementStore(MemoryBackend({EMAIL: {"email": EMAIL, "plan": "pro", "credits": 500}}))
        await _verify(store, plan="starter")
        assert (await store.get(EMAIL)).credits == 100

    @pytest.mark.asyncio
    async def test_bad_signature_leaves_record_unchanged(self) -> None:
        stored = {EMAIL: {"email": EMAIL, "plan": "free", "credits": 2}}
        backend = MemoryBackend(stored)
        store = EntitlementStore(backend)
        result = await _verify(store, signature="deadbeef")
        assert result == {"success": False, "message": "Invalid signature"}
        assert backend.saves == 0
        assert await backend.load_all() == stored

    @pytest.mark.asyncio
    async def test_missing_secret_rejects(self) -> None:
        store = EntitlementStore(MemoryBackend())
        result = await verify_payment_tool(
            store, secret="", order_id="o", payment_id="p",
            signature=compute_signature("o", "p", "anything"), email=EMAIL, plan="starter",
        )
        assert result["success"] is False

    @pytest.mark.asyncio
    async def test_purchase_moves_free_user_off_free_plan(self) -> None:
        store = EntitlementStore(MemoryBackend({EMAIL: {"plan": "free", "credits": 0}}))
        await _verify(store, plan="pro")
        user = await store.get(EMAIL)
        assert not user.is_free
        assert user.has_credits


# ---------------------------------------------------------------------------
# get_user
# ---------------------------------------------------------------------------


class TestGetUser:
    @pytest.mark.asyncio
    async def test_default_user(self) -> None:
        result = await get_user_tool(EntitlementStore(MemoryBackend()), EMAIL)
        assert result == {"success": True, "user": {"email": EMAIL, "plan": "free", "credits": 5}}

    @pytest.mark.asyncio
    async def test_paid_user(self) -> None:
        store = EntitlementStore(MemoryBackend())
        await _verify(store, plan="starter")
        user = (await get_user_tool(store, EMAIL))["user"]
        assert user["plan"] == "starter"
        assert user["credits"] == 100
        assert "lastPayment" in user
