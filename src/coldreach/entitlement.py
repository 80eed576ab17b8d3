"""Per-user entitlement record.

Pure data model, no I/O. The on-disk shape uses the camelCase keys
(``lastPayment``) that the HTTP surface also returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from coldreach.constants import FREE_TIER_CREDITS, Plan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserRecord:
    """A user's plan and credit balance.

    ``credits`` is only meaningful while the plan is free; paid plans are
    not credit-limited. ``last_payment`` is epoch milliseconds and is only
    ever set by a verified payment.
    """

    email: str
    plan: str = Plan.FREE.value
    credits: int = FREE_TIER_CREDITS
    last_payment: int | None = None

    @property
    def tier(self) -> Plan:
        return Plan.classify(self.plan)

    @property
    def is_free(self) -> bool:
        return self.tier is Plan.FREE

    @property
    def has_credits(self) -> bool:
        """False only for a free-plan user whose balance is exhausted."""
        return not self.is_free or self.credits > 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "email": self.email,
            "plan": self.plan,
            "credits": self.credits,
        }
        if self.last_payment is not None:
            data["lastPayment"] = self.last_payment
        return data

    @classmethod
    def from_dict(cls, email: str, data: dict[str, Any]) -> UserRecord:
        """Build a record from its stored form, defaulting missing or null fields.

        Non-integer credit values are treated as zero rather than blocking
        the user's reads.
        """
        try:
            credits = int(data.get("credits", FREE_TIER_CREDITS))
        except (TypeError, ValueError):
            logger.warning("Stored credits for %s are not an integer; using 0.", email)
            credits = 0
        last_payment = data.get("lastPayment")
        if last_payment is not None:
            try:
                last_payment = int(last_payment)
            except (TypeError, ValueError):
                logger.warning("Stored lastPayment for %s is not an integer; dropping it.", email)
                last_payment = None
        return cls(
            email=email,
            plan=str(data.get("plan") or Plan.FREE.value),
            credits=credits,
            last_payment=last_payment,
        )
