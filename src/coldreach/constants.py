"""Constants for ColdReach entitlement gating."""

from enum import Enum


FREE_TIER_CREDITS = 5  # balance of a user who has never been written
UNLIMITED_CREDITS = 999  # reported as creditsRemaining for paid plans
GUEST_IDENTITY = "guest"

DEFAULT_SUBJECT = "Quick question"
INSUFFICIENT_CREDITS_MESSAGE = "No credits left. Please upgrade!"
INVALID_SIGNATURE_MESSAGE = "Invalid signature"


class Plan(str, Enum):
    """Entitlement tiers. Any plan name other than free/starter is OTHER_PAID."""

    FREE = "free"
    STARTER = "starter"
    OTHER_PAID = "other-paid"

    @classmethod
    def classify(cls, name: str | None) -> "Plan":
        if name == cls.FREE.value:
            return cls.FREE
        if name == cls.STARTER.value:
            return cls.STARTER
        return cls.OTHER_PAID


# Credits granted on a verified payment, keyed by the plan that was bought.
# Only "starter" is special; every other plan name falls through to 500.
PLAN_CREDIT_GRANTS: dict[Plan, int] = {
    Plan.FREE: 500,
    Plan.STARTER: 100,
    Plan.OTHER_PAID: 500,
}


class EmailType(str, Enum):
    """Closed set of email styles the composer knows how to ask for."""

    FIRST_OUTREACH = "first-outreach"
    FOLLOW_UP = "follow-up"
    MEETING_REQUEST = "meeting-request"
    VALUE_PITCH = "value-pitch"
