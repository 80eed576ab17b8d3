"""Payment signature verification: HMAC-SHA256 over ``order_id|payment_id``."""

from __future__ import annotations

import logging
from hmac import compare_digest

from cryptography.hazmat.primitives import hashes, hmac

logger = logging.getLogger(__name__)


class SignatureMismatch(Exception):
    """Raised when a payment signature does not match the expected HMAC."""


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Return the lowercase hex HMAC-SHA256 of ``order_id|payment_id``."""
    mac = hmac.HMAC(secret.encode(), hashes.SHA256())
    mac.update(f"{order_id}|{payment_id}".encode())
    return mac.finalize().hex()


def verify_signature(
    order_id: str,
    payment_id: str,
    signature: str,
    secret: str,
) -> None:
    """Verify a gateway-issued payment signature.

    Args:
        order_id: Gateway order identifier.
        payment_id: Gateway payment identifier.
        signature: Hex signature the client claims the gateway produced.
        secret: Shared key secret configured with the gateway.

    Raises:
        SignatureMismatch: On any mismatch, including a length mismatch or
            a missing secret. The comparison is constant time.
    """
    if not secret:
        raise SignatureMismatch("Payment secret is not configured.")

    expected = compute_signature(order_id, payment_id, secret)
    if not compare_digest(expected.encode(), (signature or "").encode()):
        logger.warning("Signature mismatch for order %s.", order_id)
        raise SignatureMismatch("Invalid signature")
