"""ColdReach: credit-gated cold email generation.

Entitlement ledger, payment signature verification and generation
orchestration behind a small FastAPI surface.
"""

__version__ = "0.1.0"

from coldreach.config import ColdReachConfig
from coldreach.constants import Plan, EmailType, FREE_TIER_CREDITS, UNLIMITED_CREDITS
from coldreach.entitlement import UserRecord
from coldreach.entitlement_store import EntitlementStore, EntitlementSession
from coldreach.store_backend import StoreBackend
from coldreach.backends import JsonFileBackend, MemoryBackend
from coldreach.signature import SignatureMismatch, compute_signature, verify_signature
from coldreach.gemini_client import GeminiClient, GeminiError
from coldreach.razorpay_client import RazorpayClient, RazorpayError
from coldreach.enrichment import enrich_prospect

__all__ = [
    "ColdReachConfig",
    "Plan",
    "EmailType",
    "FREE_TIER_CREDITS",
    "UNLIMITED_CREDITS",
    "UserRecord",
    "EntitlementStore",
    "EntitlementSession",
    "StoreBackend",
    "JsonFileBackend",
    "MemoryBackend",
    "SignatureMismatch",
    "compute_signature",
    "verify_signature",
    "GeminiClient",
    "GeminiError",
    "RazorpayClient",
    "RazorpayError",
    "enrich_prospect",
]
