"""ColdReach configuration: plain frozen dataclass, no pydantic.

The host application constructs this from its own settings (env vars,
.env files, etc.) and passes it to the ColdReach tools and server.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ColdReachConfig:
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_max_output_tokens: int = 1000
    gemini_temperature: float = 0.7
    razorpay_key_id: str | None = None
    razorpay_key_secret: str | None = None
    razorpay_currency: str = "INR"
    users_file: str = "users.json"
    enrichment_timeout_secs: float = 5.0
    host: str = "0.0.0.0"
    port: int = 3001
