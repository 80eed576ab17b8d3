"""Cold email generation: credit check, enrichment, prompt, provider call, debit."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from coldreach.constants import GUEST_IDENTITY, INSUFFICIENT_CREDITS_MESSAGE, UNLIMITED_CREDITS
from coldreach.enrichment import DEFAULT_TIMEOUT_SECS, enrich_prospect
from coldreach.entitlement import UserRecord
from coldreach.gemini_client import GeminiError
from coldreach.parsing import parse_email
from coldreach.prompts import compose_prompt, manual_prospect_info

if TYPE_CHECKING:
    import httpx

    from coldreach.entitlement_store import EntitlementSession, EntitlementStore

logger = logging.getLogger(__name__)

WEBSITE_MODE = "website"


class GenerationFailed(Exception):
    """The generation provider call failed; no credit was debited."""


class TextGenerator(Protocol):
    """Anything that turns a prompt into text (GeminiClient in production)."""

    async def generate(
        self, prompt: str, max_output_tokens: int = ..., temperature: float = ...
    ) -> str: ...


@dataclass(frozen=True)
class GenerationRequest:
    """Inputs to one generation call. Every field is optional."""

    mode: str | None = None
    email_type: str | None = None
    your_value: str | None = None
    website_url: str | None = None
    name: str | None = None
    company: str | None = None
    role: str | None = None
    context: str | None = None
    email: str | None = None


async def build_prospect_info(
    request: GenerationRequest,
    http_client: httpx.AsyncClient | None = None,
    enrichment_timeout: float = DEFAULT_TIMEOUT_SECS,
) -> str:
    """Prospect block from the website (website mode) or the manual fields."""
    if request.mode == WEBSITE_MODE and request.website_url:
        return await enrich_prospect(
            request.website_url, client=http_client, timeout=enrichment_timeout
        )
    return manual_prospect_info(
        name=request.name,
        company=request.company,
        role=request.role,
        context=request.context,
    )


async def _run_generation(
    user: UserRecord,
    session: EntitlementSession | None,
    generator: TextGenerator,
    request: GenerationRequest,
    http_client: httpx.AsyncClient | None,
    max_output_tokens: int,
    temperature: float,
    enrichment_timeout: float,
) -> dict[str, Any]:
    if not user.has_credits:
        logger.info("Generation refused for %s: no credits left.", user.email)
        return {"success": False, "error": INSUFFICIENT_CREDITS_MESSAGE}

    prospect_info = await build_prospect_info(request, http_client, enrichment_timeout)
    prompt = compose_prompt(prospect_info, request.your_value, request.email_type)

    try:
        output = await generator.generate(
            prompt, max_output_tokens=max_output_tokens, temperature=temperature
        )
    except GeminiError as e:
        raise GenerationFailed(str(e)) from e

    email = parse_email(output)

    # Debit is keyed to call success, not to whether the output parsed.
    if user.is_free and session is not None:
        await session.update({"credits": user.credits - 1})

    return {
        "success": True,
        "subject": email.subject,
        "body": email.body,
        "creditsRemaining": user.credits - 1 if user.is_free else UNLIMITED_CREDITS,
    }


async def generate_email_tool(
    store: EntitlementStore,
    generator: TextGenerator,
    request: GenerationRequest,
    http_client: httpx.AsyncClient | None = None,
    max_output_tokens: int = 1000,
    temperature: float = 0.7,
    enrichment_timeout: float = DEFAULT_TIMEOUT_SECS,
) -> dict[str, Any]:
    """Generate one cold email for the caller, charging a credit on success.

    A caller without an email is the anonymous guest: it sees the free-tier
    default and is never persisted or debited. An identified caller holds
    its entitlement lock from the credit check through the debit, so
    concurrent requests for one email cannot spend more than the balance.

    Args:
        store: Entitlement store.
        generator: Text-generation provider client.
        request: Prospect details, sender value proposition, email type.
        http_client: Optional client reused for website enrichment.
        max_output_tokens: Provider output bound.
        temperature: Provider sampling temperature.
        enrichment_timeout: Website fetch timeout in seconds.

    Returns dict with:
        success: False (with ``error``) when credits are exhausted.
        subject/body: Parsed email, with fallbacks for missing markers.
        creditsRemaining: Balance after this call, or 999 on paid plans.

    Raises:
        GenerationFailed: The provider call failed. Nothing was debited.
    """
    kwargs = {
        "http_client": http_client,
        "max_output_tokens": max_output_tokens,
        "temperature": temperature,
        "enrichment_timeout": enrichment_timeout,
    }
    if not request.email:
        guest = UserRecord(email=GUEST_IDENTITY)
        return await _run_generation(guest, None, generator, request, **kwargs)

    async with store.session(request.email) as session:
        user = await session.get()
        return await _run_generation(user, session, generator, request, **kwargs)
