"""Prompt composition for cold email generation. Pure functions, no I/O."""

from __future__ import annotations

from coldreach.constants import EmailType

EMAIL_TYPE_INSTRUCTIONS: dict[EmailType, str] = {
    EmailType.FIRST_OUTREACH: (
        "First cold outreach - warm, brief, focus on one specific pain point, "
        "end with a soft ask (not pushing for immediate meeting)."
    ),
    EmailType.FOLLOW_UP: (
        "Follow-up to previous email - add new value, reference previous "
        "contact subtly, stronger CTA."
    ),
    EmailType.MEETING_REQUEST: (
        "Request a meeting - show clear ROI, suggest specific short time "
        "(15 min), make it easy to say yes."
    ),
    EmailType.VALUE_PITCH: (
        "Value proposition pitch - include a specific result/metric, explain "
        "ROI clearly, create mild urgency."
    ),
}

_UNKNOWN = "Unknown"

_PROMPT_TEMPLATE = """You are a world-class cold email copywriter. Write a highly personalized cold email.

PROSPECT INFO:
{prospect_info}

WHAT THE SENDER OFFERS:
{your_value}

EMAIL TYPE: {instruction}

STRICT REQUIREMENTS:
- Subject line: max 50 characters, personalized, makes them curious
- Body: MAXIMUM 100 words - short emails get more replies
- First line must reference something specific about them or their company
- Include ONE specific pain point relevant to their role
- ONE clear value proposition (one sentence)
- ONE call to action only
- Sound like a real human, not a robot
- NEVER start with "I hope this email finds you well"
- NEVER say "I wanted to reach out"

RESPOND IN EXACTLY THIS FORMAT:
SUBJECT: [subject line]

BODY:
[email body]"""


def instruction_for(email_type: str | None) -> str:
    """Instruction text for ``email_type``; unknown types get first-outreach."""
    try:
        key = EmailType(email_type)
    except ValueError:
        key = EmailType.FIRST_OUTREACH
    return EMAIL_TYPE_INSTRUCTIONS[key]


def manual_prospect_info(
    name: str | None = None,
    company: str | None = None,
    role: str | None = None,
    context: str | None = None,
) -> str:
    lines = [
        f"Name: {name or _UNKNOWN}",
        f"Company: {company or _UNKNOWN}",
        f"Role: {role or _UNKNOWN}",
    ]
    if context:
        lines.append(f"Extra Info: {context}")
    return "\n".join(lines)


def compose_prompt(prospect_info: str, your_value: str | None, email_type: str | None) -> str:
    return _PROMPT_TEMPLATE.format(
        prospect_info=prospect_info,
        your_value=your_value or "",
        instruction=instruction_for(email_type),
    )
