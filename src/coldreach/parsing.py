"""Tolerant parsing of the provider's ``SUBJECT:`` / ``BODY:`` output."""

from __future__ import annotations

import re
from dataclasses import dataclass

from coldreach.constants import DEFAULT_SUBJECT

# SUBJECT: takes the first non-blank text after the marker up to end of line.
_SUBJECT_RE = re.compile(r"SUBJECT:\s*(.+)")
# BODY: takes everything after the marker.
_BODY_RE = re.compile(r"BODY:\s*(.+)", re.DOTALL)


@dataclass(frozen=True)
class GeneratedEmail:
    subject: str
    body: str


def extract_sections(text: str) -> tuple[str | None, str | None]:
    """Return ``(subject, body)``, either element None when its marker is absent."""
    subject_match = _SUBJECT_RE.search(text)
    body_match = _BODY_RE.search(text)
    subject = subject_match.group(1).strip() if subject_match else None
    body = body_match.group(1).strip() if body_match else None
    return subject, body


def parse_email(text: str) -> GeneratedEmail:
    """Parse provider output, falling back to defaults for missing sections.

    Missing subject -> ``DEFAULT_SUBJECT``; missing body -> the raw output.
    """
    subject, body = extract_sections(text)
    return GeneratedEmail(
        subject=subject if subject is not None else DEFAULT_SUBJECT,
        body=body if body is not None else text.strip(),
    )
