"""Prospect enrichment from a company web page.

Best effort only: any failure degrades to a URL-only summary and is never
propagated to the caller.
"""

from __future__ import annotations

import logging

import httpx
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_HEADERS = {"User-Agent": "Mozilla/5.0"}
DEFAULT_TIMEOUT_SECS = 5.0


class EnrichmentError(Exception):
    """Internal signal that a page could not be summarised."""


def url_only_summary(url: str) -> str:
    return f"Company Website: {url}"


def summarize_html(url: str, html: str) -> str:
    """Build the three-line summary from page markup.

    Raises EnrichmentError when the page has neither a title nor a
    meta description.
    """
    soup = BeautifulSoup(html, "html.parser")
    title = soup.title.get_text(strip=True) if soup.title else ""
    meta = soup.find("meta", attrs={"name": "description"})
    description = ""
    if meta is not None:
        description = (meta.get("content") or "").strip()
    if not title and not description:
        raise EnrichmentError("No title or description found.")
    return f"Company Website: {url}\nTitle: {title}\nDescription: {description}"


async def _fetch(client: httpx.AsyncClient, url: str, timeout: float) -> str:
    response = await client.get(
        url, headers=_HEADERS, timeout=timeout, follow_redirects=True
    )
    response.raise_for_status()
    content_type = response.headers.get("content-type", "")
    if content_type and "html" not in content_type.lower():
        raise EnrichmentError(f"Unexpected content type {content_type!r}.")
    return response.text


async def enrich_prospect(
    url: str,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECS,
) -> str:
    """Summarise the page at ``url`` for the prompt's prospect block.

    Uses ``client`` when given, otherwise a short-lived client. Returns
    ``Company Website: <url>`` alone when the page cannot be fetched or
    yields nothing useful.
    """
    try:
        if client is not None:
            html = await _fetch(client, url, timeout)
        else:
            async with httpx.AsyncClient() as own_client:
                html = await _fetch(own_client, url, timeout)
        return summarize_html(url, html)
    except (httpx.HTTPError, httpx.InvalidURL, EnrichmentError) as e:
        logger.info("Enrichment degraded for %s: %s", url, e)
    except Exception:
        logger.warning("Enrichment failed unexpectedly for %s.", url, exc_info=True)
    return url_only_summary(url)
