"""Async HTTP client for Google Gemini's ``generateContent`` endpoint."""

from __future__ import annotations

from typing import Any

import httpx


class GeminiError(Exception):
    """Base exception for Gemini operations."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GeminiAPIError(GeminiError):
    """The provider returned an ``error`` payload (any HTTP status)."""


class GeminiResponseError(GeminiError):
    """Response body was not the expected candidates/content/parts shape."""


class GeminiConnectionError(GeminiError):
    """Network/DNS failure."""


class GeminiTimeoutError(GeminiError):
    """Request timeout."""


_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiClient:
    """Async client for the Gemini REST API.

    One request per ``generate()`` call, no retry, no streaming.
    The API key travels as the ``key`` query parameter.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash",
        base_url: str = _BASE_URL,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=httpx.Timeout(connect=5.0, read=60.0, write=10.0, pool=5.0),
        )

    @property
    def model(self) -> str:
        return self._model

    async def generate(
        self,
        prompt: str,
        max_output_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> str:
        """Return the first candidate's text for ``prompt``.

        Raises GeminiError (or a subclass) on any transport, HTTP or
        payload problem.
        """
        payload: dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": max_output_tokens,
                "temperature": temperature,
            },
        }
        try:
            response = await self._client.post(
                f"/models/{self._model}:generateContent",
                params={"key": self._api_key},
                json=payload,
            )
        except httpx.ConnectError as exc:
            raise GeminiConnectionError(str(exc)) from exc
        except httpx.TimeoutException as exc:
            raise GeminiTimeoutError(str(exc)) from exc
        except httpx.HTTPError as exc:
            raise GeminiError(str(exc)) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise GeminiResponseError(
                "Failed to parse Gemini response", status_code=response.status_code
            ) from exc

        if isinstance(body, dict) and body.get("error"):
            error = body["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise GeminiAPIError(
                message or "Unknown Gemini error", status_code=response.status_code
            )

        if response.status_code >= 400:
            raise GeminiError(response.text, status_code=response.status_code)

        try:
            return body["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise GeminiResponseError(
                "Failed to parse Gemini response", status_code=response.status_code
            ) from exc

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> GeminiClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
