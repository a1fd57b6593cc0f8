"""HTTP client for the chat-completions enrichment service."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from pointgen.config import EnrichmentConfig

logger = logging.getLogger(__name__)


class EnrichmentServiceError(RuntimeError):
    """The service answered, but not with a usable completion."""


def build_request(text: str, config: EnrichmentConfig) -> dict[str, Any]:
    return {
        "model": config.model,
        "messages": [
            {"role": "system", "content": config.instruction},
            {"role": "user", "content": text},
        ],
        "temperature": config.temperature,
        "max_tokens": config.max_tokens,
    }


def request_enrichment(
    text: str, config: EnrichmentConfig, client: httpx.Client | None = None
) -> str:
    """Send the raw table to the service and return the completion text.

    One request, no retry. Transport and HTTP status failures surface as
    ``httpx.HTTPError``; a body without a completion raises EnrichmentServiceError.
    """
    if not config.api_key:
        raise EnrichmentServiceError("No API key configured for enrichment.")
    headers = {
        "Authorization": f"Bearer {config.api_key}",
        "Content-Type": "application/json",
    }
    logger.debug("requesting enrichment from %s (%s)", config.endpoint, config.model)
    owns_client = client is None
    http = client or httpx.Client(timeout=config.timeout)
    try:
        response = http.post(config.endpoint, json=build_request(text, config), headers=headers)
        response.raise_for_status()
        try:
            body = response.json()
            content = body["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise EnrichmentServiceError(f"Malformed enrichment response: {exc!r}") from exc
    finally:
        if owns_client:
            http.close()
    if not isinstance(content, str):
        raise EnrichmentServiceError("Enrichment response has no message content.")
    return content
