"""Point-file generation workflow.

``render_from_text`` is the pure engine: text (plus an optional saved enrichment
response) in, point-file text out. ``generate_point_file`` adds the optional network
enrichment step and converts a failed exchange into a single diagnostic line.
"""

from __future__ import annotations

import logging

import httpx

from pointgen.client import request_enrichment
from pointgen.config import EnrichmentConfig
from pointgen.enrich import merge_enrichment
from pointgen.parser import parse_raw_details
from pointgen.serializer import render_point_file

logger = logging.getLogger(__name__)

ERROR_PREFIX = "// Error: "


def render_from_text(text: str, enrichment: str | None = None) -> str:
    records = parse_raw_details(text)
    if enrichment is not None:
        records = merge_enrichment(records, enrichment)
    return render_point_file(records)


def generate_point_file(
    text: str,
    use_enrichment: bool = False,
    config: EnrichmentConfig | None = None,
    client: httpx.Client | None = None,
) -> str:
    """Render ``text``, enriching through the service when enabled and keyed.

    On a failed service exchange the whole output is replaced by ``// Error: ...``.
    """
    config = config or EnrichmentConfig()
    if not (use_enrichment and config.api_key):
        return render_from_text(text)
    try:
        response = request_enrichment(text, config, client=client)
    except Exception as exc:  # any failed exchange becomes the diagnostic line
        logger.warning("enrichment call failed: %s", exc)
        return f"{ERROR_PREFIX}{exc}"
    return render_from_text(text, enrichment=response)
