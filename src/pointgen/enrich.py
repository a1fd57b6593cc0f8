"""Merge enrichment-service metadata into parsed records.

The service answers in free text that should embed one JSON object::

    {"group": "...", "parameters": [{"offset": 100, "name": "...", "bits": "...",
                                     "values": [{"label": "...", "value": 0}]}]}

Decoding is fail-open: anything that cannot be decoded leaves the records untouched,
so enrichment never blocks point-file generation.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import orjson

from pointgen.records import ParameterRecord, encode_evt

logger = logging.getLogger(__name__)

JSON_OBJECT_RE = re.compile(r"\{[\s\S]*?\}(?=[\r\n\u2028\u2029]|\Z)")
INT_PREFIX_RE = re.compile(r"^\s*([+-]?)(?:0[xX]([0-9a-fA-F]+)|([0-9]+))")

NO_JSON_OBJECT = "no_json_object"
INVALID_JSON = "invalid_json"
MISSING_PARAMETERS = "missing_parameters"


@dataclass
class EnrichmentParameter:
    offset: Any
    name: Any = None
    description: Any = None
    bits: Any = None
    values: list[dict[str, Any]] | None = None

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> EnrichmentParameter:
        values = payload.get("values")
        return EnrichmentParameter(
            offset=payload.get("offset"),
            name=payload.get("name"),
            description=payload.get("description"),
            bits=payload.get("bits"),
            values=values if isinstance(values, list) else None,
        )

    def evt(self) -> str:
        pairs = []
        for entry in self.values or []:
            if isinstance(entry, dict):
                pairs.append((entry.get("value"), entry.get("label")))
        return encode_evt(pairs)


@dataclass
class EnrichmentOutcome:
    decoded: bool
    group: str | None = None
    parameters: list[EnrichmentParameter] = field(default_factory=list)
    reason: str | None = None


def parse_int_prefix(value: Any) -> int | None:
    """Integer value of the leading digits of ``value``, or None if there are none.

    ``"100"``, ``" 100 "``, ``"100abc"`` and ``100.0`` all give 100; ``"0x64"`` gives
    100; ``"abc"`` gives None.
    """
    if value is None or isinstance(value, bool):
        return None
    match = INT_PREFIX_RE.match(str(value))
    if not match:
        return None
    sign, hex_digits, digits = match.groups()
    number = int(hex_digits, 16) if hex_digits else int(digits)
    return -number if sign == "-" else number


def decode_enrichment(text: str) -> EnrichmentOutcome:
    """Locate and decode the JSON object embedded in a service response."""
    match = JSON_OBJECT_RE.search(text or "")
    if not match:
        return EnrichmentOutcome(decoded=False, reason=NO_JSON_OBJECT)
    try:
        payload = orjson.loads(match.group(0))
    except orjson.JSONDecodeError:
        return EnrichmentOutcome(decoded=False, reason=INVALID_JSON)
    if not isinstance(payload, dict) or not isinstance(payload.get("parameters"), list):
        return EnrichmentOutcome(decoded=False, reason=MISSING_PARAMETERS)
    group = payload.get("group")
    return EnrichmentOutcome(
        decoded=True,
        group=str(group) if group is not None else None,
        parameters=[
            EnrichmentParameter.from_mapping(entry)
            for entry in payload["parameters"]
            if isinstance(entry, dict)
        ],
    )


def _find_parameter(
    parameters: Sequence[EnrichmentParameter], offset: str
) -> EnrichmentParameter | None:
    wanted = parse_int_prefix(offset)
    if wanted is None:
        return None
    for parameter in parameters:
        if parse_int_prefix(parameter.offset) == wanted:
            return parameter
    return None


def apply_outcome(
    records: Sequence[ParameterRecord], outcome: EnrichmentOutcome
) -> list[ParameterRecord]:
    if not outcome.decoded:
        return list(records)
    merged: list[ParameterRecord] = []
    for record in records:
        parameter = _find_parameter(outcome.parameters, record.offset)
        if parameter is None:
            merged.append(record)
            continue
        merged.append(
            dataclasses.replace(
                record,
                label=str(parameter.name) if parameter.name else record.label,
                bits=str(parameter.bits) if parameter.bits else record.bits,
                evt=parameter.evt() if parameter.values is not None else record.evt,
            )
        )
    return merged


def merge_enrichment(records: Sequence[ParameterRecord], response: str) -> list[ParameterRecord]:
    """Merge a service response into ``records``; unchanged when it cannot be decoded."""
    outcome = decode_enrichment(response)
    if not outcome.decoded:
        logger.debug("enrichment response ignored: %s", outcome.reason)
    return apply_outcome(records, outcome)
