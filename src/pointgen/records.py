"""Parameter records produced by the parser and consumed by the serializer."""

from __future__ import annotations

import csv
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

TYPE_ALIASES = {"Integer": "DI"}
RECORD_FIELDS = ["offset", "type", "id", "tag", "label", "group", "bits", "bnd", "evt"]


@dataclass(frozen=True)
class ParameterRecord:
    offset: str
    type: str
    id: str
    tag: str
    label: str
    group: str
    bits: str = ""
    bnd: str = ""
    evt: str = ""

    @staticmethod
    def create(
        offset: str,
        type: str,
        tag: str,
        label: str,
        group: str,
        bits: str = "",
        evt: str = "",
    ) -> ParameterRecord:
        # read and write points share the offset as their id
        return ParameterRecord(
            offset=offset,
            type=type,
            id=offset,
            tag=tag,
            label=label,
            group=group,
            bits=bits,
            bnd="",
            evt=evt,
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def normalize_type(token: str) -> str:
    return TYPE_ALIASES.get(token, token)


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def encode_evt(mappings: Iterable[tuple[Any, Any]]) -> str:
    """Encode (value, label) pairs as ``"<label>"==<value>,0`` clauses joined by ``:``."""
    return ":".join(f'"{_format_value(label)}"=={_format_value(value)},0' for value, label in mappings)


def records_to_rows(records: Sequence[ParameterRecord]) -> list[dict[str, str]]:
    return [record.to_dict() for record in records]


def write_records_csv(path: Path, records: Sequence[ParameterRecord]) -> None:
    """Write records to a CSV file with a header row."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=RECORD_FIELDS)
        writer.writeheader()
        writer.writerows(records_to_rows(records))
