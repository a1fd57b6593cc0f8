"""Parser for free-form parameter tables.

Input layout:
- first non-empty line: group name shared by every point
- each following line: ``<offset> <type> <rest>``
- ``rest`` is either a bit-field list (``Bits 0: Ready; Bits 1-2: Mode``) or a
  parameter name followed by value mappings (``Speed 0: Slow 1: Fast``)

Lines are first parsed into ``BitFieldLine`` / ``ValueMappingLine`` bodies and only
then turned into ``ParameterRecord`` values. Segments that do not match the bit-field
grammar are kept on the line as ``skipped`` and produce no record.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from pointgen.records import ParameterRecord, encode_evt, normalize_type
from pointgen.tags import indexed_tag, synthesize_tag

logger = logging.getLogger(__name__)

LINE_SPLIT_RE = re.compile(r"\r?\n")
WHITESPACE_RE = re.compile(r"\s+")
BITS_TYPO_RE = re.compile(r"bits([0-9]+)", re.IGNORECASE)
BIT_FIELD_RE = re.compile(r"Bits?\s+[0-9]")
SEGMENT_SPLIT_RE = re.compile(r";|,(?=\s*Bits?\s+[0-9]+)")
SEGMENT_RE = re.compile(r"(?:Bits?\s*)?([0-9]+)(?:-([0-9]+))?:\s*([^;]+)", re.IGNORECASE)
MAPPING_RE = re.compile(r"([0-9]+):\s*([^:]+)(?=\s+[0-9]+:|$)")
MAPPING_KEY_RE = re.compile(r"[0-9]+:")


@dataclass
class BitFieldSegment:
    position: int
    start: str
    end: str | None
    description: str

    @property
    def bits(self) -> str:
        return f"{self.start}-{self.end}" if self.end else self.start


@dataclass
class BitFieldLine:
    segments: list[BitFieldSegment] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


@dataclass
class ValueMapping:
    value: str
    label: str


@dataclass
class ValueMappingLine:
    name: str
    mappings: list[ValueMapping] = field(default_factory=list)

    @property
    def evt(self) -> str:
        return encode_evt((m.value, m.label) for m in self.mappings)


@dataclass
class DetailLine:
    offset: str
    type: str
    rest: str
    body: BitFieldLine | ValueMappingLine


@dataclass
class ParsedInput:
    group: str
    lines: list[str]


def tokenize_input(text: str) -> ParsedInput | None:
    """Split raw text into the group header and detail lines.

    Returns None when fewer than two non-empty lines are present.
    """
    lines = [line.strip() for line in LINE_SPLIT_RE.split(text.strip())]
    lines = [line for line in lines if line]
    if len(lines) < 2:
        return None
    return ParsedInput(group=lines[0], lines=lines[1:])


def extract_bit_fields(rest: str) -> BitFieldLine:
    body = BitFieldLine()
    segments = [s.strip() for s in SEGMENT_SPLIT_RE.split(rest)]
    for position, segment in enumerate([s for s in segments if s], start=1):
        match = SEGMENT_RE.search(segment)
        if not match:
            body.skipped.append(segment)
            continue
        start, end, description = match.groups()
        body.segments.append(
            BitFieldSegment(position=position, start=start, end=end, description=description)
        )
    return body


def extract_value_mappings(rest: str) -> ValueMappingLine:
    mappings = [
        ValueMapping(value=m.group(1), label=m.group(2).strip()) for m in MAPPING_RE.finditer(rest)
    ]
    if mappings:
        name = MAPPING_KEY_RE.split(rest, maxsplit=1)[0].strip()
    else:
        name = rest.strip()
    return ValueMappingLine(name=name, mappings=mappings)


def decompose_line(line: str) -> DetailLine:
    """Split a detail line into offset, type and a parsed body."""
    line = BITS_TYPO_RE.sub(r"Bits \1", line)
    tokens = WHITESPACE_RE.split(line.strip())
    offset = tokens[0]
    # a line holding only an offset has no type token
    type_token = tokens[1] if len(tokens) > 1 else ""
    rest = " ".join(tokens[2:])
    body: BitFieldLine | ValueMappingLine
    if BIT_FIELD_RE.search(rest):
        body = extract_bit_fields(rest)
    else:
        body = extract_value_mappings(rest)
    return DetailLine(offset=offset, type=normalize_type(type_token), rest=rest, body=body)


def records_from_line(detail: DetailLine, group: str) -> list[ParameterRecord]:
    body = detail.body
    if isinstance(body, BitFieldLine):
        return [
            ParameterRecord.create(
                offset=detail.offset,
                type=detail.type,
                tag=indexed_tag(segment.description, segment.position),
                label=segment.description.strip(),
                group=group,
                bits=segment.bits,
            )
            for segment in body.segments
        ]
    return [
        ParameterRecord.create(
            offset=detail.offset,
            type=detail.type,
            tag=synthesize_tag(body.name),
            label=body.name,
            group=group,
            evt=body.evt,
        )
    ]


def parse_raw_details(text: str) -> list[ParameterRecord]:
    """Parse a parameter table into point records, in input order."""
    parsed = tokenize_input(text)
    if parsed is None:
        logger.debug("input has fewer than two non-empty lines; no records")
        return []
    records: list[ParameterRecord] = []
    for line in parsed.lines:
        detail = decompose_line(line)
        if isinstance(detail.body, BitFieldLine) and detail.body.skipped:
            logger.debug("offset %s: skipped segments %s", detail.offset, detail.body.skipped)
        records.extend(records_from_line(detail, parsed.group))
    logger.debug("parsed %d records for group %r", len(records), parsed.group)
    return records
