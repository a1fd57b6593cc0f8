"""Render parameter records as point-file lines.

Line layout (fixed, consumed by the monitoring system)::

    :SAFRAN_X:PNT: <type>:<id>:<tag>:"<label>[ [Bits <bits>]]":grp "<group>"[:bnd <bnd>][:evt <evt>]:
"""

from __future__ import annotations

from collections.abc import Iterable

from pointgen.records import ParameterRecord

LINE_PREFIX = ":SAFRAN_X:PNT: "


def render_record(record: ParameterRecord) -> str:
    label = record.label
    if record.bits:
        label += f" [Bits {record.bits}]"
    line = f'{LINE_PREFIX}{record.type}:{record.id}:{record.tag}:"{label}":grp "{record.group}"'
    if record.bnd:
        line += f":bnd {record.bnd}"
    if record.evt:
        line += f":evt {record.evt}"
    return line + ":"


def render_point_file(records: Iterable[ParameterRecord]) -> str:
    return "\n".join(render_record(record) for record in records)
