"""Tag synthesis for point identifiers.

Tags are the uppercased label with every run of characters outside ``[A-Z0-9]``
collapsed into one underscore. Collisions are not detected: two labels that reduce
to the same tag produce duplicate tags downstream.
"""

from __future__ import annotations

import re

NON_TAG_RE = re.compile(r"[^A-Z0-9]+")


def synthesize_tag(label: str) -> str:
    """Derive an uppercase ``[A-Z0-9_]`` tag from a human label."""
    return NON_TAG_RE.sub("_", label.upper())


def indexed_tag(label: str, index: int) -> str:
    """Tag for the ``index``-th (1-based) bit-field segment of a line."""
    return f"{synthesize_tag(label)}_{index}"
