"""
Fixed-width layout inference.

Column boundaries come from where each canonical header name sits in the
first non-blank line. A column runs from its header's first character up to
the next header's first character; the last column runs to the end of the
(right-trimmed) header line. Nothing here looks at data values.
"""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Sequence, Tuple

from .errors import LayoutError
from .rules import CANONICAL_FIELDS

log = logging.getLogger(__name__)


class ColumnSpec(NamedTuple):
    name: str
    start: int
    end: int  # exclusive


def find_header(line: str, name: str, claimed: Sequence[Tuple[int, int]] = ()) -> int:
    """
    Offset of the first occurrence of ``name`` that does not overlap a claimed span.

    A hit overlapping a claimed (start, end) span restarts the search just past
    that span's start, so a name is never matched inside another header's token.
    Returns -1 when there is no such occurrence.
    """
    if not name:
        return -1
    pos = 0
    while True:
        hit = line.find(name, pos)
        if hit == -1:
            return -1
        hit_end = hit + len(name)
        blocker = next((s for s, e in claimed if hit < e and s < hit_end), None)
        if blocker is None:
            return hit
        pos = max(blocker, hit) + 1


def infer_layout(header_line: str, fields: Sequence[str] = CANONICAL_FIELDS) -> List[ColumnSpec]:
    """
    Derive ordered column specs from a fixed-width header line.

    Raises LayoutError when the line has content but none of ``fields`` occur in it.
    Fields that are not found get no spec.
    """
    line = header_line.rstrip()

    found: List[Tuple[str, int]] = []
    claimed: List[Tuple[int, int]] = []
    for name in fields:
        start = find_header(line, name, claimed)
        if start == -1:
            log.debug("header %r not found in header line", name)
            continue
        found.append((name, start))
        claimed.append((start, start + len(name)))

    # headers are not necessarily in canonical order
    found.sort(key=lambda pair: pair[1])

    specs: List[ColumnSpec] = []
    for i, (name, start) in enumerate(found):
        end = found[i + 1][1] if i + 1 < len(found) else len(line)
        specs.append(ColumnSpec(name, start, end))

    if not specs and line:
        raise LayoutError(
            "Could not derive any column specifications from the fixed-width header line. "
            f"Expected some of: {', '.join(fields)}",
            header=line,
        )

    log.debug("column specs: %s", specs)
    return specs


def missing_fields(specs: Sequence[ColumnSpec], fields: Sequence[str] = CANONICAL_FIELDS) -> List[str]:
    present = {spec.name for spec in specs}
    return [name for name in fields if name not in present]


def slice_line(line: str, spec: ColumnSpec, open_end: bool = False) -> str:
    """
    Raw value under ``spec``; empty when the line stops before the column.

    With ``open_end`` the slice runs to the end of the line, for the last
    column of a layout.
    """
    if spec.start >= len(line):
        return ""
    if open_end:
        return line[spec.start:]
    return line[spec.start:min(spec.end, len(line))]
