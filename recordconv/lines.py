"""
Line reassembly over arbitrarily chunked text.

The pending partial line is passed in and handed back explicitly as a list
of text pieces, joined only once a linefeed completes it. Splitting happens
on "\\n" only; joining the chunks and splitting on linefeed gives exactly the
same lines.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Tuple

LINEFEED = "\n"


def feed(
    pending: Optional[List[str]],
    chunk: str,
    keepends: bool = False,
) -> Tuple[List[str], List[str]]:
    """
    Add ``chunk`` to the ``pending`` pieces and cut off every complete line.

    Returns (complete_lines, new_pending). A chunk without a linefeed is
    appended to ``pending`` in place, so a long line arriving in small chunks
    is copied once, when it completes.
    """
    pending = pending if pending is not None else []
    if LINEFEED not in chunk:
        if chunk:
            pending.append(chunk)
        return [], pending

    head, _, rest = chunk.partition(LINEFEED)
    parts = ["".join(pending) + head] + rest.split(LINEFEED)
    tail = parts.pop()
    if keepends:
        parts = [part + LINEFEED for part in parts]
    return parts, [tail] if tail else []


def finish(pending: Optional[List[str]]) -> List[str]:
    """The unterminated last line, if any."""
    line = "".join(pending or ())
    return [line] if line else []


def iter_lines(chunks: Iterable[str], keepends: bool = False) -> Iterator[str]:
    """Yield complete lines in arrival order, then the trailing partial line."""
    pending: List[str] = []
    for chunk in chunks:
        if not chunk:
            continue
        lines, pending = feed(pending, chunk, keepends=keepends)
        yield from lines
    yield from finish(pending)
