"""
Output serializers.

Each renderer is a generator over canonical records that yields text
fragments as soon as each record arrives, so output can be written while
input is still being read.
"""

from __future__ import annotations

import html
import json
import logging
from typing import Callable, Dict, Iterable, Iterator, Mapping

from .errors import UnsupportedFormatError
from .rules import CANONICAL_FIELDS

log = logging.getLogger(__name__)

Renderer = Callable[[Iterable[Mapping[str, str]]], Iterator[str]]

HTML_HEAD = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Data Output</title>
  <style>
    body { font-family: sans-serif; margin: 20px; }
    table { border-collapse: collapse; width: 100%; margin-top: 20px; }
    th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
    th { background-color: #f2f2f2; }
    tr:nth-child(even) { background-color: #f9f9f9; }
  </style>
</head>
<body>
  <h1>Processed Data</h1>
  <table>
"""

HTML_TAIL = """    </tbody>
  </table>
</body>
</html>
"""

EMPTY_TABLE_TEXT = "No data available"


def _json_record(record: Mapping[str, str]) -> str:
    ordered = {name: record.get(name, "") for name in CANONICAL_FIELDS}
    return json.dumps(ordered, ensure_ascii=False, separators=(",", ":"))


def render_json(records: Iterable[Mapping[str, str]]) -> Iterator[str]:
    """A JSON array, one record per line; '[]' when there are no records."""
    first = True
    for record in records:
        yield ("[\n  " if first else ",\n  ") + _json_record(record)
        first = False
    yield "[]" if first else "\n]\n"


def render_html(records: Iterable[Mapping[str, str]]) -> Iterator[str]:
    """An HTML document with one table row per record."""
    header_cells = "".join(f"        <th>{html.escape(name)}</th>\n" for name in CANONICAL_FIELDS)
    yield HTML_HEAD + "    <thead>\n      <tr>\n" + header_cells + "      </tr>\n    </thead>\n    <tbody>\n"

    empty = True
    for record in records:
        empty = False
        cells = "".join(
            f"        <td>{html.escape(str(record.get(name, '')))}</td>\n" for name in CANONICAL_FIELDS
        )
        yield "      <tr>\n" + cells + "      </tr>\n"

    if empty:
        yield (
            f'      <tr><td colspan="{len(CANONICAL_FIELDS)}" style="text-align:center;">'
            f"{EMPTY_TABLE_TEXT}</td></tr>\n"
        )
    yield HTML_TAIL


MEDIA_TYPES = {
    "json": "application/json",
    "html": "text/html",
}

_REGISTRY: Dict[str, Renderer] = {}


def register_renderer(output_type: str, renderer: Renderer) -> None:
    output_type = output_type.lower()
    if output_type in _REGISTRY:
        log.warning("renderer for %r is already registered, overwriting", output_type)
    _REGISTRY[output_type] = renderer


def create_renderer(output_type: str) -> Renderer:
    renderer = _REGISTRY.get(output_type.lower())
    if renderer is None:
        raise UnsupportedFormatError(
            f'Unsupported output type: "{output_type}". Expected one of: {", ".join(sorted(_REGISTRY))}'
        )
    return renderer


register_renderer("json", render_json)
register_renderer("html", render_html)
