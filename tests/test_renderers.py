import json

import pytest

from recordconv.errors import UnsupportedFormatError
from recordconv.renderers import create_renderer, render_html, render_json
from recordconv.rules import CANONICAL_FIELDS


def test_json_empty_is_an_empty_array():
    out = "".join(render_json([]))
    assert out == "[]"
    assert json.loads(out) == []


def test_json_records(expected_records):
    out = "".join(render_json(expected_records))
    assert out.startswith("[\n  {")
    assert out.endswith("}\n]\n")
    assert json.loads(out) == expected_records
    # one record per line, keys in canonical order, non-ASCII kept as-is
    lines = out.splitlines()
    assert len(lines) == len(expected_records) + 2
    assert list(json.loads(lines[1].rstrip(","))) == list(CANONICAL_FIELDS)
    assert "Børkestraße" in out


def test_json_yields_per_record():
    fragments = list(render_json([{"Name": "a"}, {"Name": "b"}]))
    assert len(fragments) == 3


def test_html_always_has_the_six_headers():
    out = "".join(render_html([]))
    for name in CANONICAL_FIELDS:
        assert f"<th>{name}</th>" in out
    assert out.count("<th>") == 6


def test_html_empty_has_placeholder_row():
    out = "".join(render_html([]))
    assert '<td colspan="6" style="text-align:center;">No data available</td>' in out
    assert out.startswith("<!DOCTYPE html>")
    assert out.rstrip().endswith("</html>")


def test_html_rows_in_canonical_order(expected_records):
    out = "".join(render_html(expected_records))
    assert "No data available" not in out
    assert out.count("<tr>") == len(expected_records) + 1
    first_row = out.split("<tbody>")[1].split("</tr>")[0]
    cells = [c.split("</td>")[0] for c in first_row.split("<td>")[1:]]
    assert cells == ["Johnson, John", "Voorstraat 32", "3122GG", "0203849381", "10000.00", "1987-01-01"]


def test_html_escapes_values():
    out = "".join(render_html([{"Name": "<b>Tom & \"Jerry\"</b>", "Address": "O'Brien"}]))
    assert "<b>Tom" not in out
    assert "&lt;b&gt;Tom &amp; &quot;Jerry&quot;&lt;/b&gt;" in out
    assert "O&#x27;Brien" in out


def test_create_renderer():
    assert create_renderer("JSON") is render_json
    assert create_renderer("html") is render_html
    with pytest.raises(UnsupportedFormatError):
        create_renderer("xml")
