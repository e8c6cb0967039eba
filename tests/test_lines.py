import random

import pytest

from recordconv.lines import feed, finish, iter_lines

TEXT = "Name  Address\nJohn  Main St 1\n\nJane  Børkestraße 32\r\nlast line without end"


def expected_lines(text):
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return parts


def partition(text, sizes):
    out, pos = [], 0
    for size in sizes:
        out.append(text[pos:pos + size])
        pos += size
    out.append(text[pos:])
    return out


def test_single_chunk():
    assert list(iter_lines([TEXT])) == expected_lines(TEXT)


def test_character_by_character():
    assert list(iter_lines(list(TEXT))) == expected_lines(TEXT)


@pytest.mark.parametrize("size", [1, 2, 3, 5, 7, 13, 64, 10_000])
def test_fixed_size_chunks(size):
    chunks = [TEXT[i:i + size] for i in range(0, len(TEXT), size)]
    assert list(iter_lines(chunks)) == expected_lines(TEXT)


@pytest.mark.parametrize("seed", range(20))
def test_random_partitions(seed):
    rng = random.Random(seed)
    sizes = [rng.randint(0, 9) for _ in range(rng.randint(1, 30))]
    assert list(iter_lines(partition(TEXT, sizes))) == expected_lines(TEXT)


def test_trailing_linefeed_adds_no_empty_line():
    assert list(iter_lines(["a\nb\n"])) == ["a", "b"]
    assert list(iter_lines(["a\n", "\n"])) == ["a", ""]


def test_empty_input():
    assert list(iter_lines([])) == []
    assert list(iter_lines(["", ""])) == []


def test_keepends_round_trips_the_text():
    chunks = [TEXT[i:i + 4] for i in range(0, len(TEXT), 4)]
    lines = list(iter_lines(chunks, keepends=True))
    assert "".join(lines) == TEXT
    assert lines[0] == "Name  Address\n"
    assert lines[-1] == "last line without end"


def test_carriage_return_split_from_its_linefeed():
    assert list(iter_lines(["a\r", "\nb"])) == ["a\r", "b"]


def test_explicit_accumulator():
    lines, pending = feed([], "Na")
    assert lines == [] and pending == ["Na"]

    lines, pending = feed(pending, "me\nJo")
    assert lines == ["Name"] and pending == ["Jo"]

    lines, pending = feed(pending, "hn\n\nJa")
    assert lines == ["John", ""] and pending == ["Ja"]

    assert finish(pending) == ["Ja"]
    assert finish([]) == []
    assert finish(None) == []


def test_long_line_pieces_are_joined_once():
    pending = []
    for _ in range(10_000):
        lines, pending = feed(pending, "x")
        assert lines == []
    assert len(pending) == 10_000

    lines, pending = feed(pending, "y\nz")
    assert lines == ["x" * 10_000 + "y"]
    assert pending == ["z"]
