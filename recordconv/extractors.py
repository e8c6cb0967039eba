"""
Record extraction strategies.

Both strategies expose the same surface:

- ``tokenize(lines)`` turns reassembled lines into raw records,
- ``extract(raw)`` returns one canonical record or None, and raises a
  ConversionError on a fatal condition,
- ``warnings`` collects advisory report items.

Strategies are looked up by input type through a small registry.
"""

from __future__ import annotations

import csv
import logging
import re
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Protocol

from .config import ConversionOptions
from .errors import DelimitedSyntaxError, UnsupportedFormatError
from .layout import ColumnSpec, infer_layout, missing_fields, slice_line
from .normalize import canonical_field, normalize_field, normalize_row
from .rules import CANONICAL_FIELDS, DEFAULT_DELIMITER, H_CREDIT_LIMIT, MINOR_UNITS_PER_UNIT

log = logging.getLogger(__name__)

Record = Dict[str, str]

_INTEGER = re.compile(r"[+-]?[0-9]+")


class Extractor(Protocol):
    keepends: bool
    warnings: List[dict]

    def tokenize(self, lines: Iterable[str]) -> Iterator[Any]:
        ...

    def extract(self, raw: Any) -> Optional[Record]:
        """Return a canonical record, or None when ``raw`` produces no record."""
        ...


class DelimitedExtractor:
    """Delimited text via the csv module; the first non-empty row is the header."""

    # the csv reader must see line terminators to keep quoted newlines
    keepends = True

    def __init__(self, delimiter: str = DEFAULT_DELIMITER):
        self.delimiter = delimiter
        self.headers: Optional[List[str]] = None
        self.warnings: List[dict] = []
        self._columns: Dict[str, int] = {}

    def tokenize(self, lines: Iterable[str]) -> Iterator[List[str]]:
        reader = csv.reader(lines, delimiter=self.delimiter, strict=True)
        while True:
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                raise DelimitedSyntaxError(
                    f"CSV parsing error: {e} (line {reader.line_num})", line=reader.line_num
                ) from e
            yield row

    def on_header(self, row: List[str]) -> List[str]:
        headers = [self.cast_cell(cell, None) for cell in row]
        columns: Dict[str, int] = {}
        for idx, header in enumerate(headers):
            name = canonical_field(header)
            if name is not None and name not in columns:
                columns[name] = idx
        self.headers = headers
        self._columns = columns

        unmatched = [name for name in CANONICAL_FIELDS if name not in columns]
        if unmatched:
            log.debug("delimited header has no column for: %s", ", ".join(unmatched))
        ignored = [h for h in headers if canonical_field(h) is None]
        if ignored:
            log.debug("ignoring non-canonical columns: %s", ", ".join(ignored))
        return headers

    def cast_cell(self, value: str, column: Optional[int]) -> str:
        """Header cells (column None) and cells past the header width are trimmed only."""
        if column is None or self.headers is None or column >= len(self.headers):
            return value.strip()
        return normalize_field(self.headers[column], value)

    def on_record(self, row: List[str]) -> Record:
        record: Record = {}
        for name in CANONICAL_FIELDS:
            idx = self._columns.get(name)
            if idx is None or idx >= len(row):
                record[name] = normalize_field(name, None)
            else:
                record[name] = self.cast_cell(row[idx], idx)
        return record

    def extract(self, raw: List[str]) -> Optional[Record]:
        if not raw:
            return None
        if self.headers is None:
            self.on_header(raw)
            return None
        return self.on_record(raw)


def minor_units_to_amount(value: str) -> str:
    """'10000' -> '100.00'; anything that is not an integer passes through."""
    if not _INTEGER.fullmatch(value):
        return value
    return str(Decimal(value) / MINOR_UNITS_PER_UNIT)


class FixedWidthExtractor:
    """Fixed-width text; column boundaries come from the first non-blank line."""

    keepends = False

    def __init__(self):
        self.specs: Optional[List[ColumnSpec]] = None
        self.warnings: List[dict] = []
        self._line_no = 0

    def tokenize(self, lines: Iterable[str]) -> Iterator[str]:
        return iter(lines)

    def on_header(self, line: str) -> List[ColumnSpec]:
        specs = infer_layout(line)
        missing = missing_fields(specs)
        if missing:
            log.warning(
                "fixed-width header is missing columns, defaults will be used: %s",
                ", ".join(missing),
            )
            self.warnings.append({
                "row": self._line_no,
                "column": None,
                "issue": "missing_columns",
                "value": ", ".join(missing),
                "action": "filled_with_defaults",
            })
        self.specs = specs
        return specs

    def extract(self, raw: str) -> Optional[Record]:
        self._line_no += 1
        if not raw.strip():
            return None
        if self.specs is None:
            self.on_header(raw)
            return None

        values: Dict[str, str] = {}
        last = len(self.specs) - 1
        for i, spec in enumerate(self.specs):
            value = slice_line(raw, spec, open_end=(i == last)).strip()
            if spec.name == H_CREDIT_LIMIT:
                value = minor_units_to_amount(value)
            values[spec.name] = value
        return normalize_row(values)


ExtractorFactory = Callable[[ConversionOptions], Extractor]

_REGISTRY: Dict[str, ExtractorFactory] = {}


def register_extractor(input_type: str, factory: ExtractorFactory) -> None:
    input_type = input_type.lower()
    if input_type in _REGISTRY:
        log.warning("extractor for %r is already registered, overwriting", input_type)
    _REGISTRY[input_type] = factory


def create_extractor(input_type: str, options: Optional[ConversionOptions] = None) -> Extractor:
    factory = _REGISTRY.get(input_type.lower())
    if factory is None:
        raise UnsupportedFormatError(
            f"Unsupported input type: {input_type}. Expected one of: {', '.join(sorted(_REGISTRY))}"
        )
    return factory(options or ConversionOptions(input_type=input_type))


register_extractor("csv", lambda options: DelimitedExtractor(delimiter=options.delimiter))
register_extractor("prn", lambda options: FixedWidthExtractor())
