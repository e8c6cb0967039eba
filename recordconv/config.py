from __future__ import annotations

import codecs
import os
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .rules import (
    AUTO_ENCODING,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_DELIMITER,
)

# Delimiters that would collide with quoting or line splitting.
_FORBIDDEN_DELIMITERS = {'"', "\n", "\r"}

_ESCAPES = {"\\t": "\t", "tab": "\t", "\\s": " ", "space": " "}


def unescape_delimiter(value: str) -> str:
    """Accept shell-friendly spellings such as '\\t' for a tab."""
    return _ESCAPES.get(value.lower() if len(value) > 1 else value, value)


class ConversionOptions(BaseModel):
    input_type: Literal["csv", "prn"] = "csv"
    output_type: Literal["json", "html"] = "json"
    delimiter: str = Field(default=DEFAULT_DELIMITER, min_length=1, max_length=1)
    encoding: str = AUTO_ENCODING
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)

    @field_validator("input_type", "output_type", mode="before")
    @classmethod
    def _lowercase_type(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("delimiter", mode="before")
    @classmethod
    def _unescape(cls, v):
        return unescape_delimiter(v) if isinstance(v, str) else v

    @field_validator("delimiter")
    @classmethod
    def _usable_delimiter(cls, v: str) -> str:
        if v in _FORBIDDEN_DELIMITERS:
            raise ValueError(f"{v!r} cannot be used as a field delimiter")
        return v

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, v: str) -> str:
        v = v.strip()
        if v.lower() == AUTO_ENCODING:
            return AUTO_ENCODING
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"unknown encoding: {v}")
        return v


def load_options(
    input_type: Optional[str] = None,
    output_type: Optional[str] = None,
    delimiter: Optional[str] = None,
    encoding: Optional[str] = None,
    chunk_size: Optional[int] = None,
) -> ConversionOptions:
    """Explicit arguments win, then RECORDCONV_* environment variables, then defaults."""
    return ConversionOptions(
        input_type=input_type or "csv",
        output_type=output_type or "json",
        delimiter=delimiter or os.getenv("RECORDCONV_DELIMITER", DEFAULT_DELIMITER),
        encoding=encoding or os.getenv("RECORDCONV_ENCODING", AUTO_ENCODING),
        chunk_size=chunk_size or os.getenv("RECORDCONV_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
    )
