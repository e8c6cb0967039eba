from __future__ import annotations

from typing import Optional


class ConversionError(Exception):
    """A fatal condition: the whole conversion stops."""


class LayoutError(ConversionError):
    """No canonical column could be located in a fixed-width header line."""

    def __init__(self, message: str, header: Optional[str] = None):
        super().__init__(message)
        self.header = header


class DelimitedSyntaxError(ConversionError):
    """The delimited tokenizer rejected the input (unterminated quote, stray quote, ...)."""

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


class UnsupportedFormatError(ConversionError, ValueError):
    pass
