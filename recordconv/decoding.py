"""
Byte decoding for incoming payloads.

Rules:
- A UTF-8 BOM always wins (decoded with utf-8-sig so it never reaches the parsers).
- A sample that is valid UTF-8 (a sequence cut off at the sample edge included) is UTF-8.
- Otherwise charset-normalizer is asked; Unicode guesses (UTF-16/32) are kept,
  every single-byte guess is read as latin-1, which never fails and keeps
  legacy exports byte-for-byte.
- An explicit utf-8 is read as utf-8-sig so a stray BOM is dropped.
- Decoding never fails: undecodable bytes become replacement characters.
"""

from __future__ import annotations

import codecs
import logging
from typing import Iterable, Iterator, Optional

from charset_normalizer import from_bytes

from .rules import AUTO_ENCODING, DETECTION_SAMPLE_SIZE, FALLBACK_ENCODING, SINGLE_BYTE_ENCODING

log = logging.getLogger(__name__)

_UTF8_BOM = codecs.BOM_UTF8


def _canonical_codec(name: str) -> str:
    return codecs.lookup(name).name


def _is_utf8(sample: bytes) -> bool:
    # final=False: an incomplete trailing sequence is buffered, not rejected
    try:
        codecs.getincrementaldecoder("utf-8")().decode(sample, final=False)
    except UnicodeDecodeError:
        return False
    return True


def detect_encoding(sample: bytes) -> str:
    """Best guess for the encoding of ``sample``; never raises."""
    if sample.startswith(_UTF8_BOM):
        return "utf-8-sig"
    if not sample or _is_utf8(sample):
        return FALLBACK_ENCODING

    match = from_bytes(sample).best()
    if match is None:
        return SINGLE_BYTE_ENCODING

    detected = match.encoding
    try:
        detected = _canonical_codec(detected)
    except LookupError:
        log.warning("detected encoding %r is not a known codec, using %s", detected, SINGLE_BYTE_ENCODING)
        return SINGLE_BYTE_ENCODING

    if detected.startswith("utf-"):
        return detected
    log.debug("single-byte guess %s read as %s", detected, SINGLE_BYTE_ENCODING)
    return SINGLE_BYTE_ENCODING


class DecodeState:
    """Records which encoding a decode run settled on, for reporting."""

    def __init__(self) -> None:
        self.requested: str = AUTO_ENCODING
        self.used: Optional[str] = None
        self.detected: Optional[str] = None


def decode_chunks(
    chunks: Iterable[bytes],
    encoding: str = AUTO_ENCODING,
    state: Optional[DecodeState] = None,
) -> Iterator[str]:
    """
    Decode an iterable of byte chunks into text chunks.

    With ``encoding="auto"`` up to DETECTION_SAMPLE_SIZE bytes are held back
    until the encoding is known; after that every chunk is decoded as it
    arrives. An incremental decoder keeps multi-byte sequences that straddle a
    chunk boundary intact.
    """
    state = state if state is not None else DecodeState()
    state.requested = encoding

    it = iter(chunks)
    held: list[bytes] = []

    if encoding.lower() == AUTO_ENCODING:
        size = 0
        for chunk in it:
            if not chunk:
                continue
            held.append(bytes(chunk))
            size += len(chunk)
            if size >= DETECTION_SAMPLE_SIZE:
                break
        sample = b"".join(held)[:DETECTION_SAMPLE_SIZE]
        state.detected = detect_encoding(sample)
        codec = state.detected
    elif _canonical_codec(encoding) == "utf-8":
        codec = "utf-8-sig"
    else:
        codec = encoding

    decoder = codecs.getincrementaldecoder(codec)(errors="replace")
    state.used = codec
    log.debug("decoding input as %s (requested %s)", codec, encoding)

    for chunk in held:
        text = decoder.decode(chunk)
        if text:
            yield text
    held = []

    for chunk in it:
        if not chunk:
            continue
        text = decoder.decode(bytes(chunk))
        if text:
            yield text

    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail
