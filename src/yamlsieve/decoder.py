"""Decode YAML byte streams per the encoding detection rules of YAML 1.2 §5.2."""

from __future__ import annotations

import codecs
import logging
from collections.abc import Iterable, Iterator

from yamlsieve.settings import Settings

logger = logging.getLogger("yamlsieve.decoder")


def detect_encoding(data: bytes) -> str:
    """Return the Python codec name for ``data``.

    BOM-carrying streams map to codecs that drop the BOM on decode
    (``utf_32``, ``utf_16``, ``utf_8_sig``). Without a BOM the null-byte
    pattern of the first character decides.  ``YAMLSIEVE_FILE_ENCODING``
    overrides detection.
    """
    override = Settings().file_encoding
    if override:
        logger.warning(
            "YAMLSIEVE_FILE_ENCODING is meant for temporary workarounds. "
            "It may be removed in a future version of yamlsieve."
        )
        return override

    if data.startswith(codecs.BOM_UTF32_BE):
        return "utf_32"
    if data.startswith(b"\x00\x00\x00") and len(data) >= 4:
        return "utf_32_be"
    if data.startswith(codecs.BOM_UTF32_LE):
        return "utf_32"
    if data[1:4] == b"\x00\x00\x00":
        return "utf_32_le"
    if data.startswith(codecs.BOM_UTF16_BE):
        return "utf_16"
    if data.startswith(b"\x00") and len(data) >= 2:
        return "utf_16_be"
    if data.startswith(codecs.BOM_UTF16_LE):
        return "utf_16"
    if data[1:2] == b"\x00":
        return "utf_16_le"
    if data.startswith(codecs.BOM_UTF8):
        return "utf_8_sig"
    return "utf_8"


def decode(data: bytes) -> str:
    """Decode ``data`` to text, without any byte order mark."""
    return data.decode(detect_encoding(data))


def lines_in_files(paths: Iterable[str]) -> Iterator[str]:
    """Yield the lines of every file in ``paths``, without line terminators."""
    for path in paths:
        with open(path, "rb") as f:
            yield from decode(f.read()).splitlines()
