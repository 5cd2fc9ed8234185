"""Tests for byte stream decoding."""

from __future__ import annotations

import codecs

import pytest

from yamlsieve.decoder import decode, detect_encoding, lines_in_files

TEXT = "key: välue\n"


class TestDetectEncoding:
    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (codecs.BOM_UTF32_BE + TEXT.encode("utf_32_be"), "utf_32"),
            (TEXT.encode("utf_32_be"), "utf_32_be"),
            (codecs.BOM_UTF32_LE + TEXT.encode("utf_32_le"), "utf_32"),
            (TEXT.encode("utf_32_le"), "utf_32_le"),
            (codecs.BOM_UTF16_BE + TEXT.encode("utf_16_be"), "utf_16"),
            (TEXT.encode("utf_16_be"), "utf_16_be"),
            (codecs.BOM_UTF16_LE + TEXT.encode("utf_16_le"), "utf_16"),
            (TEXT.encode("utf_16_le"), "utf_16_le"),
            (codecs.BOM_UTF8 + TEXT.encode("utf_8"), "utf_8_sig"),
            (TEXT.encode("utf_8"), "utf_8"),
            (b"", "utf_8"),
        ],
    )
    def test_detection(self, data: bytes, expected: str) -> None:
        assert detect_encoding(data) == expected

    def test_override(self, monkeypatch, caplog) -> None:
        monkeypatch.setenv("YAMLSIEVE_FILE_ENCODING", "latin_1")
        assert detect_encoding(TEXT.encode("utf_8")) == "latin_1"
        assert "YAMLSIEVE_FILE_ENCODING" in caplog.text


class TestDecode:
    @pytest.mark.parametrize("codec", ["utf_8_sig", "utf_16", "utf_32", "utf_16_le", "utf_32_be"])
    def test_round_trip_drops_bom(self, codec: str) -> None:
        assert decode(TEXT.encode(codec)) == TEXT

    def test_invalid_bytes(self) -> None:
        with pytest.raises(UnicodeDecodeError):
            decode(b"\xff\xfe\xfd")


def test_lines_in_files(tmp_path) -> None:
    first = tmp_path / "a"
    first.write_bytes("one\r\ntwo\n".encode("utf_16"))
    second = tmp_path / "b"
    second.write_bytes(b"three")
    assert list(lines_in_files([str(first), str(second)])) == ["one", "two", "three"]
