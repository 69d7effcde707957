"""Tests for raw value normalisation and diagnostic decoders."""

from __future__ import annotations

import pytest

from ballot_verifier.cases import BALLOT_WINNER_HEX
from ballot_verifier.encoding import (
    AsciiDecoder,
    HexDecoder,
    encode_bytes32,
    get_decoder,
    Utf8Decoder,
    list_decoders,
    to_bytes,
    to_hex,
)


def test_to_bytes_accepts_prefixed_and_bare_hex() -> None:
    assert to_bytes("0x4d61") == b"Ma"
    assert to_bytes("4d61") == b"Ma"
    assert to_bytes("0X4D61") == b"Ma"


def test_to_bytes_passes_binary_through() -> None:
    assert to_bytes(b"\x00\x01") == b"\x00\x01"
    assert to_bytes(bytearray(b"ab")) == b"ab"
    assert to_bytes(memoryview(b"ab")) == b"ab"


@pytest.mark.parametrize("bad_value", ["0x123", "0xzz", "hello", "0x4d 61"])
def test_to_bytes_rejects_malformed_hex(bad_value: str) -> None:
    with pytest.raises(ValueError):
        to_bytes(bad_value)


def test_to_bytes_rejects_other_types() -> None:
    with pytest.raises(TypeError):
        to_bytes(1234)  # type: ignore[arg-type]


def test_to_hex_is_lower_case_and_keeps_padding() -> None:
    assert to_hex(BALLOT_WINNER_HEX.upper().replace("0X", "0x")) == BALLOT_WINNER_HEX
    assert len(to_bytes(BALLOT_WINNER_HEX)) == 32


def test_encode_bytes32_matches_ballot_literal() -> None:
    assert encode_bytes32("Manolo") == to_bytes(BALLOT_WINNER_HEX)


def test_encode_bytes32_rejects_long_text() -> None:
    with pytest.raises(ValueError, match="at most 32"):
        encode_bytes32("x" * 33)


def test_ascii_decoder_strips_nul_padding() -> None:
    assert AsciiDecoder().decode(to_bytes(BALLOT_WINNER_HEX)) == "Manolo"


def test_hex_decoder_keeps_padding_visible() -> None:
    assert HexDecoder().decode(b"Ma\x00") == "0x4d6100"


def test_utf8_decoder_handles_multibyte_text() -> None:
    raw = "Ñandú".encode("utf-8").ljust(32, b"\x00")
    assert Utf8Decoder().decode(raw) == "Ñandú"
    assert get_decoder("utf8").decode(raw) == "Ñandú"
    assert "\ufffd" in AsciiDecoder().decode(raw)


def test_decoder_lookup_is_case_insensitive() -> None:
    assert list_decoders() == ("ascii", "hex", "utf8")
    assert isinstance(get_decoder(" ASCII "), AsciiDecoder)
    assert isinstance(get_decoder("Utf8"), Utf8Decoder)


def test_decoder_lookup_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="Unknown decoder"):
        get_decoder("base58")
    with pytest.raises(ValueError, match="Unknown decoder"):
        get_decoder("  ")
