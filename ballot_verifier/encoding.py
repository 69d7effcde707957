"""Raw value handling for contract accessor payloads.

Accessors return encoded values either as ``bytes`` or as ``0x``-prefixed hex
strings. Comparisons always operate on the raw bytes produced by
:func:`to_bytes`; decoders exist only to render a payload for humans and are
kept out of the comparison path.
"""

from __future__ import annotations

import binascii
from typing import Dict, Protocol, Sequence, Type, Union

EncodedValue = Union[bytes, bytearray, memoryview, str]

BYTES32_LENGTH = 32


def to_bytes(value: EncodedValue) -> bytes:
    """Return the raw bytes of an encoded value.

    Hex strings are parsed strictly: an optional ``0x`` prefix followed by an
    even number of hex digits. Digit case is not significant.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if not isinstance(value, str):
        raise TypeError(f"Encoded value must be bytes or a hex string, got {type(value).__name__}.")
    digits = value[2:] if value[:2] in ("0x", "0X") else value
    if len(digits) % 2:
        raise ValueError(f"Hex value has an odd number of digits: {value!r}")
    try:
        return binascii.unhexlify(digits)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Value is not valid hex: {value!r}") from exc


def to_hex(value: EncodedValue) -> str:
    """Return the canonical lower-case ``0x`` hex form of an encoded value."""
    return "0x" + to_bytes(value).hex()


def encode_bytes32(text: str) -> bytes:
    """Encode ASCII text as a NUL right-padded ``bytes32`` word."""
    raw = text.encode("ascii")
    if len(raw) > BYTES32_LENGTH:
        raise ValueError(f"Text is {len(raw)} bytes long; bytes32 holds at most {BYTES32_LENGTH}.")
    return raw.ljust(BYTES32_LENGTH, b"\x00")


# ---------------------------------------------------------------------------
# Diagnostic decoders
# ---------------------------------------------------------------------------


class ValueDecoder(Protocol):
    """Protocol for rendering raw payload bytes as text."""

    name: str

    def decode(self, raw: bytes) -> str:
        """Return a human-readable rendering of ``raw``."""


class AsciiDecoder:
    """Decode NUL-padded ASCII, the layout of a Solidity ``bytes32`` string."""

    name = "ascii"

    def decode(self, raw: bytes) -> str:
        return raw.rstrip(b"\x00").decode("ascii", errors="replace")


class Utf8Decoder:
    """Decode NUL-padded UTF-8 text."""

    name = "utf8"

    def decode(self, raw: bytes) -> str:
        return raw.rstrip(b"\x00").decode("utf-8", errors="replace")


class HexDecoder:
    """Render the payload as hex, leaving padding visible."""

    name = "hex"

    def decode(self, raw: bytes) -> str:
        return "0x" + raw.hex()


_DECODERS: Dict[str, Type[ValueDecoder]] = {
    "ascii": AsciiDecoder,
    "utf8": Utf8Decoder,
    "hex": HexDecoder,
}


def get_decoder(name: str) -> ValueDecoder:
    key = name.strip().lower()
    if key not in _DECODERS:
        raise ValueError(f"Unknown decoder '{name}'. Available: {sorted(_DECODERS)}")
    return _DECODERS[key]()


def list_decoders() -> Sequence[str]:
    return tuple(sorted(_DECODERS))


__all__ = [
    "AsciiDecoder",
    "BYTES32_LENGTH",
    "EncodedValue",
    "HexDecoder",
    "Utf8Decoder",
    "ValueDecoder",
    "encode_bytes32",
    "get_decoder",
    "list_decoders",
    "to_bytes",
    "to_hex",
]
