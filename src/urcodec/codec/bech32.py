"""
Bech32-style text encoding (bc32).

Maps 5-bit symbols to a 32-character alphabet with a 6-symbol polynomial
checksum. Two checksum variants exist:

- ORIGIN: classic bech32, used when a human-readable tag is present
- BIS: tagless variant used for UR bodies and digests

Decoding is case-insensitive but rejects strings that mix cases.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Sequence

from ..runtime.errors import AlphabetViolation, ChecksumMismatch, ErrorCode
from .bits import bytes_to_symbols, symbols_to_bytes

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
SEPARATOR = "1"
CHECKSUM_LENGTH = 6
MAX_TAGGED_LENGTH = 90

_CHARSET_INDEX = {c: i for i, c in enumerate(CHARSET)}


class Bech32Version(IntEnum):
    """Checksum variants."""
    ORIGIN = 1
    BIS = 2


_CHECKSUM_TARGET = {
    Bech32Version.ORIGIN: 1,
    Bech32Version.BIS: 0x3FFFFFFF,
}


@dataclass(frozen=True)
class Bech32Data:
    """Result of decoding: optional tag and the data symbols without checksum."""
    tag: Optional[str]
    symbols: List[int]


def polymod(values: Sequence[int]) -> int:
    """Compute the bech32 checksum polynomial over ``values``."""
    chk = 1
    for value in values:
        top = chk >> 25
        chk = ((chk & 0x1FFFFFF) << 5) ^ value
        for i, gen in enumerate(GENERATOR):
            if (top >> i) & 1:
                chk ^= gen
    return chk


def tag_expand(tag: str) -> List[int]:
    """Expand a tag into high bits, a zero separator, then low bits."""
    return [ord(c) >> 5 for c in tag] + [0] + [ord(c) & 31 for c in tag]


def _header(tag: Optional[str]) -> List[int]:
    return tag_expand(tag) if tag else [0]


def create_checksum(tag: Optional[str], symbols: Sequence[int], version: Bech32Version) -> List[int]:
    """Compute the six checksum symbols for ``symbols``."""
    values = _header(tag) + list(symbols) + [0] * CHECKSUM_LENGTH
    mod = polymod(values) ^ _CHECKSUM_TARGET[version]
    return [(mod >> (5 * (5 - p))) & 31 for p in range(CHECKSUM_LENGTH)]


def verify_checksum(tag: Optional[str], symbols: Sequence[int], version: Bech32Version) -> bool:
    """Check that ``symbols`` (checksum included) satisfy the variant's target."""
    return polymod(_header(tag) + list(symbols)) == _CHECKSUM_TARGET[version]


def encode(tag: Optional[str], symbols: Sequence[int], version: Bech32Version) -> str:
    """
    Encode symbols to text.

    Args:
        tag: Optional human-readable tag, emitted before the separator
        symbols: Data symbols in [0, 31]
        version: Checksum variant

    Returns:
        Lowercase encoded string
    """
    for position, symbol in enumerate(symbols):
        if not 0 <= symbol < 32:
            raise AlphabetViolation(
                f"Symbol {symbol} outside alphabet",
                details={"position": position, "symbol": symbol}
            )
    combined = list(symbols) + create_checksum(tag, symbols, version)
    prefix = tag + SEPARATOR if tag else ""
    return prefix + "".join(CHARSET[d] for d in combined)


def _to_symbols(text: str, offset: int = 0) -> List[int]:
    symbols = []
    for position, char in enumerate(text):
        symbol = _CHARSET_INDEX.get(char)
        if symbol is None:
            raise AlphabetViolation(
                f"Character {char!r} outside alphabet",
                details={"position": offset + position, "char": char}
            )
        symbols.append(symbol)
    return symbols


def check_case(text: str) -> str:
    """
    Reject mixed-case text and return it lowercased.

    Raises:
        AlphabetViolation: If both upper and lower case letters occur
    """
    if text.lower() != text and text.upper() != text:
        raise AlphabetViolation("Mixed-case input", ErrorCode.MIXED_CASE, details={"text": text})
    return text.lower()


def decode(text: str) -> Bech32Data:
    """
    Decode text produced by :func:`encode`.

    Tagged strings are verified with the ORIGIN variant, tagless strings
    with the BIS variant.

    Raises:
        AlphabetViolation: On characters outside the alphabet, mixed case or
            a malformed tag
        ChecksumMismatch: If the checksum is missing or wrong
    """
    for position, char in enumerate(text):
        if ord(char) < 33 or ord(char) > 126:
            raise AlphabetViolation(
                f"Character {char!r} not printable ASCII",
                details={"position": position}
            )
    text = check_case(text)

    pos = text.rfind(SEPARATOR)
    if pos == -1:
        symbols = _to_symbols(text)
        if len(symbols) < CHECKSUM_LENGTH or not verify_checksum(None, symbols, Bech32Version.BIS):
            raise ChecksumMismatch("Invalid checksum", details={"length": len(text)})
        return Bech32Data(None, symbols[:-CHECKSUM_LENGTH])

    if pos < 1 or len(text) > MAX_TAGGED_LENGTH:
        raise AlphabetViolation(
            "Invalid tag or length",
            details={"separator": pos, "length": len(text)}
        )
    if pos + 1 + CHECKSUM_LENGTH > len(text):
        raise ChecksumMismatch("Checksum too short", details={"separator": pos, "length": len(text)})

    tag = text[:pos]
    symbols = _to_symbols(text[pos + 1:], offset=pos + 1)
    if not verify_checksum(tag, symbols, Bech32Version.ORIGIN):
        raise ChecksumMismatch("Invalid checksum", details={"tag": tag})
    return Bech32Data(tag, symbols[:-CHECKSUM_LENGTH])


def encode_bc32_data(data: bytes) -> str:
    """Encode raw bytes as tagless bc32 text."""
    return encode(None, bytes_to_symbols(data), Bech32Version.BIS)


def decode_bc32_data(text: str) -> bytes:
    """Decode bc32 text back to raw bytes."""
    return symbols_to_bytes(decode(text).symbols)
