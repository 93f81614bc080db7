"""
Minimal binary length envelope.

A byte-string header in the style of a CBOR byte string, limited to four
shapes:

=================  ==========================================
Payload length L   Header
=================  ==========================================
1 .. 23            ``0x40 + L``
24 .. 255          ``0x58`` + 1-byte length
256 .. 65535       ``0x59`` + 2-byte big-endian length
65536 .. 2**32-1   ``0x60`` + 4-byte big-endian length
=================  ==========================================
"""

from ..runtime.errors import ErrorCode, LengthOutOfRange
from .reader import BinaryReader
from .writer import BinaryWriter

SHORT_BASE = 0x40
SHORT_MAX = 23
HEADER_U8 = 0x58
HEADER_U16 = 0x59
HEADER_U32 = 0x60
MAX_LENGTH = 2 ** 32 - 1


def compose_header(length: int) -> bytes:
    """
    Build the header for a payload of ``length`` bytes.

    Raises:
        LengthOutOfRange: If length is 0 or does not fit in 32 bits
    """
    writer = BinaryWriter()
    if 0 < length <= SHORT_MAX:
        writer.u8(SHORT_BASE + length)
    elif SHORT_MAX < length <= 0xFF:
        writer.u8(HEADER_U8)
        writer.u8(length)
    elif 0xFF < length <= 0xFFFF:
        writer.u8(HEADER_U16)
        writer.u16be(length)
    elif 0xFFFF < length <= MAX_LENGTH:
        writer.u8(HEADER_U32)
        writer.u32be(length)
    else:
        raise LengthOutOfRange(f"Payload length {length} outside 1..{MAX_LENGTH}", details={"length": length})
    return writer.to_bytes()


def wrap(payload: bytes) -> bytes:
    """Prefix ``payload`` with its length header."""
    return compose_header(len(payload)) + bytes(payload)


def unwrap(envelope: bytes) -> bytes:
    """
    Strip the length header and return exactly the declared payload.

    Bytes after the declared payload are ignored.

    Raises:
        LengthOutOfRange: On an empty buffer, an unknown header byte or a
            buffer shorter than the declared length
    """
    reader = BinaryReader(envelope)
    if reader.eof:
        raise LengthOutOfRange("Empty envelope", details={"length": 0})

    header = reader.u8()
    try:
        if SHORT_BASE < header <= SHORT_BASE + SHORT_MAX:
            length = header - SHORT_BASE
        elif header == HEADER_U8:
            length = reader.u8()
        elif header == HEADER_U16:
            length = reader.u16be()
        elif header == HEADER_U32:
            length = reader.u32be()
        else:
            raise LengthOutOfRange(
                f"Unknown envelope header 0x{header:02x}",
                ErrorCode.UNKNOWN_HEADER,
                details={"header": header}
            )
        return reader.bytes(length)
    except IndexError as e:
        raise LengthOutOfRange(
            "Envelope shorter than declared length",
            ErrorCode.TRUNCATED_ENVELOPE,
            details={"header": header, "available": len(envelope)},
            cause=e
        ) from e
