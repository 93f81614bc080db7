"""
Binary Writer

Accumulates big-endian primitives into a byte buffer. Used to build the
length envelope header.
"""

import struct
from typing import List


class BinaryWriter:
    """
    Append-only binary writer.

    Integers are written big-endian and masked to their width.
    """

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb: List[int] = []

    def u8(self, v: int) -> None:
        """
        Write unsigned 8-bit integer.

        Args:
            v: Integer value to write (0-255)
        """
        self._bb.append(v & 0xFF)

    def u16be(self, v: int) -> None:
        """
        Write unsigned 16-bit integer in big-endian format.

        Args:
            v: Integer value to write as 16-bit big-endian
        """
        self._bb.extend(struct.pack('>H', v & 0xFFFF))

    def u32be(self, v: int) -> None:
        """
        Write unsigned 32-bit integer in big-endian format.

        Args:
            v: Integer value to write as 32-bit big-endian
        """
        self._bb.extend(struct.pack('>I', v & 0xFFFFFFFF))

    def bytes(self, v: bytes) -> None:
        """
        Write raw bytes without length prefix.

        Args:
            v: Bytes to write directly
        """
        self._bb.extend(v)

    def to_bytes(self) -> bytes:
        """
        Return accumulated bytes as immutable bytes object.

        Returns:
            Bytes containing all written data
        """
        return bytes(self._bb)
