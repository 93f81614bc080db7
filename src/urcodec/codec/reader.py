"""
Binary Reader

Reads big-endian primitives from a byte buffer, raising on any attempt to
read past the end.
"""

import builtins
import struct


class BinaryReader:
    """
    Sequential binary reader over an immutable buffer.
    """

    def __init__(self, buf: builtins.bytes):
        """
        Initialize reader with byte buffer.

        Args:
            buf: Byte buffer to read from
        """
        self._buf = buf
        self._off = 0

    @property
    def eof(self) -> bool:
        """True if at end of buffer."""
        return self._off >= len(self._buf)

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return max(len(self._buf) - self._off, 0)

    def _require(self, n: int, what: str) -> None:
        if self._off + n > len(self._buf):
            raise IndexError(f"Buffer overflow: attempting to read {what} beyond end")

    def u8(self) -> int:
        """Read unsigned 8-bit integer."""
        self._require(1, "u8")
        val = self._buf[self._off]
        self._off += 1
        return val

    def u16be(self) -> int:
        """Read unsigned 16-bit integer in big-endian format."""
        self._require(2, "u16be")
        val = struct.unpack(">H", self._buf[self._off : self._off + 2])[0]
        self._off += 2
        return val

    def u32be(self) -> int:
        """Read unsigned 32-bit integer in big-endian format."""
        self._require(4, "u32be")
        val = struct.unpack(">I", self._buf[self._off : self._off + 4])[0]
        self._off += 4
        return val

    def bytes(self, n: int) -> builtins.bytes:
        """
        Read n bytes from buffer.

        Args:
            n: Number of bytes to read

        Returns:
            Bytes of specified length
        """
        self._require(n, f"{n} bytes")
        out = builtins.bytes(self._buf[self._off : self._off + n])
        self._off += n
        return out
