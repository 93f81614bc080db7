"""
UR encoder.

Turns a payload into an ordered list of UR fragment strings:

1. wrap the payload in the binary length envelope
2. bc32-encode the envelope into the message body
3. bc32-encode SHA-256(envelope) as the digest
4. split the body into chunks of at most ``fragment_capacity`` characters
5. frame each chunk as a fragment, uppercased for QR alphanumeric mode
"""

from __future__ import annotations
import logging
from typing import List, Union

from ..codec.bech32 import encode_bc32_data
from ..codec.envelope import wrap
from ..codec.hashes import bc32_digest
from ..runtime.errors import PayloadTypeError
from ..runtime.options import DEFAULT_FRAGMENT_CAPACITY, DEFAULT_UR_TYPE, EncoderOptions, build_options
from .fragments import compose_fragments, split_body

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


def _as_bytes(payload: BytesLike) -> bytes:
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise PayloadTypeError(
            f"Payload must be bytes, got {type(payload).__name__}",
            details={"type": type(payload).__name__}
        )
    return bytes(payload)


def _from_hex(hex_string: str) -> bytes:
    try:
        return bytes.fromhex(hex_string)
    except (TypeError, ValueError) as e:
        raise PayloadTypeError("Payload is not a valid hex string", cause=e) from e


def encode_ur(payload: BytesLike, fragment_capacity: int = DEFAULT_FRAGMENT_CAPACITY,
              ur_type: str = DEFAULT_UR_TYPE) -> List[str]:
    """
    Encode a payload as UR fragments.

    Args:
        payload: Bytes to transport, 1 to 2**32-1 bytes long
        fragment_capacity: Maximum body characters per fragment
        ur_type: UR type tag

    Returns:
        Ordered fragment strings. One digest-free fragment if the body fits,
        otherwise sequenced fragments that all carry the digest.

    Raises:
        InvalidOptions: If fragment_capacity < 1 or ur_type is invalid
        PayloadTypeError: If payload is not bytes-like
        LengthOutOfRange: If payload is empty or too large
    """
    options = build_options(EncoderOptions, fragment_capacity=fragment_capacity, ur_type=ur_type)
    envelope = wrap(_as_bytes(payload))
    body = encode_bc32_data(envelope)
    digest = bc32_digest(envelope)
    fragments = compose_fragments(options.ur_type, split_body(body, options.fragment_capacity), digest)
    logger.debug(
        f"Encoded {len(envelope)}-byte envelope into {len(fragments)} fragment(s) "
        f"(capacity {options.fragment_capacity})"
    )
    return fragments


def encode_ur_hex(hex_string: str, fragment_capacity: int = DEFAULT_FRAGMENT_CAPACITY,
                  ur_type: str = DEFAULT_UR_TYPE) -> List[str]:
    """Encode a hex-string payload as UR fragments."""
    return encode_ur(_from_hex(hex_string), fragment_capacity, ur_type)


class UREncoder:
    """
    Encoder for displaying a payload as a sequence of UR parts.

    Typically the caller renders each part as one frame of an animated
    QR code.
    """

    def __init__(self, payload: BytesLike, fragment_capacity: int = DEFAULT_FRAGMENT_CAPACITY,
                 ur_type: str = DEFAULT_UR_TYPE):
        """
        Initialize encoder.

        Args:
            payload: Bytes to encode
            fragment_capacity: Maximum body characters per part
            ur_type: UR type tag
        """
        self.options = build_options(EncoderOptions, fragment_capacity=fragment_capacity, ur_type=ur_type)
        self.payload = _as_bytes(payload)

    @classmethod
    def from_hex(cls, hex_string: str, fragment_capacity: int = DEFAULT_FRAGMENT_CAPACITY,
                 ur_type: str = DEFAULT_UR_TYPE) -> "UREncoder":
        """Create an encoder for a hex-string payload."""
        return cls(_from_hex(hex_string), fragment_capacity, ur_type)

    @property
    def fragment_capacity(self) -> int:
        return self.options.fragment_capacity

    def parts(self) -> List[str]:
        """Return all UR parts."""
        return encode_ur(self.payload, self.options.fragment_capacity, self.options.ur_type)
