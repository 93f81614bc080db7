"""
Hash Functions

SHA-256 helpers used for the cross-fragment digest.
"""

import hashlib

from .bech32 import encode_bc32_data


def sha256_bytes(input_bytes: bytes) -> bytes:
    """
    Compute SHA-256 hash of input bytes.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        SHA-256 hash as bytes (32 bytes)
    """
    return hashlib.sha256(input_bytes).digest()


def bc32_digest(envelope: bytes) -> str:
    """
    Compute the text digest of a wrapped payload.

    Args:
        envelope: Binary-length-encoded payload

    Returns:
        bc32 encoding of SHA-256(envelope)
    """
    return encode_bc32_data(sha256_bytes(envelope))
