"""
UR Binary and Text Codecs

Leaf codecs used by the UR fragment pipeline:

- bits.py: bit-width conversion (8 <-> 5)
- bech32.py: checksummed 32-symbol text encoding, ORIGIN and BIS variants
- envelope.py: minimal binary length envelope
- writer.py / reader.py: big-endian binary primitives
- hashes.py: SHA-256 digest helpers
"""

from .bech32 import (
    Bech32Data, Bech32Version, CHARSET, decode, decode_bc32_data, encode, encode_bc32_data
)
from .bits import bytes_to_symbols, convert_bits, symbols_to_bytes
from .envelope import compose_header, unwrap, wrap
from .hashes import bc32_digest, sha256_bytes
from .reader import BinaryReader
from .writer import BinaryWriter

__all__ = [
    "Bech32Data",
    "Bech32Version",
    "BinaryReader",
    "BinaryWriter",
    "CHARSET",
    "bc32_digest",
    "bytes_to_symbols",
    "compose_header",
    "convert_bits",
    "decode",
    "decode_bc32_data",
    "encode",
    "encode_bc32_data",
    "sha256_bytes",
    "symbols_to_bytes",
    "unwrap",
    "wrap",
]
