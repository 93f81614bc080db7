"""
UR Codec

Encodes binary payloads as Uniform Resource (UR) text fragments for
low-bandwidth text channels such as animated QR codes, and reassembles
them in any arrival order with SHA-256 integrity checking.
"""

from .codec import wrap, unwrap, encode_bc32_data, decode_bc32_data, convert_bits
from .runtime.errors import *
from .runtime.options import DEFAULT_FRAGMENT_CAPACITY, DEFAULT_UR_TYPE, EncoderOptions, DecoderOptions
from .ur import (
    AccumulateResult, AccumulationState, Complete, Pending, Progress, URDecoder, UREncoder,
    accumulate, decode_ur, decode_ur_hex, encode_ur, encode_ur_hex, extract_sequence
)

__version__ = "0.1.0"
__all__ = [
    # Encoding
    "encode_ur",
    "encode_ur_hex",
    "UREncoder",
    "EncoderOptions",

    # Decoding
    "decode_ur",
    "decode_ur_hex",
    "accumulate",
    "extract_sequence",
    "AccumulationState",
    "AccumulateResult",
    "Pending",
    "Complete",
    "Progress",
    "URDecoder",
    "DecoderOptions",

    # Leaf codecs
    "wrap",
    "unwrap",
    "encode_bc32_data",
    "decode_bc32_data",
    "convert_bits",

    # Defaults
    "DEFAULT_FRAGMENT_CAPACITY",
    "DEFAULT_UR_TYPE",

    # Errors
    "ErrorCode",
    "URError",
    "InvalidOptions",
    "PayloadTypeError",
    "AlphabetViolation",
    "BitPackingViolation",
    "ChecksumMismatch",
    "LengthOutOfRange",
    "MalformedFragment",
    "SequenceInconsistency",
    "error_from_dict",
]
