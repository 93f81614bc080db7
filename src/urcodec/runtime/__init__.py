"""Runtime helpers for the UR codec: error model and options."""

from .errors import (
    ErrorCode, URError, InvalidOptions, PayloadTypeError, AlphabetViolation,
    BitPackingViolation, ChecksumMismatch, LengthOutOfRange, MalformedFragment,
    SequenceInconsistency, error_from_dict
)
from .options import (
    DEFAULT_FRAGMENT_CAPACITY, DEFAULT_UR_TYPE, EncoderOptions, DecoderOptions, build_options
)

__all__ = [
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
    "DEFAULT_FRAGMENT_CAPACITY",
    "DEFAULT_UR_TYPE",
    "EncoderOptions",
    "DecoderOptions",
    "build_options",
]
