"""
UR Codec Error Model

Typed failures raised by the text codec, the binary envelope and the
fragment decoder. Every error here is recoverable: a scan loop is expected
to report it and keep accepting parts.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """UR codec error codes, grouped by family."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INVALID_OPTIONS = 2
    INVALID_PAYLOAD_TYPE = 3

    # Text encoding errors (100-199)
    ALPHABET_VIOLATION = 100
    MIXED_CASE = 101
    BIT_PACKING_VIOLATION = 102

    # Integrity errors (200-299)
    CHECKSUM_MISMATCH = 200
    DIGEST_MISMATCH = 201

    # Envelope errors (300-399)
    LENGTH_OUT_OF_RANGE = 300
    UNKNOWN_HEADER = 301
    TRUNCATED_ENVELOPE = 302

    # Fragment errors (400-499)
    MALFORMED_FRAGMENT = 400
    INVALID_HEADER = 401
    INVALID_SEQUENCE = 402

    # Reassembly errors (500-599)
    SEQUENCE_INCONSISTENCY = 500
    TOTAL_MISMATCH = 501
    DUPLICATE_INDEX = 502


class URError(Exception):
    """
    Base class for all UR codec errors.

    Carries a code, optional structured details and the underlying cause.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a UR error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'URError':
        """Create error from dictionary representation."""
        try:
            code = ErrorCode(data.get("code", ErrorCode.UNKNOWN))
        except ValueError:
            code = ErrorCode.UNKNOWN
        message = data.get("message", "Unknown error")
        details = data.get("details")
        return cls(message, code, details)


class InvalidOptions(URError):
    """Encoder or decoder options failed validation."""

    def __init__(self, message: str = "Invalid options",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_OPTIONS, details, cause)


class PayloadTypeError(URError, TypeError):
    """Payload is not a bytes-like object."""

    def __init__(self, message: str = "Payload must be bytes",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_PAYLOAD_TYPE, details, cause)


class AlphabetViolation(URError):
    """Character outside the 32-symbol alphabet, or mixed-case input."""

    def __init__(self, message: str = "Alphabet violation", code: ErrorCode = ErrorCode.ALPHABET_VIOLATION,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class BitPackingViolation(URError):
    """Bit-width conversion would drop or invent information."""

    def __init__(self, message: str = "Bit packing violation",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.BIT_PACKING_VIOLATION, details, cause)


class ChecksumMismatch(URError):
    """Text checksum failed, or a declared digest disagrees with the recomputed one."""

    def __init__(self, message: str = "Checksum mismatch", code: ErrorCode = ErrorCode.CHECKSUM_MISMATCH,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class LengthOutOfRange(URError):
    """Payload length cannot be wrapped, or an envelope header cannot be unwrapped."""

    def __init__(self, message: str = "Length out of range", code: ErrorCode = ErrorCode.LENGTH_OUT_OF_RANGE,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class MalformedFragment(URError):
    """Fragment has the wrong shape: part count, header tag or sequence marker."""

    def __init__(self, message: str = "Malformed fragment", code: ErrorCode = ErrorCode.MALFORMED_FRAGMENT,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class SequenceInconsistency(URError):
    """Fragments of one message disagree on total, or two claim the same index."""

    def __init__(self, message: str = "Sequence inconsistency", code: ErrorCode = ErrorCode.SEQUENCE_INCONSISTENCY,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


_ERRORS_BY_CODE = {
    ErrorCode.INVALID_OPTIONS: InvalidOptions,
    ErrorCode.INVALID_PAYLOAD_TYPE: PayloadTypeError,
    ErrorCode.BIT_PACKING_VIOLATION: BitPackingViolation,
}

_ERRORS_BY_FAMILY = (
    ((ErrorCode.ALPHABET_VIOLATION, ErrorCode.MIXED_CASE), AlphabetViolation),
    ((ErrorCode.CHECKSUM_MISMATCH, ErrorCode.DIGEST_MISMATCH), ChecksumMismatch),
    ((ErrorCode.LENGTH_OUT_OF_RANGE, ErrorCode.UNKNOWN_HEADER, ErrorCode.TRUNCATED_ENVELOPE), LengthOutOfRange),
    ((ErrorCode.MALFORMED_FRAGMENT, ErrorCode.INVALID_HEADER, ErrorCode.INVALID_SEQUENCE), MalformedFragment),
    ((ErrorCode.SEQUENCE_INCONSISTENCY, ErrorCode.TOTAL_MISMATCH, ErrorCode.DUPLICATE_INDEX), SequenceInconsistency),
)


def error_from_dict(data: Dict[str, Any]) -> URError:
    """
    Rebuild the most specific error type from its dictionary form.

    Args:
        data: Output of ``URError.to_dict()``

    Returns:
        Error instance of the subclass matching the code
    """
    generic = URError.from_dict(data)
    code = generic.code

    if code in _ERRORS_BY_CODE:
        return _ERRORS_BY_CODE[code](generic.message, generic.details or None)
    for codes, error_cls in _ERRORS_BY_FAMILY:
        if code in codes:
            return error_cls(generic.message, code, generic.details or None)
    return generic


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
]
