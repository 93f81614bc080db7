"""
Encoder and decoder options.

Typed, validated knobs for the UR pipeline. Validation failures surface as
InvalidOptions so callers only ever see the codec's own error types.
"""

from __future__ import annotations
from typing import Any, Dict, Type, TypeVar
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import InvalidOptions

DEFAULT_FRAGMENT_CAPACITY = 200
DEFAULT_UR_TYPE = "bytes"

T = TypeVar("T", bound=BaseModel)


def _check_ur_type(value: str) -> str:
    if not value:
        raise ValueError("ur_type must not be empty")
    if "/" in value:
        raise ValueError("ur_type must not contain '/'")
    if any(ord(c) < 33 or ord(c) > 126 for c in value):
        raise ValueError("ur_type must be printable ASCII without spaces")
    return value


class DecoderOptions(BaseModel):
    """
    Options for decoding UR fragments.

    The expected type tag is compared case-insensitively against each
    fragment header.
    """
    ur_type: str = Field(default=DEFAULT_UR_TYPE, alias="urType", description="Expected UR type tag")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("ur_type")
    @classmethod
    def validate_ur_type(cls, v: str) -> str:
        return _check_ur_type(v)


class EncoderOptions(BaseModel):
    """
    Options for encoding a payload into UR fragments.

    ``fragment_capacity`` is the maximum number of body characters per
    fragment; headers, sequence marker and digest are not counted.
    """
    fragment_capacity: int = Field(
        default=DEFAULT_FRAGMENT_CAPACITY,
        ge=1,
        alias="fragmentCapacity",
        description="Maximum body characters per fragment"
    )
    ur_type: str = Field(default=DEFAULT_UR_TYPE, alias="urType", description="UR type tag")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("ur_type")
    @classmethod
    def validate_ur_type(cls, v: str) -> str:
        return _check_ur_type(v)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a camelCase dictionary."""
        return {"fragmentCapacity": self.fragment_capacity, "urType": self.ur_type}


def build_options(model: Type[T], **kwargs: Any) -> T:
    """
    Construct an options model, translating validation failures.

    Args:
        model: Options class to build
        **kwargs: Field values

    Returns:
        Validated options instance

    Raises:
        InvalidOptions: If any field fails validation
    """
    try:
        return model(**kwargs)
    except ValidationError as e:
        raise InvalidOptions(
            f"Invalid {model.__name__}",
            details={"errors": [err["msg"] for err in e.errors()], "values": kwargs},
            cause=e
        ) from e
