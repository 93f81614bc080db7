from .factories import (
    GOLDEN_DIR, body_offset, load_golden, mk_digest_fragment, mk_payload, replace_body_char, shuffled
)
from .parity import assert_hex_equal

__all__ = [
    "GOLDEN_DIR",
    "assert_hex_equal",
    "body_offset",
    "load_golden",
    "mk_digest_fragment",
    "mk_payload",
    "replace_body_char",
    "shuffled",
]
