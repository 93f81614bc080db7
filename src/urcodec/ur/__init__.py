"""UR fragment format: encoder, decoder and accumulator."""

from .decoder import (
    AccumulateResult, AccumulationState, Complete, Pending, Progress, URDecoder,
    accumulate, decode_ur, decode_ur_hex
)
from .encoder import UREncoder, encode_ur, encode_ur_hex
from .fragments import (
    ParsedFragment, compose_fragment, compose_fragments, extract_sequence, parse_fragment,
    parse_sequence, split_body
)

__all__ = [
    "AccumulateResult",
    "AccumulationState",
    "Complete",
    "ParsedFragment",
    "Pending",
    "Progress",
    "URDecoder",
    "UREncoder",
    "accumulate",
    "compose_fragment",
    "compose_fragments",
    "decode_ur",
    "decode_ur_hex",
    "encode_ur",
    "encode_ur_hex",
    "extract_sequence",
    "parse_fragment",
    "parse_sequence",
    "split_body",
]
