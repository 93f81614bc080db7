"""
UR fragment wire format.

Composes and parses the three fragment shapes::

    ur:<type>/<body>
    ur:<type>/<digest>/<body>
    ur:<type>/<index>of<total>/<digest>/<body>

Parsing is the single point where case is normalized: header and sequence
marker compare case-insensitively, digest and body must not mix case and
are stored lowercase.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..codec.bech32 import CHARSET, check_case, decode_bc32_data
from ..codec.hashes import sha256_bytes
from ..runtime.errors import AlphabetViolation, ChecksumMismatch, ErrorCode, MalformedFragment
from ..runtime.options import DEFAULT_UR_TYPE

UR_SCHEME = "ur"
_SEQUENCE_RE = re.compile(r"^(\d+)OF(\d+)$", re.ASCII)


@dataclass(frozen=True)
class ParsedFragment:
    """
    One validated fragment.

    ``index`` is 1-based. Unsequenced fragments have index 1 and total 1.
    """
    ur_type: str
    index: int
    total: int
    digest: Optional[str]
    body: str
    sequenced: bool

    @property
    def text(self) -> str:
        """Canonical lowercase form, used for duplicate detection."""
        return compose_fragment(self.ur_type, self.body, self.digest,
                                (self.index, self.total) if self.sequenced else None)


def compose_fragment(ur_type: str, body: str, digest: Optional[str] = None,
                     sequence: Optional[Tuple[int, int]] = None) -> str:
    """
    Build one fragment string.

    Args:
        ur_type: UR type tag
        body: bc32 body chunk
        digest: bc32 digest, required when ``sequence`` is given
        sequence: 1-based (index, total)
    """
    payload = body
    if digest is not None:
        payload = f"{digest}/{payload}"
    if sequence is not None:
        index, total = sequence
        payload = f"{index}of{total}/{payload}"
    return f"{UR_SCHEME}:{ur_type}/{payload}"


def compose_fragments(ur_type: str, bodies: Sequence[str], digest: str) -> List[str]:
    """
    Build the uppercase fragment list for an ordered sequence of body chunks.

    A single chunk yields one digest-free fragment; several chunks yield
    sequenced, digest-bearing fragments.
    """
    if not bodies:
        raise MalformedFragment("No fragment bodies to compose")
    if len(bodies) == 1:
        return [compose_fragment(ur_type, bodies[0]).upper()]
    total = len(bodies)
    return [
        compose_fragment(ur_type, body, digest, (i + 1, total)).upper()
        for i, body in enumerate(bodies)
    ]


def parse_sequence(marker: str) -> Tuple[int, int]:
    """
    Parse a ``<index>of<total>`` marker.

    Raises:
        MalformedFragment: If the marker is not two decimal integers joined by
            ``of`` with ``1 <= index <= total``
    """
    match = _SEQUENCE_RE.match(marker.upper())
    if not match:
        raise MalformedFragment(
            f"Invalid sequence: {marker}",
            ErrorCode.INVALID_SEQUENCE,
            details={"sequence": marker}
        )
    index, total = int(match.group(1)), int(match.group(2))
    if not 1 <= index <= total:
        raise MalformedFragment(
            f"Sequence index {index} outside 1..{total}",
            ErrorCode.INVALID_SEQUENCE,
            details={"index": index, "total": total}
        )
    return index, total


def check_header(header: str, ur_type: str = DEFAULT_UR_TYPE) -> str:
    """
    Compare a fragment header against ``ur:<type>`` case-insensitively.

    Returns:
        The lowercase type tag
    """
    expected = f"{UR_SCHEME}:{ur_type}"
    if header.lower() != expected.lower():
        raise MalformedFragment(
            f"Invalid UR header: {header}",
            ErrorCode.INVALID_HEADER,
            details={"header": header, "expected": expected}
        )
    return ur_type.lower()


def normalize_segment(segment: str, name: str) -> str:
    """Lowercase a digest or body segment, rejecting empty, mixed-case or non-alphabet text."""
    if not segment:
        raise MalformedFragment(f"Empty {name}", details={"segment": name})
    segment = check_case(segment)
    for position, char in enumerate(segment):
        if char not in CHARSET:
            raise AlphabetViolation(
                f"Character {char!r} outside alphabet in {name}",
                details={"segment": name, "position": position, "char": char}
            )
    return segment


def verify_digest(digest: str, body: str) -> bytes:
    """
    Check that ``digest`` is the SHA-256 of the envelope encoded by ``body``.

    Returns:
        The decoded envelope bytes

    Raises:
        ChecksumMismatch: If either text fails its checksum or the hashes differ
    """
    envelope = decode_bc32_data(body)
    if decode_bc32_data(digest) != sha256_bytes(envelope):
        raise ChecksumMismatch(
            "Invalid digest",
            ErrorCode.DIGEST_MISMATCH,
            details={"digest": digest}
        )
    return envelope


def parse_fragment(fragment: str, ur_type: str = DEFAULT_UR_TYPE) -> ParsedFragment:
    """
    Parse and validate one fragment.

    A digest is checked against the fragment's own body when the fragment
    is the whole message (no sequence, or ``1of1``). Multi-part digests are
    checked once the message is reassembled.

    Raises:
        MalformedFragment: Wrong part count, header or sequence marker
        AlphabetViolation: Mixed case or characters outside the alphabet
        ChecksumMismatch: Digest does not match
    """
    if not isinstance(fragment, str):
        raise MalformedFragment(
            f"Fragment must be a string, got {type(fragment).__name__}",
            details={"type": type(fragment).__name__}
        )
    pieces = fragment.split("/")
    if len(pieces) not in (2, 3, 4):
        raise MalformedFragment(
            f"Invalid fragment pieces length: expected 2, 3 or 4 but got {len(pieces)}",
            details={"pieces": len(pieces)}
        )
    tag = check_header(pieces[0], ur_type)

    if len(pieces) == 2:
        body = normalize_segment(pieces[1], "body")
        return ParsedFragment(tag, 1, 1, None, body, sequenced=False)

    if len(pieces) == 3:
        digest = normalize_segment(pieces[1], "digest")
        body = normalize_segment(pieces[2], "body")
        verify_digest(digest, body)
        return ParsedFragment(tag, 1, 1, digest, body, sequenced=False)

    index, total = parse_sequence(pieces[1])
    digest = normalize_segment(pieces[2], "digest")
    body = normalize_segment(pieces[3], "body")
    # Digest must at least be well-formed even before reassembly
    decode_bc32_data(digest)
    if total == 1:
        verify_digest(digest, body)
    return ParsedFragment(tag, index, total, digest, body, sequenced=True)


def extract_sequence(fragment: str) -> Tuple[int, int]:
    """
    Return the (index, total) a fragment declares without validating its body.

    Unsequenced fragments report (1, 1).
    """
    if not isinstance(fragment, str):
        raise MalformedFragment(
            f"Fragment must be a string, got {type(fragment).__name__}",
            details={"type": type(fragment).__name__}
        )
    pieces = fragment.upper().split("/")
    if len(pieces) in (2, 3):
        return 1, 1
    if len(pieces) == 4:
        return parse_sequence(pieces[1])
    raise MalformedFragment(
        f"Invalid fragment pieces length: expected 2, 3 or 4 but got {len(pieces)}",
        details={"pieces": len(pieces)}
    )


def split_body(body: str, capacity: int) -> List[str]:
    """Split ``body`` into consecutive chunks of at most ``capacity`` characters."""
    return [body[i:i + capacity] for i in range(0, len(body), capacity)]
