"""
UR decoder and fragment accumulator.

Reassembles a payload from UR fragments, either all at once
(:func:`decode_ur`) or incrementally as parts arrive from a scan loop
(:func:`accumulate`, :class:`URDecoder`).

Accumulation state is caller-held and not thread-safe; serialize calls that
feed the same state.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from ..codec.bech32 import decode_bc32_data
from ..codec.envelope import unwrap
from ..runtime.errors import ChecksumMismatch, ErrorCode, MalformedFragment, SequenceInconsistency, URError
from ..runtime.options import DEFAULT_UR_TYPE, DecoderOptions, build_options
from .fragments import ParsedFragment, parse_fragment, verify_digest

logger = logging.getLogger(__name__)

# Upper bound on missing indexes reported in error details
MISSING_DETAIL_LIMIT = 32


@dataclass(frozen=True)
class Pending:
    """More fragments are needed."""
    received: int
    total: int

    @property
    def done(self) -> bool:
        return False


@dataclass(frozen=True)
class Complete:
    """All fragments arrived and the payload was recovered."""
    payload: bytes
    total: int

    @property
    def done(self) -> bool:
        return True

    @property
    def received(self) -> int:
        return self.total


AccumulateResult = Union[Pending, Complete]


@dataclass
class AccumulationState:
    """
    Fragments observed so far for one in-progress message.

    ``total`` and ``digest`` are fixed by the first accepted fragment. Slots
    map 1-based index to the fragment that filled it.
    """
    ur_type: str = DEFAULT_UR_TYPE
    total: Optional[int] = None
    digest: Optional[str] = None
    slots: Dict[int, ParsedFragment] = field(default_factory=dict)
    payload: Optional[bytes] = None

    @property
    def started(self) -> bool:
        return self.total is not None

    @property
    def received(self) -> int:
        return len(self.slots)

    @property
    def is_complete(self) -> bool:
        return self.started and self.received == self.total

    @property
    def success(self) -> bool:
        return self.payload is not None

    def missing(self, limit: int = MISSING_DETAIL_LIMIT) -> List[int]:
        """
        Indexes not yet received, lowest first.

        At most ``limit`` indexes are returned; the scan stops once that many
        are found, so the cost does not depend on the declared total.
        """
        out: List[int] = []
        if self.total is None:
            return out
        index = 1
        while index <= self.total and len(out) < limit:
            if index not in self.slots:
                out.append(index)
            index += 1
        return out

    def discard(self, parsed: ParsedFragment) -> None:
        """Remove a fragment placed by :meth:`add`, forgetting total and digest if it was the only one."""
        self.slots.pop(parsed.index, None)
        if not self.slots:
            self.total = None
            self.digest = None

    def add(self, parsed: ParsedFragment) -> bool:
        """
        Place a parsed fragment in its slot.

        Returns:
            True if the fragment was new, False if it was a duplicate

        Raises:
            SequenceInconsistency: On a conflicting total, or a different
                fragment at an occupied index
            ChecksumMismatch: On a digest that differs from the recorded one
        """
        if self.started:
            if parsed.total != self.total:
                raise SequenceInconsistency(
                    f"Fragment total {parsed.total} does not match {self.total}",
                    ErrorCode.TOTAL_MISMATCH,
                    details={"expected": self.total, "got": parsed.total, "index": parsed.index}
                )
            if parsed.digest != self.digest:
                raise ChecksumMismatch(
                    f"Digest changed from {self.digest} to {parsed.digest}",
                    ErrorCode.DIGEST_MISMATCH,
                    details={"expected": self.digest, "got": parsed.digest, "index": parsed.index}
                )
            existing = self.slots.get(parsed.index)
            if existing is not None:
                if existing.text == parsed.text:
                    return False
                raise SequenceInconsistency(
                    f"Index {parsed.index} has already been set",
                    ErrorCode.DUPLICATE_INDEX,
                    details={"index": parsed.index, "total": self.total}
                )
        else:
            self.total = parsed.total
            self.digest = parsed.digest
        self.slots[parsed.index] = parsed
        return True

    def assemble(self) -> bytes:
        """
        Join bodies in index order, verify the digest and unwrap the payload.

        Raises:
            SequenceInconsistency: If fragments are still missing
            ChecksumMismatch: If the body checksum or the digest fails
            LengthOutOfRange: If the envelope is malformed
        """
        if self.payload is not None:
            return self.payload
        if not self.is_complete:
            raise SequenceInconsistency(
                "Cannot decode before all fragments are received",
                details={
                    "received": self.received,
                    "total": self.total,
                    "missingCount": (self.total or 0) - self.received,
                    "missing": self.missing(),
                }
            )
        body = "".join(self.slots[i].body for i in range(1, self.total + 1))
        if self.digest is not None:
            envelope = verify_digest(self.digest, body)
        else:
            envelope = decode_bc32_data(body)
        self.payload = unwrap(envelope)
        return self.payload


def accumulate(state: AccumulationState, fragment: str) -> AccumulateResult:
    """
    Feed one fragment into ``state``.

    Repeating a fragment is harmless. A rejected fragment leaves the state
    unchanged, including a completing fragment whose reassembled message
    fails its checksum or digest; a genuine resend of that index is then
    accepted.

    Args:
        state: Caller-held accumulation state
        fragment: One UR fragment string

    Returns:
        Complete with the payload once every index is filled, otherwise
        Pending with progress counts
    """
    parsed = parse_fragment(fragment, state.ur_type)
    added = state.add(parsed)
    if added:
        logger.debug(f"Accepted fragment {parsed.index}/{parsed.total} ({state.received} received)")

    if state.is_complete:
        if state.payload is None:
            try:
                state.assemble()
            except URError:
                # Roll back the completing fragment
                if added:
                    state.discard(parsed)
                raise
            logger.info(f"Decoded {len(state.payload)}-byte payload from {state.total} fragments")
        return Complete(state.payload, state.total)
    return Pending(state.received, state.total)


def decode_ur(fragments: Iterable[str], ur_type: str = DEFAULT_UR_TYPE) -> bytes:
    """
    Decode a complete set of fragments, in any order.

    Identical repeated fragments are ignored.

    Args:
        fragments: Every fragment of one message
        ur_type: Expected UR type tag

    Returns:
        The original payload

    Raises:
        SequenceInconsistency: If the set is incomplete or inconsistent
        MalformedFragment: If no fragments are given or one is malformed
    """
    options = build_options(DecoderOptions, ur_type=ur_type)
    fragments = list(fragments)
    if not fragments:
        raise MalformedFragment("No fragments to decode")

    state = AccumulationState(ur_type=options.ur_type)
    for fragment in fragments:
        state.add(parse_fragment(fragment, options.ur_type))
    return state.assemble()


def decode_ur_hex(fragments: Iterable[str], ur_type: str = DEFAULT_UR_TYPE) -> str:
    """Decode a complete set of fragments to a hex string."""
    return decode_ur(fragments, ur_type).hex()


@dataclass(frozen=True)
class Progress:
    """Scan progress."""
    total_parts: int
    parts_received: int

    def to_dict(self) -> Dict[str, Any]:
        return {"totalParts": self.total_parts, "partsReceived": self.parts_received}


class URDecoder:
    """
    Stateful decoder for a scan loop.

    Example::

        decoder = URDecoder()
        while not decoder.is_complete():
            decoder.receive_part(scan_qr_code())
        if decoder.is_success():
            payload = decoder.data()
        else:
            print(decoder.error_message())
    """

    def __init__(self, ur_type: str = DEFAULT_UR_TYPE):
        """
        Initialize decoder.

        Args:
            ur_type: Expected UR type tag
        """
        self.options = build_options(DecoderOptions, ur_type=ur_type)
        self._state = AccumulationState(ur_type=self.options.ur_type)
        self._error: Optional[URError] = None

    @property
    def state(self) -> AccumulationState:
        return self._state

    def reset(self) -> None:
        """Drop received parts and any error."""
        self._state = AccumulationState(ur_type=self.options.ur_type)
        self._error = None

    def receive_part(self, part: str) -> Optional[AccumulateResult]:
        """
        Receive a new UR part.

        Calling this repeatedly with the same part is fine. Failures are
        recorded rather than raised and end the session; call :meth:`reset`
        to start over.

        Returns:
            The accumulation result, or None if the part was rejected or the
            decoder had already finished
        """
        if self.is_complete():
            logger.debug("Ignoring part received after decoder completed")
            return None
        try:
            return accumulate(self._state, part)
        except URError as e:
            logger.warning(f"Rejected UR part: {e}")
            self._error = e
            return None

    def progress(self) -> Progress:
        """Current progress; zero parts before the first accepted part."""
        return Progress(self._state.total or 0, self._state.received)

    def is_complete(self) -> bool:
        """True once the payload is decoded or an error occurred."""
        return self._state.success or self._error is not None

    def is_success(self) -> bool:
        """True if the payload was decoded."""
        return self._state.success

    def data(self) -> Optional[bytes]:
        """Decoded payload, or None if not successful."""
        return self._state.payload if self.is_success() else None

    def hex(self) -> Optional[str]:
        """Decoded payload as a hex string, or None if not successful."""
        payload = self.data()
        return payload.hex() if payload is not None else None

    def error(self) -> Optional[URError]:
        return self._error

    def error_message(self) -> Optional[str]:
        """Message of the recorded error, or None."""
        return self._error.message if self._error is not None else None
