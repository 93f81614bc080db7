"""
Decoder and accumulator tests.

Covers whole-set decoding, incremental accumulation in any order, the
sequence guards and corruption detection.
"""

import itertools
import logging

import pytest

from helpers import mk_digest_fragment, mk_payload, replace_body_char, shuffled
from urcodec.codec import bc32_digest, encode_bc32_data, wrap
from urcodec.runtime.errors import (
    AlphabetViolation, ChecksumMismatch, ErrorCode, InvalidOptions, MalformedFragment,
    SequenceInconsistency, URError
)
from urcodec.ur.decoder import (
    MISSING_DETAIL_LIMIT, AccumulationState, Complete, Pending, accumulate, decode_ur, decode_ur_hex
)
from urcodec.ur.encoder import encode_ur


@pytest.mark.unit
class TestDecodeUR:

    def test_single_fragment(self):
        assert decode_ur(encode_ur(b"\x01")) == b"\x01"

    def test_lowercase_input(self):
        parts = [p.lower() for p in encode_ur(mk_payload(90), 25)]
        assert decode_ur(parts) == mk_payload(90)

    def test_multiple_fragments_any_order(self, small_payload):
        parts = encode_ur(small_payload, 12)
        assert decode_ur(parts) == small_payload
        assert decode_ur(list(reversed(parts))) == small_payload
        assert decode_ur(shuffled(parts, seed=3)) == small_payload

    def test_accepts_generator(self, small_payload):
        assert decode_ur(p for p in encode_ur(small_payload, 12)) == small_payload

    def test_repeated_fragments_ignored(self, small_payload):
        parts = encode_ur(small_payload, 12)
        assert decode_ur(parts + parts[:2]) == small_payload

    def test_digest_without_sequence(self):
        payload = mk_payload(33)
        assert decode_ur([mk_digest_fragment(payload)]) == payload

    def test_digest_free_single_fragment_is_not_hash_checked(self):
        # Two-part fragments carry no digest; only the text checksum protects them
        part = encode_ur(mk_payload(10))[0]
        assert part.count("/") == 1
        assert decode_ur([part]) == mk_payload(10)

    def test_hex(self):
        assert decode_ur_hex(encode_ur(b"\xde\xad\xbe\xef", 3)) == "deadbeef"

    def test_custom_type(self):
        parts = encode_ur(b"psbt", 4, ur_type="crypto-psbt")
        assert decode_ur(parts, ur_type="crypto-psbt") == b"psbt"
        with pytest.raises(MalformedFragment):
            decode_ur(parts)

    def test_empty(self):
        with pytest.raises(MalformedFragment):
            decode_ur([])

    def test_bad_type_option(self):
        with pytest.raises(InvalidOptions):
            decode_ur(encode_ur(b"\x01"), ur_type="")

    def test_incomplete_set(self, small_payload):
        parts = encode_ur(small_payload, 12)
        with pytest.raises(SequenceInconsistency) as exc:
            decode_ur(parts[:-1])
        assert exc.value.details["missing"] == [len(parts)]
        assert exc.value.details["missingCount"] == 1

    def test_huge_declared_total(self):
        payload = b"\x01\x02\x03"
        envelope = wrap(payload)
        fragment = f"UR:BYTES/1OF300000000/{bc32_digest(envelope)}/{encode_bc32_data(envelope)}".upper()
        with pytest.raises(SequenceInconsistency) as exc:
            decode_ur([fragment])
        details = exc.value.details
        assert details["total"] == 300000000
        assert details["received"] == 1
        assert details["missingCount"] == 299999999
        assert details["missing"] == list(range(2, 2 + MISSING_DETAIL_LIMIT))

    def test_total_mismatch(self):
        two = encode_ur(mk_payload(20, seed=1), 20)
        three = encode_ur(mk_payload(30, seed=2), 20)
        assert (len(two), len(three)) == (2, 3)
        with pytest.raises(SequenceInconsistency) as exc:
            decode_ur([two[0], three[1]])
        assert exc.value.code == ErrorCode.TOTAL_MISMATCH

    def test_digest_changed_between_fragments(self):
        a = encode_ur(mk_payload(30, seed=1), 20)
        b = encode_ur(mk_payload(30, seed=2), 20)
        with pytest.raises(ChecksumMismatch) as exc:
            decode_ur([a[0], b[1], a[2]])
        assert exc.value.code == ErrorCode.DIGEST_MISMATCH

    def test_aggregate_digest_mismatch(self):
        payload = mk_payload(30, seed=1)
        wrong = bc32_digest(wrap(mk_payload(30, seed=2))).upper()
        parts = []
        for part in encode_ur(payload, 20):
            pieces = part.split("/")
            pieces[2] = wrong
            parts.append("/".join(pieces))
        with pytest.raises(ChecksumMismatch) as exc:
            decode_ur(parts)
        assert exc.value.code == ErrorCode.DIGEST_MISMATCH

    def test_mixed_sequenced_and_single(self, small_payload):
        parts = encode_ur(small_payload, 12)
        with pytest.raises(SequenceInconsistency):
            decode_ur([encode_ur(small_payload)[0]] + parts)


@pytest.mark.unit
class TestCorruptionDetection:

    def test_every_body_position_single_fragment(self):
        part = encode_ur(mk_payload(16))[0]
        body_len = len(part.split("/")[-1])
        for position in range(body_len):
            with pytest.raises((ChecksumMismatch, AlphabetViolation)):
                decode_ur([replace_body_char(part, position)])

    def test_every_body_position_multi_fragment(self):
        parts = encode_ur(mk_payload(24), 9)
        for index, part in enumerate(parts):
            for position in range(len(part.split("/")[-1])):
                corrupted = list(parts)
                corrupted[index] = replace_body_char(part, position)
                with pytest.raises((ChecksumMismatch, AlphabetViolation)):
                    decode_ur(corrupted)

    def test_lowercased_character(self):
        part = encode_ur(mk_payload(16))[0]
        position = next(i for i, c in enumerate(part.split("/")[-1]) if c.isalpha())
        with pytest.raises(AlphabetViolation):
            decode_ur([replace_body_char(part, position, part.split("/")[-1][position].lower())])

    def test_non_alphabet_character(self):
        part = encode_ur(mk_payload(16))[0]
        with pytest.raises(AlphabetViolation):
            decode_ur([replace_body_char(part, 3, "O")])


@pytest.mark.unit
class TestAccumulate:

    def test_single_fragment_completes_immediately(self):
        state = AccumulationState()
        result = accumulate(state, encode_ur(b"\x01")[0])
        assert isinstance(result, Complete)
        assert result.done
        assert result.payload == b"\x01"
        assert result.total == result.received == 1
        assert state.success

    def test_pending_then_complete(self, small_payload):
        parts = encode_ur(small_payload, 12)
        total = len(parts)
        state = AccumulationState()
        assert not state.started

        for received, part in enumerate(parts[:-1], start=1):
            result = accumulate(state, part)
            assert result == Pending(received=received, total=total)
            assert not result.done
        assert state.missing() == [total]

        result = accumulate(state, parts[-1])
        assert result == Complete(payload=small_payload, total=total)
        assert state.payload == small_payload

    def test_every_permutation(self):
        payload = mk_payload(12, seed=5)
        parts = encode_ur(payload, 7)
        assert len(parts) == 4
        for order in itertools.permutations(parts):
            state = AccumulationState()
            results = [accumulate(state, part) for part in order]
            assert all(isinstance(r, Pending) for r in results[:-1])
            assert results[-1] == Complete(payload, 4)

    def test_duplicates_do_not_count(self, small_payload):
        parts = encode_ur(small_payload, 12)
        state = AccumulationState()
        accumulate(state, parts[0])
        result = accumulate(state, parts[0])
        assert result == Pending(received=1, total=len(parts))
        result = accumulate(state, parts[0].lower())
        assert result == Pending(received=1, total=len(parts))

    def test_duplicate_index_with_different_content(self, small_payload):
        parts = encode_ur(small_payload, 12)
        state = AccumulationState()
        accumulate(state, parts[1])
        with pytest.raises(SequenceInconsistency) as exc:
            accumulate(state, replace_body_char(parts[1], 0))
        assert exc.value.code == ErrorCode.DUPLICATE_INDEX
        assert state.received == 1

    def test_total_three_joining_total_two(self):
        two = encode_ur(mk_payload(20, seed=1), 20)
        three = encode_ur(mk_payload(30, seed=2), 20)
        state = AccumulationState()
        accumulate(state, two[0])
        with pytest.raises(SequenceInconsistency) as exc:
            accumulate(state, three[1])
        assert exc.value.code == ErrorCode.TOTAL_MISMATCH
        assert state.total == 2
        assert state.received == 1

    def test_digest_conflict_rejected_on_arrival(self):
        a = encode_ur(mk_payload(30, seed=1), 20)
        b = encode_ur(mk_payload(30, seed=2), 20)
        state = AccumulationState()
        accumulate(state, a[0])
        with pytest.raises(ChecksumMismatch):
            accumulate(state, b[1])
        assert state.received == 1
        accumulate(state, a[1])
        assert accumulate(state, a[2]) == Complete(mk_payload(30, seed=1), 3)

    def test_rejected_first_fragment_leaves_state_fresh(self):
        state = AccumulationState()
        with pytest.raises(URError):
            accumulate(state, "UR:BYTES/1OF2/nope")
        assert not state.started

    def test_failed_completion_rolls_back(self, small_payload):
        parts = encode_ur(small_payload, 12)
        state = AccumulationState()
        for part in parts[:-1]:
            accumulate(state, part)
        received = state.received

        with pytest.raises(ChecksumMismatch):
            accumulate(state, replace_body_char(parts[-1], 0))
        assert state.received == received
        assert not state.is_complete
        assert state.missing() == [len(parts)]

        assert accumulate(state, parts[-1]) == Complete(small_payload, len(parts))

    def test_failed_single_fragment_leaves_state_fresh(self):
        part = encode_ur(mk_payload(16))[0]
        state = AccumulationState()
        with pytest.raises(ChecksumMismatch):
            accumulate(state, replace_body_char(part, 0))
        assert not state.started
        assert accumulate(state, part) == Complete(mk_payload(16), 1)

    def test_decoded_logged_once(self, caplog):
        parts = encode_ur(mk_payload(30), 20)
        state = AccumulationState()
        with caplog.at_level(logging.INFO, logger="urcodec.ur.decoder"):
            for part in parts + parts:
                accumulate(state, part)
        decoded = [r for r in caplog.records if r.getMessage().startswith("Decoded")]
        assert len(decoded) == 1

    def test_missing_is_capped(self):
        state = AccumulationState(total=10 ** 9)
        assert state.missing(limit=3) == [1, 2, 3]
        assert len(state.missing()) == MISSING_DETAIL_LIMIT

    def test_complete_result_is_stable(self):
        parts = encode_ur(mk_payload(30), 20)
        state = AccumulationState()
        for part in parts:
            result = accumulate(state, part)
        assert accumulate(state, parts[0]) == result

    def test_assemble_before_complete(self, small_payload):
        state = AccumulationState()
        accumulate(state, encode_ur(small_payload, 12)[0])
        with pytest.raises(SequenceInconsistency):
            state.assemble()

    def test_type_is_checked(self):
        state = AccumulationState(ur_type="crypto-psbt")
        with pytest.raises(MalformedFragment):
            accumulate(state, encode_ur(b"\x01")[0])
        assert accumulate(state, encode_ur(b"\x01", ur_type="crypto-psbt")[0]).done
