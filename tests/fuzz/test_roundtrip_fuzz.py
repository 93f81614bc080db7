"""
Randomized roundtrip tests.

Random payload sizes and fragment capacities, decoded both as a whole set
and incrementally in shuffled order with repeats. Iteration count comes
from UR_FUZZ_COUNT.
"""

import math
import random

import pytest

from helpers import mk_payload
from urcodec.codec import encode_bc32_data, wrap
from urcodec.ur import AccumulationState, Complete, Pending, accumulate, decode_ur, encode_ur


@pytest.mark.fuzz
def test_random_roundtrips(fuzz_count):
    rng = random.Random(0xC0DE)
    for iteration in range(fuzz_count):
        size = rng.choice([rng.randint(1, 30), rng.randint(1, 600)])
        capacity = rng.randint(1, 250)
        payload = mk_payload(size, seed=iteration)

        parts = encode_ur(payload, capacity)
        body = encode_bc32_data(wrap(payload))
        assert len(parts) == math.ceil(len(body) / capacity), f"iteration {iteration}"
        assert decode_ur(parts) == payload, f"iteration {iteration}"

        frames = parts + rng.sample(parts, k=min(3, len(parts)))
        rng.shuffle(frames)
        state = AccumulationState()
        result = None
        for frame in frames:
            result = accumulate(state, frame)
            if result.done:
                break
            assert isinstance(result, Pending)
        assert result == Complete(payload, len(parts)), f"iteration {iteration}"


@pytest.mark.fuzz
def test_large_payload_uses_four_byte_header():
    payload = mk_payload(70_000, seed=99)
    parts = encode_ur(payload, 5000)
    assert decode_ur(reversed(parts)) == payload
