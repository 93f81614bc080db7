"""
Shared fixtures for the UR codec test suite.
"""
import os

import pytest

from helpers import load_golden, mk_payload


@pytest.fixture(scope="session")
def golden_multipart():
    """Seven-part message captured from a hardware-wallet export."""
    return load_golden("multipart_export.golden.json")


@pytest.fixture
def small_payload():
    """Payload that splits into a handful of fragments at low capacity."""
    return mk_payload(40, seed=7)


@pytest.fixture(scope="session")
def fuzz_count():
    """Iteration count for randomized tests."""
    return int(os.environ.get("UR_FUZZ_COUNT", "200"))
