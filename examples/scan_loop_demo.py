#!/usr/bin/env python3
"""
Example: Animated QR transfer simulated end to end.

This example demonstrates:
1. Splitting a payload into UR parts for an animated QR display
2. A scan loop that receives frames out of order, with repeats and a
   corrupted frame
3. Reporting progress and recovering from a rejected frame with reset()

Requirements:
- None; frames are simulated in-process
"""

import logging
import random
import secrets
import sys

from urcodec import URDecoder, UREncoder


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def camera_frames(parts, rng, corrupt_once=False):
    """Yield displayed frames the way a camera sees them: looping, skipping, repeating."""
    corrupted = not corrupt_once
    while True:
        for part in parts:
            if rng.random() < 0.3:
                continue
            if not corrupted and rng.random() < 0.2:
                corrupted = True
                yield part[:-1] + ("Q" if part[-1] != "Q" else "P")
                continue
            yield part


def scan(decoder, frames, max_frames=1000):
    """Feed frames until the decoder finishes."""
    for count, frame in enumerate(frames, start=1):
        decoder.receive_part(frame)
        progress = decoder.progress()
        logger.info(f"frame {count}: {progress.parts_received}/{progress.total_parts}")
        if decoder.is_complete() or count >= max_frames:
            break


def main():
    rng = random.Random(42)
    payload = secrets.token_bytes(1500)

    encoder = UREncoder(payload, fragment_capacity=250)
    parts = encoder.parts()
    logger.info(f"Displaying {len(parts)} parts for a {len(payload)}-byte payload")
    for part in parts[:2]:
        logger.info(f"  {part[:60]}...")

    decoder = URDecoder()
    frames = camera_frames(parts, rng, corrupt_once=True)
    scan(decoder, frames)

    if not decoder.is_success():
        logger.warning(f"Scan failed: {decoder.error_message()}; rescanning")
        decoder.reset()
        scan(decoder, camera_frames(parts, rng))

    if decoder.data() != payload:
        logger.error("Payload mismatch")
        return 1
    logger.info(f"Recovered {len(decoder.data())} bytes, hex prefix {decoder.hex()[:16]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
