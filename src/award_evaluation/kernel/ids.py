"""
ID generation using UUIDv7 (time-ordered UUIDs)

Award ids and tokens are both UUIDv7-like values: sortable by creation time,
globally unique, and carrying 74 random bits so tokens cannot be guessed.

Fun fact: there are 2^122 possible UUIDv7 values, so you'd need to generate
a trillion IDs per second for 85 years to have a 50% chance of a collision!
"""

import secrets
import time
from typing import Protocol


class IdGenerator(Protocol):
    """Protocol for award id and token generation strategies"""

    def new_award_id(self) -> str:
        """Generate a new unique award id"""
        ...

    def new_token(self) -> str:
        """Generate a new unique award token"""
        ...


def generate_id() -> str:
    """
    Generate a UUIDv7-like identifier (time-ordered UUID)

    Format: 8-4-4-4-12 hex characters (36 chars with hyphens)
    First 48 bits: Unix timestamp in milliseconds
    Next 12 bits: Random
    Remaining 62 bits: Random

    Returns:
        Sortable UUID string (e.g., "01908e9a-3b87-7000-8000-123456789abc")
    """
    timestamp_48 = int(time.time() * 1000) & 0xFFFFFFFFFFFF

    rand_12 = secrets.randbits(12)
    rand_62 = secrets.randbits(62)

    # Version 7 (0111) in bits 48-51, variant (10) in bits 64-65
    time_high = (timestamp_48 >> 32) & 0xFFFF
    time_mid = (timestamp_48 >> 16) & 0xFFFF
    time_low_and_version = ((timestamp_48 & 0xFFFF) << 16) | (0x7000 | rand_12)
    clock_seq_and_variant = 0x8000 | ((rand_62 >> 48) & 0x3FFF)
    node = rand_62 & 0xFFFFFFFFFFFF

    return (
        f"{time_high:04x}{time_mid:04x}-"
        f"{(time_low_and_version >> 16) & 0xFFFF:04x}-"
        f"{time_low_and_version & 0xFFFF:04x}-"
        f"{clock_seq_and_variant:04x}-"
        f"{node:012x}"
    )


class TimeBasedIdGenerator:
    """Default generator: award ids and tokens are independent UUIDv7 values"""

    def new_award_id(self) -> str:
        return generate_id()

    def new_token(self) -> str:
        return generate_id()


# Global default generator
default_id_generator = TimeBasedIdGenerator()
