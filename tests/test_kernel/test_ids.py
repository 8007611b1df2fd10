"""
Tests for award id and token generation
"""

import re
import time

from award_evaluation.kernel.ids import TimeBasedIdGenerator, generate_id

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-7[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


def test_generate_id_has_uuid7_shape() -> None:
    assert UUID_PATTERN.match(generate_id())


def test_generate_id_is_unique() -> None:
    ids = {generate_id() for _ in range(1000)}

    assert len(ids) == 1000


def test_generate_id_is_time_ordered() -> None:
    first = generate_id()
    time.sleep(0.002)
    second = generate_id()

    assert first[:13] <= second[:13]


def test_time_based_generator_gives_distinct_id_and_token() -> None:
    generator = TimeBasedIdGenerator()

    award_id = generator.new_award_id()
    token = generator.new_token()

    assert award_id != token
    assert UUID_PATTERN.match(award_id)
    assert UUID_PATTERN.match(token)
