"""
Pytest configuration and shared fixtures

Fun fact: The name "conftest" comes from pytest's configuration testing
framework. Files named conftest.py are automatically discovered and their
fixtures are available to all tests in the same directory and subdirectories!
"""

import tempfile
from pathlib import Path
from typing import Iterator

import pytest

from award_evaluation.award.repository import (
    SQLiteAwardPeriodRepository,
    SQLiteAwardRepository,
)
from award_evaluation.award.service import AwardService


class SequentialIdGenerator:
    """
    Deterministic id generator: award-1, award-2, ... and token-1, token-2, ...

    Predictable ids let tests assert exact values instead of shapes.
    """

    def __init__(self) -> None:
        self.awards = 0
        self.tokens = 0

    def new_award_id(self) -> str:
        self.awards += 1
        return f"award-{self.awards}"

    def new_token(self) -> str:
        self.tokens += 1
        return f"token-{self.tokens}"


@pytest.fixture
def temp_db() -> Iterator[Path]:
    """Provide a temporary database file that's cleaned up after test"""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup (WAL side files included)
    for path in (db_path, Path(f"{db_path}-wal"), Path(f"{db_path}-shm")):
        if path.exists():
            path.unlink()


@pytest.fixture
def award_repository(temp_db: Path) -> SQLiteAwardRepository:
    """Provide a fresh award repository for each test"""
    return SQLiteAwardRepository(temp_db)


@pytest.fixture
def award_period_repository(temp_db: Path) -> SQLiteAwardPeriodRepository:
    """Provide a fresh award period repository on the same database"""
    return SQLiteAwardPeriodRepository(temp_db)


@pytest.fixture
def id_generator() -> SequentialIdGenerator:
    return SequentialIdGenerator()


@pytest.fixture
def service(
    award_repository: SQLiteAwardRepository,
    award_period_repository: SQLiteAwardPeriodRepository,
    id_generator: SequentialIdGenerator,
) -> AwardService:
    """
    Provide an award service over SQLite with deterministic ids

    The service is stateless - repositories hold everything between calls.
    """
    return AwardService(award_repository, award_period_repository, id_generator)
