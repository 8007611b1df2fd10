"""
Award Repositories - persisted awards and award periods

The workflows see typed records only: the award body is serialized to JSON
here, at the storage boundary, and comes back as an Award model.

Schema:
- awards: one row per award, keyed by token, body in award_json
- award_periods: one start date per (cpid, stage), written once
"""

import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, Protocol

from pydantic import BaseModel

from award_evaluation.award.models import (
    TYPED_VALUES_CONTEXT,
    Award,
    AwardStatus,
    AwardStatusDetails,
)
from award_evaluation.kernel.errors import AwardStoreError
from award_evaluation.kernel.logging import get_logger
from award_evaluation.kernel.retry import retry_on_sqlite_lock

logger = get_logger(__name__)


def _dump_award(award: Award) -> str:
    # requirement response values keep their Python type across storage
    return award.model_dump_json(context=TYPED_VALUES_CONTEXT)


def _load_award(award_json: str) -> Award:
    return Award.model_validate_json(award_json)


class AwardRecord(BaseModel):
    """
    Persisted award with its storage keys

    status and status_details mirror the award body so they can be
    filtered on without decoding it.
    """

    cpid: str
    stage: str
    token: str
    owner: str | None = None
    status: AwardStatus
    status_details: AwardStatusDetails
    award: Award

    @classmethod
    def of(cls, cpid: str, stage: str, owner: str | None, award: Award) -> "AwardRecord":
        return cls(
            cpid=cpid,
            stage=stage,
            token=award.token,
            owner=owner,
            status=award.status,
            status_details=award.status_details,
            award=award,
        )

    def with_award(self, award: Award) -> "AwardRecord":
        """Same storage keys, new body (status columns follow the body)"""
        return self.model_copy(
            update={
                "status": award.status,
                "status_details": award.status_details,
                "award": award,
            }
        )


class AwardRepository(Protocol):
    """Storage of award records"""

    def find_by_contract(self, cpid: str, stage: str | None = None) -> list[AwardRecord]:
        ...

    def find_one(self, cpid: str, stage: str, token: str) -> AwardRecord | None:
        ...

    def insert(self, record: AwardRecord) -> None:
        ...

    def insert_all(self, records: list[AwardRecord]) -> None:
        """Insert several records, all or none"""
        ...

    def update(self, record: AwardRecord) -> None:
        ...


class AwardPeriodRepository(Protocol):
    """Storage of the award period start per (cpid, stage)"""

    def find_start(self, cpid: str, stage: str) -> datetime | None:
        ...

    def save_start(self, cpid: str, stage: str, start: datetime) -> datetime:
        """Store start if none is stored yet; return the stored start"""
        ...


class _SQLiteStore(ABC):
    """Shared connection handling for the SQLite repositories"""

    def __init__(self, db_path: str | Path) -> None:
        """
        Args:
            db_path: Path to SQLite database file (both repositories may share one)
        """
        self.db_path = Path(db_path)
        self._initialize_schema()

    @abstractmethod
    def _initialize_schema(self) -> None:
        """Create this store's tables if missing"""

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections"""
        conn = sqlite3.connect(str(self.db_path), timeout=5.0)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()


class SQLiteAwardRepository(_SQLiteStore):
    """SQLite-backed award records"""

    def _initialize_schema(self) -> None:
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("""
                CREATE TABLE IF NOT EXISTS awards (
                    token TEXT PRIMARY KEY,
                    cpid TEXT NOT NULL,
                    stage TEXT NOT NULL,
                    award_id TEXT NOT NULL UNIQUE,
                    owner TEXT,
                    status TEXT NOT NULL,
                    status_details TEXT NOT NULL,
                    award_json TEXT NOT NULL
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_awards_contract ON awards(cpid, stage)"
            )
            conn.commit()

    @staticmethod
    def _to_record(row: sqlite3.Row) -> AwardRecord:
        return AwardRecord(
            cpid=row["cpid"],
            stage=row["stage"],
            token=row["token"],
            owner=row["owner"],
            status=AwardStatus(row["status"]),
            status_details=AwardStatusDetails(row["status_details"]),
            award=_load_award(row["award_json"]),
        )

    def find_by_contract(self, cpid: str, stage: str | None = None) -> list[AwardRecord]:
        """
        All awards of a contract, optionally limited to one stage

        Returns:
            Records in insertion order
        """
        with self._connect() as conn:
            if stage is None:
                cursor = conn.execute(
                    "SELECT * FROM awards WHERE cpid = ? ORDER BY rowid", (cpid,)
                )
            else:
                cursor = conn.execute(
                    "SELECT * FROM awards WHERE cpid = ? AND stage = ? ORDER BY rowid",
                    (cpid, stage),
                )
            return [self._to_record(row) for row in cursor.fetchall()]

    def find_one(self, cpid: str, stage: str, token: str) -> AwardRecord | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM awards WHERE cpid = ? AND stage = ? AND token = ?",
                (cpid, stage, token),
            ).fetchone()
            return self._to_record(row) if row else None

    @retry_on_sqlite_lock()
    def insert(self, record: AwardRecord) -> None:
        """
        Insert a new award record

        Raises:
            AwardStoreError: If the token or award id is already stored
        """
        with self._connect() as conn:
            try:
                conn.execute(
                    """
                    INSERT INTO awards
                        (token, cpid, stage, award_id, owner, status, status_details, award_json)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.token,
                        record.cpid,
                        record.stage,
                        record.award.id,
                        record.owner,
                        record.status.value,
                        record.status_details.value,
                        _dump_award(record.award),
                    ),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                raise AwardStoreError(
                    f"Award {record.award.id} already stored for contract {record.cpid}"
                ) from e

    @retry_on_sqlite_lock()
    def insert_all(self, records: list[AwardRecord]) -> None:
        """
        Insert several new award records in one transaction

        Either every record is stored or none is.

        Raises:
            AwardStoreError: If any token or award id is already stored
        """
        with self._connect() as conn:
            try:
                conn.executemany(
                    """
                    INSERT INTO awards
                        (token, cpid, stage, award_id, owner, status, status_details, award_json)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            record.token,
                            record.cpid,
                            record.stage,
                            record.award.id,
                            record.owner,
                            record.status.value,
                            record.status_details.value,
                            _dump_award(record.award),
                        )
                        for record in records
                    ],
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                award_ids = ", ".join(record.award.id for record in records)
                raise AwardStoreError(
                    f"Awards {award_ids} not stored for contract {records[0].cpid}: {e}"
                ) from e

    @retry_on_sqlite_lock()
    def update(self, record: AwardRecord) -> None:
        """
        Replace status columns and body of a stored award

        Raises:
            AwardStoreError: If no record matches (cpid, stage, token)
        """
        with self._connect() as conn:
            cursor = conn.execute(
                """
                UPDATE awards
                SET status = ?, status_details = ?, award_json = ?
                WHERE cpid = ? AND stage = ? AND token = ?
                """,
                (
                    record.status.value,
                    record.status_details.value,
                    _dump_award(record.award),
                    record.cpid,
                    record.stage,
                    record.token,
                ),
            )
            if cursor.rowcount == 0:
                conn.rollback()
                raise AwardStoreError(
                    f"Award {record.award.id} is not stored for contract {record.cpid}"
                )
            conn.commit()


class SQLiteAwardPeriodRepository(_SQLiteStore):
    """
    SQLite-backed award period starts

    save_start is an atomic insert-if-absent: concurrent first writers for the
    same (cpid, stage) all read back the single start that won.
    """

    def _initialize_schema(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS award_periods (
                    cpid TEXT NOT NULL,
                    stage TEXT NOT NULL,
                    start_date TEXT NOT NULL,
                    PRIMARY KEY (cpid, stage)
                )
            """)
            conn.commit()

    def find_start(self, cpid: str, stage: str) -> datetime | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT start_date FROM award_periods WHERE cpid = ? AND stage = ?",
                (cpid, stage),
            ).fetchone()
            return datetime.fromisoformat(row["start_date"]) if row else None

    @retry_on_sqlite_lock()
    def save_start(self, cpid: str, stage: str, start: datetime) -> datetime:
        """
        Store the award period start unless one exists

        Returns:
            The start actually stored (ours, or the one that got there first)
        """
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO award_periods (cpid, stage, start_date)
                VALUES (?, ?, ?)
                ON CONFLICT(cpid, stage) DO NOTHING
                """,
                (cpid, stage, start.isoformat()),
            )
            row = conn.execute(
                "SELECT start_date FROM award_periods WHERE cpid = ? AND stage = ?",
                (cpid, stage),
            ).fetchone()
            conn.commit()

        if cursor.rowcount == 0:
            logger.info(
                "Award period already started by a concurrent request",
                cpid=cpid,
                stage=stage,
            )
        return datetime.fromisoformat(row["start_date"])
