"""
Match Store - Durable history of finished matches.

The store:
- Is append-only: records are only ever added or deleted, never edited
- Hands out integer ids that increase and are never reused
- Lists newest first (id descending)
- Runs every operation in one transaction, so readers never see a
  half-written record and a failed write leaves nothing behind

Usage:
    store = MatchStore.from_url("sqlite:///matches.db")
    store.initialize()          # safe on every start

    record = store.append(Outcome.P1, 5, engine.state.board)
    for record in store.list():
        ...
    store.remove_by_id(record.id)
    store.clear()
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Sequence
import logging
import time

from sqlalchemy import Engine, delete, select
from sqlalchemy.exc import SQLAlchemyError

from ..engine_core.state import BOARD_SIZE, Board, BoardCell, Outcome
from .codec import BoardCodecError, decode_board, encode_board
from .database import Base, ensure_sqlite_directory, make_engine, make_session_factory
from .models import MatchRow

logger = logging.getLogger(__name__)


class MatchStoreError(Exception):
    """A storage operation failed. Nothing was partially written."""


class CorruptRecordError(MatchStoreError):
    """A stored row can no longer be decoded. It can still be deleted."""

    def __init__(self, record_id: int, message: str):
        super().__init__(message)
        self.record_id = record_id


@dataclass(frozen=True)
class MatchRecord:
    """One persisted summary of a finished match."""
    id: int
    created_at: int  # epoch milliseconds
    winner: Outcome
    moves_count: int
    board: Board


def _now_ms() -> int:
    return int(time.time() * 1000)


class MatchStore:
    """
    SQLAlchemy-backed match history.

    The store owns its engine. Build one at application start, pass it to
    whoever needs it, and close() it at shutdown.
    """

    def __init__(self, engine: Engine, clock: Callable[[], int] = _now_ms):
        self.engine = engine
        self._session_factory = make_session_factory(engine)
        self._clock = clock

    @classmethod
    def from_url(cls, database_url: str, **kwargs) -> MatchStore:
        try:
            engine = make_engine(database_url)
        except (SQLAlchemyError, ValueError, ImportError) as e:
            raise MatchStoreError(f"Invalid database URL {database_url!r}: {e}") from e
        return cls(engine, **kwargs)

    def initialize(self):
        """Create the matches table if missing. Never drops data."""
        try:
            ensure_sqlite_directory(self.engine)
            Base.metadata.create_all(bind=self.engine, tables=[MatchRow.__table__])
        except (OSError, SQLAlchemyError) as e:
            raise MatchStoreError(f"Could not initialize match storage: {e}") from e

    def append(
        self,
        winner: Outcome | str,
        moves_count: int,
        board: Sequence[BoardCell | None],
    ) -> MatchRecord:
        """Persist a finished match and return the stored record."""
        try:
            outcome = Outcome(winner)
        except ValueError as e:
            raise MatchStoreError(f"Invalid winner: {winner!r}") from e
        if not isinstance(moves_count, int) or not 0 <= moves_count <= BOARD_SIZE:
            raise MatchStoreError(f"moves_count must be between 0 and {BOARD_SIZE}")

        try:
            board_json = encode_board(board)
        except BoardCodecError as e:
            raise MatchStoreError(f"Could not serialize board: {e}") from e

        row = MatchRow(
            created_at=self._clock(),
            winner=outcome.value,
            moves_count=moves_count,
            board_json=board_json,
        )
        try:
            with self._session_factory.begin() as session:
                session.add(row)
                session.flush()
                record = self._to_record(row)
        except SQLAlchemyError as e:
            raise MatchStoreError(f"Could not save match: {e}") from e

        logger.debug("Saved match %d (%s, %d moves)", record.id, outcome.value, moves_count)
        return record

    def list(self) -> list[MatchRecord]:
        """All records, newest first. Raises CorruptRecordError on an unreadable row."""
        records, corrupt = self.list_readable()
        if corrupt:
            raise corrupt[0]
        return records

    def list_readable(self) -> tuple[list[MatchRecord], list[CorruptRecordError]]:
        """
        All decodable records newest first, plus one error per unreadable row.

        Lets a caller show the rest of the history and offer to delete the
        broken rows by id.
        """
        records: list[MatchRecord] = []
        corrupt: list[CorruptRecordError] = []
        try:
            with self._session_factory() as session:
                rows = session.scalars(select(MatchRow).order_by(MatchRow.id.desc())).all()
        except SQLAlchemyError as e:
            raise MatchStoreError(f"Could not load match history: {e}") from e

        for row in rows:
            try:
                records.append(self._to_record(row))
            except CorruptRecordError as e:
                logger.warning("%s", e)
                corrupt.append(e)
        return records, corrupt

    def get(self, record_id: int) -> MatchRecord | None:
        try:
            with self._session_factory() as session:
                row = session.get(MatchRow, record_id)
                return self._to_record(row) if row else None
        except SQLAlchemyError as e:
            raise MatchStoreError(f"Could not load match {record_id}: {e}") from e

    def remove_by_id(self, record_id: int) -> bool:
        """Delete one record. Returns False (not an error) if it was absent."""
        try:
            with self._session_factory.begin() as session:
                result = session.execute(delete(MatchRow).where(MatchRow.id == record_id))
                removed = result.rowcount > 0
        except SQLAlchemyError as e:
            raise MatchStoreError(f"Could not delete match {record_id}: {e}") from e

        logger.debug("Delete match %d: %s", record_id, "removed" if removed else "absent")
        return removed

    def clear(self) -> int:
        """Delete every record. Returns how many were removed."""
        try:
            with self._session_factory.begin() as session:
                result = session.execute(delete(MatchRow))
                removed = result.rowcount
        except SQLAlchemyError as e:
            raise MatchStoreError(f"Could not clear match history: {e}") from e

        logger.info("Cleared match history (%d records)", removed)
        return removed

    def close(self):
        self.engine.dispose()

    def _to_record(self, row: MatchRow) -> MatchRecord:
        try:
            board = decode_board(row.board_json)
            winner = Outcome(row.winner)
        except ValueError as e:
            raise CorruptRecordError(row.id, f"Match {row.id} is corrupt: {e}") from e
        return MatchRecord(
            id=row.id,
            created_at=row.created_at,
            winner=winner,
            moves_count=row.moves_count,
            board=board,
        )
