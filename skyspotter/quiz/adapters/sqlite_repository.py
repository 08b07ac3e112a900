import sqlite3

from pydantic import ValidationError

from skyspotter.config import GameConfig
from skyspotter.errors import PersistenceError
from skyspotter.quiz.adapters.db_manager import DatabaseManager
from skyspotter.quiz.domain.models import UserStats
from skyspotter.quiz.domain.ports import IProgressRepository
from skyspotter.shared.telemetry import Telemetry, measure_time


class SQLiteProgressRepository(IProgressRepository):
    """
    Key-value store on a single SQLite table.
    Every record is a JSON blob written wholesale; no partial updates.
    """

    def __init__(self, db_manager: DatabaseManager) -> None:
        self.telemetry = Telemetry("SQLiteProgressRepository")
        self.db_manager = db_manager

    def _get_connection(self) -> sqlite3.Connection:
        return self.db_manager.get_connection()

    def load_value(self, key: str) -> str | None:
        try:
            conn = self._get_connection()
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
            return row[0] if row else None
        except sqlite3.Error as e:
            raise PersistenceError(f"read of '{key}' failed: {e}") from e

    @measure_time("db_save_value")
    def save_value(self, key: str, value: str) -> None:
        try:
            conn = self._get_connection()
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET value      = excluded.value,
                                               updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"write of '{key}' failed: {e}") from e

    def delete_value(self, key: str) -> None:
        try:
            conn = self._get_connection()
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"delete of '{key}' failed: {e}") from e

    def load_stats(self) -> UserStats | None:
        raw = self.load_value(GameConfig.STATS_KEY)
        if raw is None:
            return None
        try:
            return UserStats.model_validate_json(raw)
        except ValidationError as e:
            # A corrupt record is treated like a missing one
            self.telemetry.log_error("Stored stats are unreadable", e)
            return None

    def save_stats(self, stats: UserStats) -> None:
        self.save_value(GameConfig.STATS_KEY, stats.model_dump_json())
