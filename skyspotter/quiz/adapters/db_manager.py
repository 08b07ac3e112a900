import os
import sqlite3
from typing import Any

from skyspotter.errors import PersistenceError
from skyspotter.shared.telemetry import Telemetry, measure_time


class DatabaseManager:
    """
    Responsible for:
    1. Managing the SQLite connection lifecycle.
    2. Creating the key-value table.
    3. Ensuring pickle-safety for Streamlit Session State.
    """

    def __init__(self, db_path: str = "data/skyspotter.db") -> None:
        self.db_path = db_path
        self.telemetry = Telemetry("DatabaseManager")
        self._shared_connection: sqlite3.Connection | None = None

        self._ensure_db_dir()

        # In-memory databases live only as long as their connection
        if self.db_path == ":memory:":
            self._shared_connection = sqlite3.connect(
                ":memory:", check_same_thread=False
            )

        self._init_schema()

    # --- SERIALIZATION LOGIC (Pickle Safety) ---
    def __getstate__(self) -> dict[str, Any]:
        state = self.__dict__.copy()
        state.pop("_shared_connection", None)
        return state

    def __setstate__(self, state: dict[str, Any]) -> None:
        # Connection is re-created lazily by get_connection()
        self.__dict__.update(state)
        self._shared_connection = None

    @property
    def is_memory(self) -> bool:
        return self.db_path == ":memory:"

    def get_connection(self) -> sqlite3.Connection:
        """
        Returns a usable database connection, reconnecting if necessary.
        Raises PersistenceError if the database cannot be opened.
        """
        if self._shared_connection:
            try:
                self._shared_connection.execute("SELECT 1")
                return self._shared_connection
            except sqlite3.ProgrammingError:
                # Closed externally
                self._shared_connection = None

        conn = None
        try:
            conn = sqlite3.connect(self.db_path, check_same_thread=False)
            if not self.is_memory:
                conn.execute("PRAGMA journal_mode=WAL")
        except sqlite3.Error as e:
            if conn is not None:
                conn.close()
            raise PersistenceError(f"cannot open {self.db_path}: {e}") from e

        self._shared_connection = conn
        return conn

    def close(self) -> None:
        if self._shared_connection:
            self._shared_connection.close()
            self._shared_connection = None

    def _ensure_db_dir(self) -> None:
        if self.is_memory:
            return
        dir_name = os.path.dirname(self.db_path)
        if not dir_name:
            return
        try:
            os.makedirs(dir_name, exist_ok=True)
        except OSError as e:
            # Opening the database will fail and be reported from there
            self.telemetry.log_error("Creating database directory failed", e)

    @measure_time("db_init_schema")
    def _init_schema(self) -> None:
        try:
            conn = self.get_connection()
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store
                (
                    key        TEXT PRIMARY KEY,
                    value      TEXT NOT NULL,
                    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            conn.commit()
        except (sqlite3.Error, PersistenceError) as e:
            self.telemetry.log_error("Schema Init Failed", e)
