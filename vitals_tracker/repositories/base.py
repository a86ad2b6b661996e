"""
Base database connection and initialization.

This module handles SQLite connection management and schema initialization,
with WAL mode and busy_timeout for concurrent readers and writers.

Database instances should be obtained through the DI layer
(vitals_tracker.core.dependencies.get_database) rather than created directly,
except in tests.
"""
import logging
import sqlite3
from pathlib import Path
from typing import Optional

from vitals_tracker.core.config import DATABASE_BUSY_TIMEOUT, DATABASE_PATH

logger = logging.getLogger(__name__)


class Database:
    """
    SQLite database connection manager.

    Features:
    - WAL mode for better concurrent read/write performance
    - Busy timeout to handle lock contention gracefully
    - Schema created on first use, existing data preserved

    Usage:
        db = Database(db_path="/tmp/test.db")
        conn = db.get_connection()
    """

    def __init__(self, db_path: Optional[str] = None, busy_timeout: Optional[int] = None):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Defaults to config DATABASE_PATH.
            busy_timeout: SQLite busy timeout in milliseconds. Defaults to config value.
        """
        self.db_path = db_path or DATABASE_PATH
        self.busy_timeout = busy_timeout if busy_timeout is not None else DATABASE_BUSY_TIMEOUT

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _configure_connection(self, conn: sqlite3.Connection) -> None:
        """Apply per-connection pragmas."""
        conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout}")

    def _init_db(self) -> None:
        """Initialize database schema and enable WAL mode if not already enabled."""
        conn = sqlite3.connect(self.db_path)
        try:
            self._configure_connection(conn)
            cursor = conn.cursor()

            # WAL mode persists in the database file
            cursor.execute("PRAGMA journal_mode = WAL")
            result = cursor.fetchone()
            if result and result[0].lower() == "wal":
                logger.info(f"SQLite WAL mode enabled for {self.db_path}")
            else:
                logger.warning(f"Failed to enable WAL mode, current mode: {result}")

            # Timestamps are fixed-width ISO 8601 UTC strings, so text order is time order
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS health_records (
                    id TEXT PRIMARY KEY,
                    timestamp TEXT NOT NULL,
                    systolic REAL,
                    diastolic REAL,
                    glycemia REAL,
                    heart_rate REAL,
                    note TEXT,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_health_records_timestamp
                ON health_records (timestamp)
            """)
            conn.commit()
        finally:
            conn.close()

        logger.info(
            f"Database initialized: {self.db_path} "
            f"(busy_timeout={self.busy_timeout}ms)"
        )

    def get_connection(self) -> sqlite3.Connection:
        """Get a new database connection with concurrency settings applied."""
        conn = sqlite3.connect(self.db_path)
        self._configure_connection(conn)
        return conn

    def ping(self) -> None:
        """Run a trivial query; raises sqlite3.Error if the file is unusable."""
        conn = self.get_connection()
        try:
            conn.execute("SELECT 1").fetchone()
        finally:
            conn.close()
