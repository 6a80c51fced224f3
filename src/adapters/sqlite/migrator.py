import logging
import os
import sqlite3

logger = logging.getLogger(__name__)

DOWN_MARKER = "-- Down"


class SQLiteMigrator:
    """Applies ``migrations/*.sql`` files in name order, each at most once."""

    def __init__(self, db_path: str, migrations_dir: str):
        self.db_path = db_path
        self.migrations_dir = migrations_dir

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _ensure_migration_table(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS _migrations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                filename TEXT UNIQUE NOT NULL,
                applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );
        """)

    def _applied(self, conn: sqlite3.Connection) -> set[str]:
        return {row[0] for row in conn.execute("SELECT filename FROM _migrations")}

    def _available(self) -> list[str]:
        return sorted(f for f in os.listdir(self.migrations_dir) if f.endswith(".sql"))

    def pending_migrations(self) -> list[str]:
        """Migration files not yet recorded in ``_migrations``."""
        conn = self._get_connection()
        try:
            self._ensure_migration_table(conn)
            applied = self._applied(conn)
            return [f for f in self._available() if f not in applied]
        finally:
            conn.close()

    def run_migrations(self) -> list[str]:
        """Apply all pending migrations. Returns the filenames applied."""
        pending = self.pending_migrations()
        if not pending:
            logger.debug("Database %s is up to date", self.db_path)
            return []

        conn = self._get_connection()
        try:
            for filename in pending:
                logger.info("Applying migration: %s", filename)
                self._apply_migration(conn, filename)
        finally:
            conn.close()

        logger.info("Applied %d migration(s) to %s", len(pending), self.db_path)
        return pending

    def _read_up_script(self, filename: str) -> str:
        path = os.path.join(self.migrations_dir, filename)
        with open(path, encoding="utf-8") as f:
            content = f.read()
        # Up part first; the rollback part after the marker is never run here
        return content.split(DOWN_MARKER, 1)[0]

    def _apply_migration(self, conn: sqlite3.Connection, filename: str) -> None:
        script = self._read_up_script(filename)
        try:
            conn.executescript(script)
            conn.execute("INSERT INTO _migrations (filename) VALUES (?)", (filename,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RuntimeError(f"Migration {filename} failed: {e}") from e
