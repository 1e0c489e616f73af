from __future__ import annotations

import json
import logging
import shutil
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from stockbook.domain.errors import StorageError
from stockbook.domain.models import new_event_id

log = logging.getLogger(__name__)

EVENT_KEYS = ("stock_entries", "sales_entries")


class SqliteKeyValueStore:
    """JSON values keyed by name in a single ``kv`` table."""

    def __init__(self, db_path: Path | str):
        self.db_path = str(db_path)

    def _conn(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def init_db(self) -> None:
        self.run_migrations()

    def _migrations(self) -> list:
        return [
            (1, self._migration_v1_base),
            (2, self._migration_v2_event_ids),
        ]

    def schema_version(self) -> int:
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT name FROM sqlite_master WHERE type='table' AND name='schema_migrations'")
            if cur.fetchone() is None:
                return 0
            cur.execute("SELECT COALESCE(MAX(version), 0) FROM schema_migrations")
            return int(cur.fetchone()[0])
        finally:
            conn.close()

    def run_migrations(self) -> None:
        migrations = self._migrations()
        try:
            current_version = self.schema_version()
        except sqlite3.Error as exc:
            raise StorageError(f"Could not read schema version: {exc}") from exc
        if current_version >= max(v for v, _ in migrations):
            return

        conn = self._conn()
        backup_path = self._create_pre_migration_backup()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")
            cur.execute("CREATE TABLE IF NOT EXISTS schema_migrations (version INTEGER PRIMARY KEY, applied_at TEXT NOT NULL)")

            for version, migration in migrations:
                if version <= current_version:
                    continue
                migration(cur)
                cur.execute(
                    "INSERT INTO schema_migrations (version, applied_at) VALUES (?, datetime('now'))",
                    (version,),
                )
            conn.commit()
        except Exception as exc:
            conn.rollback()
            self._restore_pre_migration_backup(backup_path)
            raise StorageError(
                "Database migration failed. Original database restored from automatic backup."
            ) from exc
        finally:
            conn.close()

    def _create_pre_migration_backup(self) -> Path | None:
        db_file = Path(self.db_path)
        if not db_file.exists() or db_file.stat().st_size == 0:
            return None
        backup_file = db_file.with_name(f"{db_file.stem}.pre_migration_{datetime.now().strftime('%Y%m%d%H%M%S')}.bak")
        shutil.copy2(db_file, backup_file)
        return backup_file

    def _restore_pre_migration_backup(self, backup_path: Path | None) -> None:
        if backup_path is None or not backup_path.exists():
            return
        shutil.copy2(backup_path, self.db_path)

    def _migration_v1_base(self, cur: sqlite3.Cursor) -> None:
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )

    def _migration_v2_event_ids(self, cur: sqlite3.Cursor) -> None:
        # Older logs identified records by list position only.
        for key in EVENT_KEYS:
            cur.execute("SELECT value FROM kv WHERE key=?", (key,))
            row = cur.fetchone()
            if not row:
                continue
            try:
                records = json.loads(row[0])
            except json.JSONDecodeError:
                log.warning("migration_skipped_corrupt key=%s", key)
                continue
            if not isinstance(records, list):
                continue

            changed = 0
            for rec in records:
                if isinstance(rec, dict) and not rec.get("id"):
                    rec["id"] = new_event_id()
                    changed += 1
            if changed:
                cur.execute(
                    "UPDATE kv SET value=?, updated_at=datetime('now') WHERE key=?",
                    (json.dumps(records, ensure_ascii=False), key),
                )
                log.info("migration_assigned_ids key=%s count=%s", key, changed)

    # ---------- Key-value access ----------
    def get(self, key: str) -> Optional[Any]:
        try:
            conn = self._conn()
            try:
                cur = conn.cursor()
                cur.execute("SELECT value FROM kv WHERE key=?", (key,))
                row = cur.fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StorageError(f"Could not read '{key}': {exc}") from exc

        if row is None:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError as exc:
            raise StorageError(f"Stored value for '{key}' is not valid JSON.") from exc

    def set(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Could not serialize '{key}': {exc}") from exc

        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO kv (key, value, updated_at) VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
                """,
                (key, payload),
            )
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(f"Could not write '{key}': {exc}") from exc
        finally:
            conn.close()

    def delete(self, key: str) -> None:
        conn = self._conn()
        try:
            conn.execute("DELETE FROM kv WHERE key=?", (key,))
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(f"Could not delete '{key}': {exc}") from exc
        finally:
            conn.close()

    def integrity_check(self) -> str:
        conn = self._conn()
        try:
            cur = conn.cursor()
            cur.execute("PRAGMA integrity_check")
            return str(cur.fetchone()[0])
        finally:
            conn.close()


class MemoryKeyValueStore:
    """Process-local store; values are kept as JSON text so reads never alias writes."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Stored value for '{key}' is not valid JSON.") from exc

    def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Could not serialize '{key}': {exc}") from exc

    def set_raw(self, key: str, raw: str) -> None:
        self._data[key] = raw

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
