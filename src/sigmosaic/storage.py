import logging
import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS collages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    generated_name TEXT NOT NULL,
    storage_path TEXT NOT NULL,
    created_at TEXT NOT NULL
)
"""


@dataclass
class CollageRecord:
    id: int
    generated_name: str
    storage_path: str
    created_at: datetime


def _record(row: sqlite3.Row) -> CollageRecord:
    return CollageRecord(
        id=row["id"],
        generated_name=row["generated_name"],
        storage_path=row["storage_path"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class CollageStore:
    """Keeps generated collages on disk with a metadata row per file."""

    def __init__(self, db_path: str | Path, upload_dir: str | Path):
        self.db_path = Path(db_path)
        self.upload_dir = Path(upload_dir)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            conn.execute(_SCHEMA)
        finally:
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def save(self, data: bytes, suffix: str = ".jpg") -> CollageRecord:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        name = f"collage_{uuid.uuid4()}{suffix}"
        path = (self.upload_dir / name).resolve()
        path.write_bytes(data)

        created_at = datetime.now()
        conn = self._connect()
        try:
            with conn:
                cur = conn.execute(
                    "INSERT INTO collages (generated_name, storage_path, created_at) VALUES (?, ?, ?)",
                    (name, str(path), created_at.isoformat()),
                )
            record_id = cur.lastrowid
        finally:
            conn.close()
        logger.info("Stored %s (%d bytes) as record %d", name, len(data), record_id)
        return CollageRecord(id=record_id, generated_name=name, storage_path=str(path), created_at=created_at)

    def get(self, record_id: int) -> CollageRecord | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT * FROM collages WHERE id = ?", (record_id,)).fetchone()
        finally:
            conn.close()
        return _record(row) if row else None

    def list_recent(self, limit: int = 20) -> list[CollageRecord]:
        conn = self._connect()
        try:
            rows = conn.execute("SELECT * FROM collages ORDER BY id DESC LIMIT ?", (limit,)).fetchall()
        finally:
            conn.close()
        return [_record(row) for row in rows]
