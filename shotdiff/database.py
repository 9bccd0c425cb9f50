"""SQLite storage of screenshots, their hashes and similarity values."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path

DATABASE_NAME = "scrDB"
TABLE_NAME = "Screenshots"

_CREATE_TABLE = (
    f"CREATE TABLE IF NOT EXISTS {TABLE_NAME}(img BLOB, hash BLOB, similarity NUMBER, "
    "id integer PRIMARY KEY AUTOINCREMENT UNIQUE)"
)


class DatabaseError(Exception):
    """Raised when the screenshot database cannot be used."""


@dataclass(frozen=True)
class ScreenshotRecord:
    img: bytes
    hash: bytes
    similarity: float
    id: int


def default_db_dir(home: str | Path, os_name: str) -> Path:
    """Directory holding the database: ``DB`` under home, or under Documents on macOS."""
    base = Path(home)
    if os_name in ("macos", "osx"):
        base = base / "Documents"
    return base / "DB"


class ScreenshotDatabase:
    """A file-backed table of screenshots."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        """Open the database file, creating its directory and table as needed."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.path)
            with self._conn:
                self._conn.execute(_CREATE_TABLE)
        except (OSError, sqlite3.Error) as exc:
            self._conn = None
            raise DatabaseError(f"cannot open database {self.path}: {exc}") from exc

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "ScreenshotDatabase":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise DatabaseError("database is not open")
        return self._conn

    def insert(self, image_bytes: bytes, digest: bytes, similarity: float) -> int:
        """Store a screenshot and return its id."""
        conn = self._connection()
        try:
            with conn:
                cursor = conn.execute(
                    f"INSERT INTO {TABLE_NAME} (img, hash, similarity) VALUES (?, ?, ?)",
                    (sqlite3.Binary(image_bytes), sqlite3.Binary(digest), similarity),
                )
        except sqlite3.Error as exc:
            raise DatabaseError(f"insert failed: {exc}") from exc
        return cursor.lastrowid

    def latest_two(self) -> tuple[bytes | None, bytes | None]:
        """Images of the newest and the one before it; missing ones are None."""
        conn = self._connection()
        try:
            rows = conn.execute(
                f"SELECT img FROM {TABLE_NAME} ORDER BY id DESC LIMIT 2"
            ).fetchall()
        except sqlite3.Error as exc:
            raise DatabaseError(f"select failed: {exc}") from exc
        images = [bytes(row[0]) if row[0] is not None else None for row in rows]
        images += [None] * (2 - len(images))
        return images[0], images[1]

    def records(self) -> list[ScreenshotRecord]:
        """All stored rows in table order."""
        conn = self._connection()
        try:
            rows = conn.execute(
                f"SELECT img, hash, similarity, id FROM {TABLE_NAME} ORDER BY id"
            ).fetchall()
        except sqlite3.Error as exc:
            raise DatabaseError(f"select failed: {exc}") from exc
        return [
            ScreenshotRecord(
                img=bytes(img) if img is not None else b"",
                hash=bytes(digest) if digest is not None else b"",
                similarity=similarity,
                id=row_id,
            )
            for img, digest, similarity, row_id in rows
        ]

    def image_at(self, index: int) -> bytes:
        """Image stored in the row at ``index`` of the table."""
        rows = self.records()
        if not 0 <= index < len(rows):
            raise IndexError(f"no screenshot at row {index}")
        return rows[index].img