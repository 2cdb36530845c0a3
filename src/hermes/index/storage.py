"""SQLite + FTS5 index over the workspace pages."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Sequence

from hermes.models import (
    DeleteSlot,
    DocumentRecord,
    IndexSyncError,
    Operation,
    PruneSlots,
    UpsertSlot,
)


class SQLiteIndexStore:
    """Derived, rebuildable index: one row per non-empty slot plus its FTS entry."""

    def __init__(self, index_path: Path) -> None:
        self.index_path = Path(index_path)
        try:
            self.index_path.parent.mkdir(parents=True, exist_ok=True)
            # Autocommit mode: transactions are opened explicitly in transaction().
            self._conn = sqlite3.connect(self.index_path, isolation_level=None)
        except (OSError, sqlite3.Error) as exc:
            raise IndexSyncError(
                f"Failed opening index {self.index_path}: {exc}", self.index_path
            ) from exc
        self._conn.row_factory = sqlite3.Row
        try:
            self._conn.execute("PRAGMA journal_mode=WAL;")
            self._conn.execute("PRAGMA synchronous=NORMAL;")
        except sqlite3.Error as exc:
            self._conn.close()
            raise IndexSyncError(
                f"Failed opening index {self.index_path}: {exc}", self.index_path
            ) from exc
        try:
            self.ensure_schema()
        except IndexSyncError:
            self._conn.close()
            raise

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        self._conn.execute("BEGIN IMMEDIATE")
        try:
            yield self._conn
            self._conn.execute("COMMIT")
        except BaseException:
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK")
            raise

    def ensure_schema(self) -> None:
        try:
            with self.transaction() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS note_index (
                        slot_key TEXT PRIMARY KEY,
                        location TEXT NOT NULL,
                        title TEXT NOT NULL,
                        body TEXT NOT NULL,
                        word_count INTEGER NOT NULL,
                        char_count INTEGER NOT NULL,
                        updated_at INTEGER NOT NULL
                    )
                    """
                )
                conn.execute(
                    """CREATE INDEX IF NOT EXISTS idx_note_index_updated
                        ON note_index(updated_at DESC)
                    """
                )
                # Self-contained FTS table: it keeps its own copy of title/body.
                conn.execute(
                    """
                    CREATE VIRTUAL TABLE IF NOT EXISTS note_fts USING fts5(
                        slot_key UNINDEXED,
                        title,
                        body
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise IndexSyncError(
                f"Failed creating index schema in {self.index_path}: {exc}", self.index_path
            ) from exc

    def apply(self, operations: Sequence[Operation]) -> None:
        """Run all operations in one transaction; nothing is applied on failure."""
        try:
            with self.transaction() as conn:
                for operation in operations:
                    self._apply_one(conn, operation)
        except sqlite3.Error as exc:
            raise IndexSyncError(
                f"sqlite error while updating {self.index_path}: {exc}", self.index_path
            ) from exc

    def _apply_one(self, conn: sqlite3.Connection, operation: Operation) -> None:
        if isinstance(operation, DeleteSlot):
            conn.execute("DELETE FROM note_index WHERE slot_key = ?", (operation.slot_key,))
            conn.execute("DELETE FROM note_fts WHERE slot_key = ?", (operation.slot_key,))
        elif isinstance(operation, UpsertSlot):
            record = operation.record
            conn.execute(
                """
                INSERT INTO note_index(
                    slot_key, location, title, body, word_count, char_count, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(slot_key) DO UPDATE SET
                    location = excluded.location,
                    title = excluded.title,
                    body = excluded.body,
                    word_count = excluded.word_count,
                    char_count = excluded.char_count,
                    updated_at = excluded.updated_at
                """,
                (
                    record.slot_key,
                    record.location,
                    record.title,
                    record.body,
                    record.word_count,
                    record.char_count,
                    record.updated_at,
                ),
            )
            conn.execute("DELETE FROM note_fts WHERE slot_key = ?", (record.slot_key,))
            conn.execute(
                "INSERT INTO note_fts(slot_key, title, body) VALUES (?, ?, ?)",
                (record.slot_key, record.title, record.body),
            )
        elif isinstance(operation, PruneSlots):
            if operation.keep:
                placeholders = ", ".join("?" for _ in operation.keep)
                for table in ("note_index", "note_fts"):
                    conn.execute(
                        f"DELETE FROM {table} WHERE slot_key NOT IN ({placeholders})",
                        operation.keep,
                    )
            else:
                conn.execute("DELETE FROM note_index")
                conn.execute("DELETE FROM note_fts")
        else:
            raise TypeError(f"Unsupported index operation: {operation!r}")

    def search(self, fts_query: str, *, top_k: int = 10) -> List[dict]:
        rows = self._conn.execute(
            """
            SELECT
                note_fts.slot_key AS slot_key,
                note_fts.title AS title,
                snippet(note_fts, 2, '[', ']', '...', 16) AS snippet,
                bm25(note_fts) AS score,
                n.location AS location,
                n.updated_at AS updated_at
            FROM note_fts
            JOIN note_index n ON n.slot_key = note_fts.slot_key
            WHERE note_fts MATCH ?
            ORDER BY score
            LIMIT ?
            """,
            (fts_query, top_k),
        ).fetchall()
        return [dict(row) for row in rows]

    def list_documents(self, *, limit: int | None = None) -> List[DocumentRecord]:
        rows = self._conn.execute(
            """
            SELECT slot_key, location, title, body, word_count, char_count, updated_at
            FROM note_index
            ORDER BY updated_at DESC, slot_key
            LIMIT ?
            """,
            (-1 if limit is None else limit,),
        ).fetchall()
        return [DocumentRecord(**dict(row)) for row in rows]

    def get_stats(self) -> dict:
        row = self._conn.execute(
            """
            SELECT
                COUNT(*) AS document_count,
                COALESCE(SUM(word_count), 0) AS word_count,
                COALESCE(SUM(char_count), 0) AS char_count
            FROM note_index
            """
        ).fetchone()
        return dict(row)
