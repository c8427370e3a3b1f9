"""Index store: SQLite FTS5 index lifecycle and read/write sessions.

The index is a single FTS5 table under ``<data_dir>/index/search.db``.
Only ``content`` is tokenized; every other column is stored verbatim and is
what a search result is projected from.

Writes go through :meth:`IndexStore.open_for_write`, which holds the store's
writer lock for the duration of the session, so at most one write session is
active at a time.  Reads open their own connection; in WAL mode each reader
sees the last committed state when its query starts.
"""

from __future__ import annotations

import contextlib
import logging
import shutil
import sqlite3
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from archsearch.indexing.documents import IndexedDocument

logger = logging.getLogger(__name__)

INDEX_DIRECTORY_NAME = "index"
INDEX_FILE_NAME = "search.db"

_SCHEMA_SQL = """\
CREATE VIRTUAL TABLE IF NOT EXISTS documents USING fts5(
    url          UNINDEXED,
    workspace_id UNINDEXED,
    type         UNINDEXED,
    name         UNINDEXED,
    description  UNINDEXED,
    content,
    tokenize = 'unicode61'
);
"""


class StoreUnavailableError(RuntimeError):
    """Raised when a read or write session cannot be opened."""


def open_db(db_path: Path, *, read_only: bool = False) -> sqlite3.Connection:
    """Open the index database.

    The writer sets WAL journal mode (persistent per-file) so readers never
    block on, or observe, an uncommitted write.  Readers open the file with
    ``mode=ro``.

    Returns a connection with ``sqlite3.Row`` row factory.
    """
    if read_only:
        conn = sqlite3.connect(f"file:{db_path}?mode=ro", uri=True)
    else:
        conn = sqlite3.connect(str(db_path), check_same_thread=False)
        conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = sqlite3.Row
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the documents table if it doesn't exist."""
    conn.executescript(_SCHEMA_SQL)


class WriteSession:
    """Add/delete operations on the index within one transaction.

    Nothing is visible to readers until :meth:`commit`.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self.added = 0
        self.deleted = 0

    def add(self, document: IndexedDocument) -> None:
        self._conn.execute(
            "INSERT INTO documents (url, workspace_id, type, name, description, content) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (
                document.url,
                str(document.workspace_id),
                document.type.value,
                document.name,
                document.description,
                document.content,
            ),
        )
        self.added += 1

    def delete_workspace(self, workspace_id: int) -> int:
        """Delete every document of *workspace_id*.  Returns the row count."""
        cursor = self._conn.execute(
            "DELETE FROM documents WHERE workspace_id = ?", (str(workspace_id),)
        )
        count = max(cursor.rowcount, 0)
        self.deleted += count
        return count

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()


class IndexStore:
    """Owns the on-disk index and the single writer connection."""

    def __init__(self, data_dir: Path) -> None:
        self.index_dir = data_dir / INDEX_DIRECTORY_NAME
        self.db_path = self.index_dir / INDEX_FILE_NAME
        self._write_lock = threading.Lock()
        self._writer: sqlite3.Connection | None = None

    # -- lifecycle ---------------------------------------------------------

    def start(self) -> None:
        """Provision the index location and schema, keeping existing content."""
        with self._write_lock:
            try:
                self._provision()
            except (OSError, sqlite3.Error) as exc:
                logger.error("Could not provision search index at %s: %s", self.index_dir, exc)

    def stop(self) -> None:
        """Flush and release the writer; a no-op when no writer is open."""
        with self._write_lock:
            self._close_writer()

    def clear(self) -> None:
        """Erase the index and provision an empty one."""
        with self._write_lock:
            self._close_writer()
            try:
                if self.index_dir.exists():
                    shutil.rmtree(self.index_dir)
                self._provision()
            except (OSError, sqlite3.Error) as exc:
                logger.error("Could not clear search index at %s: %s", self.index_dir, exc)

    def _provision(self) -> None:
        self._writer_connection().commit()

    def _writer_connection(self) -> sqlite3.Connection:
        if self._writer is None:
            self.index_dir.mkdir(parents=True, exist_ok=True)
            conn = open_db(self.db_path)
            try:
                create_schema(conn)
            except sqlite3.Error:
                conn.close()
                raise
            self._writer = conn
        return self._writer

    def _close_writer(self) -> None:
        if self._writer is None:
            return
        try:
            self._writer.commit()
            self._writer.close()
        except sqlite3.Error as exc:
            logger.warning("Error closing search index writer: %s", exc)
        finally:
            self._writer = None

    # -- sessions ----------------------------------------------------------

    @contextlib.contextmanager
    def open_for_write(self) -> Iterator[WriteSession]:
        """Hold the writer lock and yield a :class:`WriteSession`.

        The session is committed when the block exits normally and rolled
        back when it raises.  The lock is released on every exit path.

        Raises :class:`StoreUnavailableError` if the index cannot be opened.
        """
        with self._write_lock:
            try:
                conn = self._writer_connection()
            except (OSError, sqlite3.Error) as exc:
                raise StoreUnavailableError(
                    f"Cannot open search index for writing at {self.db_path}: {exc}"
                ) from exc
            session = WriteSession(conn)
            try:
                yield session
            except BaseException:
                session.rollback()
                raise
            session.commit()

    @contextlib.contextmanager
    def open_for_read(self) -> Iterator[sqlite3.Connection]:
        """Yield a read-only connection over the committed index.

        Raises :class:`StoreUnavailableError` if the index cannot be opened.
        """
        try:
            conn = open_db(self.db_path, read_only=True)
        except sqlite3.Error as exc:
            raise StoreUnavailableError(
                f"Cannot open search index for reading at {self.db_path}: {exc}"
            ) from exc
        try:
            yield conn
        finally:
            conn.close()

    def count(self, workspace_id: int | None = None) -> int:
        """Number of stored documents, optionally for one workspace."""
        with self.open_for_read() as conn:
            try:
                if workspace_id is None:
                    row = conn.execute("SELECT count(*) FROM documents").fetchone()
                else:
                    row = conn.execute(
                        "SELECT count(*) FROM documents WHERE workspace_id = ?",
                        (str(workspace_id),),
                    ).fetchone()
            except sqlite3.Error as exc:
                raise StoreUnavailableError(f"Cannot read search index: {exc}") from exc
        return int(row[0])
