from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Sequence
from urllib.parse import urlparse

from talent_site.schema import get_schema_sql


def _debug(msg: str) -> None:
    print(f"[db] {msg}")


def _detect_dialect(dsn: str) -> str:
    """Return 'postgres' or 'sqlite'."""
    s = (dsn or "").strip()
    if not s:
        return "sqlite"
    try:
        scheme = urlparse(s).scheme.lower()
    except Exception:
        scheme = ""
    if scheme in ("postgres", "postgresql"):
        return "postgres"
    return "sqlite"


def _sqlite_path(dsn: str) -> str:
    # Support sqlite:///path style, otherwise a bare file path.
    s = (dsn or "").strip()
    if s.lower().startswith("sqlite:///"):
        s = s[len("sqlite:///") :]
    return s


def _qmark_to_pct(sql: str) -> str:
    """Convert SQLite qmark placeholders (?) to psycopg2 placeholders (%s).

    Skips '?' inside single/double-quoted string literals. Not a full SQL parser,
    but sufficient for the statements in this codebase.
    """
    out: List[str] = []
    in_single = False
    in_double = False
    for ch in sql:
        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == "?" and not in_single and not in_double:
            out.append("%s")
            continue
        out.append(ch)
    return "".join(out)


class PGCursor:
    def __init__(self, cur: Any):
        self._cur = cur

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> "PGCursor":
        self._cur.execute(_qmark_to_pct(sql), tuple(params or ()))
        return self

    def fetchone(self) -> Any:
        return self._cur.fetchone()

    def fetchall(self) -> Any:
        return self._cur.fetchall()

    def close(self) -> None:
        self._cur.close()


class PGConnection:
    """A tiny adapter that makes psycopg2 connections look like sqlite3 connections."""

    dialect = "postgres"

    def __init__(self, conn: Any):
        self._conn = conn

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> PGCursor:
        return PGCursor(self._conn.cursor()).execute(sql, params)

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()


class Database:
    """Storage handle shared by all requests.

    - Postgres: a psycopg2 ThreadedConnectionPool (RealDictCursor rows).
    - SQLite: one short-lived connection per unit of work (WAL mode).

    Every `connection()` block is one unit of work: commit on success, rollback on
    error, then the connection goes back to the pool (or is closed).
    """

    def __init__(self, dsn: str, *, pool_max: int = 10):
        self.dsn = (dsn or "").strip()
        if not self.dsn:
            raise ValueError("db_dsn_blank")
        self.dialect = _detect_dialect(self.dsn)
        self._pool: Any = None
        self._lock = threading.Lock()
        self._pool_max = max(1, int(pool_max))
        # getconn() raises PoolError instead of waiting once maxconn are out.
        self._slots = threading.BoundedSemaphore(self._pool_max)

    def _get_pool(self) -> Any:
        with self._lock:
            if self._pool is None:
                try:
                    import psycopg2.extras
                    import psycopg2.pool
                except Exception as e:
                    raise RuntimeError(
                        "Postgres selected but psycopg2 is not installed. "
                        "Install psycopg2-binary and try again."
                    ) from e

                self._pool = psycopg2.pool.ThreadedConnectionPool(
                    1,
                    self._pool_max,
                    self.dsn,
                    cursor_factory=psycopg2.extras.RealDictCursor,
                )
                _debug(f"Opened Postgres pool (max={self._pool_max})")
            return self._pool

    @contextmanager
    def connection(self) -> Iterator[Any]:
        if self.dialect == "postgres":
            pool = self._get_pool()
            self._slots.acquire()
            try:
                raw = pool.getconn()
                conn = PGConnection(raw)
                try:
                    yield conn
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise
                finally:
                    pool.putconn(raw)
            finally:
                self._slots.release()
            return

        path = _sqlite_path(self.dsn)
        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(path, timeout=30, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA busy_timeout=5000;")  # 5s
            conn.execute("PRAGMA foreign_keys = ON;")
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def close(self) -> None:
        with self._lock:
            if self._pool is not None:
                self._pool.closeall()
                self._pool = None


def init_db(db: Database) -> None:
    """Create all tables if absent. There is no migration versioning."""
    _debug(f"Initializing DB ({db.dialect})")
    ddl = get_schema_sql(db.dialect)
    with db.connection() as conn:
        if db.dialect == "postgres":
            # Naive split is OK for our schema (no ';' inside statements).
            statements = [s.strip() for s in ddl.split(";") if s.strip()]
            for stmt in statements:
                conn.execute(stmt)
            return

        # SQLite can run it in one go
        conn.executescript(ddl)
