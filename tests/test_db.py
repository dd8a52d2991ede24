import sqlite3
import threading
import time

import pytest

from talent_site import db as db_module
from talent_site.db import Database


class FakeRawConnection:
    def commit(self):
        pass

    def rollback(self):
        pass


class StrictPool:
    """Mimics psycopg2's ThreadedConnectionPool: getconn() raises when exhausted."""

    def __init__(self, maxconn):
        self.maxconn = maxconn
        self.used = 0
        self.peak = 0
        self._lock = threading.Lock()

    def getconn(self):
        with self._lock:
            if self.used >= self.maxconn:
                raise RuntimeError("connection pool exhausted")
            self.used += 1
            self.peak = max(self.peak, self.used)
            return FakeRawConnection()

    def putconn(self, conn):
        with self._lock:
            self.used -= 1

    def closeall(self):
        pass


def test_postgres_checkout_waits_for_a_free_connection():
    database = Database("postgresql://u:p@localhost/site", pool_max=2)
    pool = StrictPool(maxconn=2)
    database._pool = pool
    errors = []

    def worker():
        try:
            with database.connection():
                time.sleep(0.05)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert pool.peak <= 2
    assert pool.used == 0


def test_postgres_checkout_releases_slot_on_error():
    database = Database("postgresql://u:p@localhost/site", pool_max=1)
    database._pool = StrictPool(maxconn=1)

    with pytest.raises(ValueError):
        with database.connection():
            raise ValueError("boom")

    # The single slot is free again.
    with database.connection():
        pass


class LockedConnection:
    def __init__(self):
        self.row_factory = None
        self.closed = False

    def execute(self, sql, params=None):
        raise sqlite3.OperationalError("database is locked")

    def rollback(self):
        pass

    def close(self):
        self.closed = True


def test_sqlite_connection_closed_when_pragma_fails(tmp_path, monkeypatch):
    opened = []

    def fake_connect(*args, **kwargs):
        conn = LockedConnection()
        opened.append(conn)
        return conn

    monkeypatch.setattr(db_module.sqlite3, "connect", fake_connect)
    database = Database(f"sqlite:///{tmp_path / 'site.sqlite'}")

    with pytest.raises(sqlite3.OperationalError):
        with database.connection():
            pass

    assert len(opened) == 1
    assert opened[0].closed
