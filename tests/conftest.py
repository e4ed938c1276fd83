import sys
from contextlib import contextmanager
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from contactbook.config import ContactBookSettings
from contactbook.db import Database


class ScriptedCursor:
    """Cursor double driven by ``(sql fragment, result)`` rules.

    The first rule whose fragment appears in the whitespace-normalised SQL
    decides the outcome: a list of rows, an int rowcount, an exception to
    raise, or a callable taking the params and returning one of those.
    """

    def __init__(self, conn, script):
        self.conn = conn
        self.script = script
        self._rows = []
        self.rowcount = -1

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, sql, params=None):
        normalized = " ".join(sql.split())
        self.conn.executed.append((normalized, params))
        result = []
        for fragment, outcome in self.script:
            if fragment in normalized:
                result = outcome(params) if callable(outcome) else outcome
                break
        if isinstance(result, BaseException):
            raise result
        if isinstance(result, int):
            self._rows = []
            self.rowcount = result
        else:
            self._rows = [dict(row) for row in result]
            self.rowcount = len(self._rows)

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows


class ScriptedConnection:
    def __init__(self, script):
        self.script = script
        self.executed = []
        self.events = []

    def cursor(self, row_factory=None):
        return ScriptedCursor(self, self.script)

    @contextmanager
    def transaction(self):
        self.events.append("begin")
        try:
            yield
        except BaseException:
            self.events.append("rollback")
            raise
        self.events.append("commit")

    def statements(self, fragment):
        return [(sql, params) for sql, params in self.executed if fragment in sql]


class ScriptedPool:
    min_size = 1
    max_size = 1

    def __init__(self, script):
        self.conn = ScriptedConnection(script)
        self.checkouts = 0
        self.returns = 0

    @contextmanager
    def connection(self):
        self.checkouts += 1
        try:
            yield self.conn
        finally:
            self.returns += 1

    def open(self, wait=False):
        pass

    def close(self):
        pass


@pytest.fixture
def settings():
    return ContactBookSettings(database_url="postgresql://test@localhost/test")


@pytest.fixture
def scripted_db(settings):
    """Build a ``Database`` whose pool hands out one scripted connection."""

    def _build(script):
        pool = ScriptedPool(script)
        return Database(settings, pool=pool), pool

    return _build
