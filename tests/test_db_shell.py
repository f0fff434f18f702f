import importlib.util
import sys
from pathlib import Path

import pytest

_SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "db_shell.py"


@pytest.fixture
def db_shell(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("DATABASE_URL", "DB_HOST", "DB_USER", "DB_PASSWORD", "DB_NAME"):
        monkeypatch.delenv(name, raising=False)
    spec = importlib.util.spec_from_file_location("db_shell", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append(sql)

    def fetchall(self):
        return self.rows


class FakeConn:
    def __init__(self, cursor):
        self._cursor = cursor

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def cursor(self):
        return self._cursor


def test_uses_db_parts_like_the_app(db_shell, monkeypatch, capsys):
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_USER", "jobs")
    monkeypatch.setenv("DB_PASSWORD", "pw")
    monkeypatch.setenv("DB_NAME", "jobboard")
    cursor = FakeCursor([{"name": "users"}])
    seen = {}

    def fake_connect(url):
        seen["url"] = url
        return FakeConn(cursor)

    monkeypatch.setattr(db_shell, "connect", fake_connect)
    monkeypatch.setattr(sys, "argv", ["db_shell.py"])

    db_shell.main()

    assert seen["url"] == "postgresql://jobs:pw@db.internal/jobboard"
    assert "pg_tables" in cursor.executed[0]
    assert "{'name': 'users'}" in capsys.readouterr().out


def test_exits_when_database_not_configured(db_shell, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["db_shell.py"])
    with pytest.raises(SystemExit):
        db_shell.main()
