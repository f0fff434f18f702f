"""
Quick helper to run a query against the configured database.

Reads the same settings as the app: DATABASE_URL, or DB_HOST/DB_USER/DB_PASSWORD/DB_NAME.

Usage:
  python scripts/db_shell.py                           # list tables
  python scripts/db_shell.py "SELECT * FROM users"     # run a custom query
"""
from __future__ import annotations

import sys

from core.config import resolve_database_url
from core.db.base import connect, resolve_dialect

_LIST_TABLES = {
    "postgres": "SELECT tablename AS name FROM pg_tables WHERE schemaname='public' ORDER BY tablename",
    "sqlite": "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name",
}


def main() -> None:
    try:
        url = resolve_database_url()
        dialect = resolve_dialect(url)
    except RuntimeError as exc:
        raise SystemExit(str(exc)) from exc

    query = " ".join(sys.argv[1:]).strip() or _LIST_TABLES[dialect]
    print(f"Using DB: {dialect}", file=sys.stderr)

    try:
        with connect(url) as conn:
            cur = conn.cursor()
            cur.execute(query)
            if query.lstrip().lower().startswith(("select", "with", "pragma")):
                for row in cur.fetchall():
                    print(dict(row))
            else:
                conn.commit()
                print(f"OK ({cur.rowcount} row(s) affected)")
    except Exception as exc:
        raise SystemExit(f"Error running query: {exc}") from exc


if __name__ == "__main__":
    main()
