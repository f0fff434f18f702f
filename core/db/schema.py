"""
Schema creation for the users and applications tables.
"""
from __future__ import annotations

_ID_COLUMN = {
    "postgres": "id SERIAL PRIMARY KEY",
    "sqlite": "id INTEGER PRIMARY KEY AUTOINCREMENT",
}


def init_db(conn) -> None:
    """Create the users and applications tables if they don't exist."""
    id_column = _ID_COLUMN[conn.dialect]
    cur = conn.cursor()

    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS users(
            {id_column},
            username TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            password_hash TEXT NOT NULL,
            reset_token TEXT,
            created_at TEXT
        )
        """
    )
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS applications(
            {id_column},
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            job_id TEXT NOT NULL,
            title TEXT NOT NULL,
            company TEXT NOT NULL,
            category TEXT NOT NULL,
            applied_date TEXT NOT NULL
        )
        """
    )
    cur.execute(
        "CREATE INDEX IF NOT EXISTS idx_applications_user ON applications(user_id, applied_date)"
    )
    conn.commit()


__all__ = ["init_db"]
