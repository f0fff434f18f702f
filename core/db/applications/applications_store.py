"""
Job/internship/workshop applications recorded per user.
"""
from __future__ import annotations

from typing import Dict, List

from core.db.base import Database

_APPLICATION_COLUMNS = "id, user_id, job_id, title, company, category, applied_date"


class ApplicationsStore:
    def __init__(self, db: Database):
        self._db = db

    def add_application(
        self,
        user_id: int,
        job_id: str,
        title: str,
        company: str,
        category: str,
        applied_date: str,
    ) -> int:
        with self._db.connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO applications (user_id, job_id, title, company, category, applied_date)
                VALUES (?, ?, ?, ?, ?, ?)
                RETURNING id
                """,
                (user_id, job_id, title, company, category, applied_date),
            )
            row = cur.fetchone()
            conn.commit()
        return int(row["id"])

    def get_applications_for_user(self, user_id: int) -> List[Dict]:
        """Newest first."""
        with self._db.connection() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                SELECT {_APPLICATION_COLUMNS}
                FROM applications
                WHERE user_id = ?
                ORDER BY applied_date DESC, id DESC
                """,
                (user_id,),
            )
            rows = cur.fetchall()
        return [dict(r) for r in rows]


__all__ = ["ApplicationsStore"]
