"""
Onboarding preference storage.

One JSON blob per user, replaced wholesale on every save (delete + insert).
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from core.db.base import get_conn

log = logging.getLogger("db")


def save_preferences(user_id: str, record: Dict) -> None:
    payload = json.dumps(
        {
            "answersByQuestionId": record.get("answersByQuestionId") or {},
            "selectedCategory": record.get("selectedCategory") or None,
        }
    )
    now = datetime.now(timezone.utc)

    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute("DELETE FROM user_preferences WHERE user_id = ?", (user_id,))
        cur.execute(
            """
            INSERT INTO user_preferences (user_id, data, created_at, updated_at)
            VALUES (?, ?, ?, ?)
            """,
            (user_id, payload, now, now),
        )
        conn.commit()
    finally:
        conn.close()


def get_preferences(user_id: str) -> Optional[Dict]:
    """Return the stored payload, or None when missing or unreadable."""
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            "SELECT data FROM user_preferences WHERE user_id = ? ORDER BY id DESC LIMIT 1",
            (user_id,),
        )
        row = cur.fetchone()
    finally:
        conn.close()

    if not row:
        return None
    try:
        data = json.loads(row["data"])
    except (TypeError, ValueError):
        log.warning("Unreadable preferences", extra={"user_id": str(user_id)})
        return None
    return data if isinstance(data, dict) else None


__all__ = ["save_preferences", "get_preferences"]
