"""
Keyword alert subscription storage helpers (data-level only).
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from core.db.base import get_conn


def add_subscription(
    email: str,
    keyword: str,
    frequency: str = "daily",
    user_id: Optional[str] = None,
    active: bool = True,
) -> Dict:
    """Add a new keyword alert (active by default) and return the stored row."""
    email_normalized = (email or "").strip().lower()
    now = datetime.now(timezone.utc)

    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO alerts (user_id, email, keyword, frequency, is_active, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            RETURNING id, user_id, email, keyword, frequency, is_active, created_at
            """,
            (user_id, email_normalized, (keyword or "").strip(), frequency, bool(active), now),
        )
        row = cur.fetchone()
        conn.commit()
    finally:
        conn.close()
    return dict(row)


def get_active_subscriptions() -> List[Dict]:
    """Return every active alert. Keyword filtering is left to the matcher."""
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT id, user_id, email, keyword, frequency
            FROM alerts
            WHERE is_active = TRUE
            ORDER BY id
            """
        )
        rows = cur.fetchall()
    finally:
        conn.close()
    return [dict(row) for row in rows]


def get_subscriptions_for_email(email: str) -> List[Dict]:
    """Return all alerts for a given email, oldest first."""
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT id, user_id, email, keyword, frequency, is_active, created_at
            FROM alerts
            WHERE lower(email) = lower(?)
            ORDER BY created_at, id
            """,
            ((email or "").strip(),),
        )
        rows = cur.fetchall()
    finally:
        conn.close()
    return [dict(r) for r in rows]


def deactivate_subscription(sub_id: int) -> None:
    """Mark an alert as inactive (unsubscribe)."""
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute("UPDATE alerts SET is_active = FALSE WHERE id = ?", (sub_id,))
        conn.commit()
    finally:
        conn.close()


__all__ = [
    "add_subscription",
    "get_active_subscriptions",
    "get_subscriptions_for_email",
    "deactivate_subscription",
]
