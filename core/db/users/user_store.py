"""
User CRUD helpers.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from core.db.base import get_conn
from core.db.users.auth import hash_password

_USER_COLUMNS = "id::text AS id, email, name, password_hash, role, created_at"


def new_user_id() -> str:
    return str(uuid.uuid4())


def create_user(
    email: str,
    raw_password: Optional[str] = None,
    role: str = "user",
    name: Optional[str] = None,
) -> str:
    """
    Insert a user and return its id. The id is assigned here, before the insert,
    so every write path goes through one explicit factory.
    """
    email_normalized = email.strip().lower()
    user_id = new_user_id()
    password_hash = hash_password(raw_password) if raw_password else None

    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO users (id, email, name, password_hash, role, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                user_id,
                email_normalized,
                name or email_normalized.split("@")[0],
                password_hash,
                role,
                datetime.now(timezone.utc),
            ),
        )
        conn.commit()
    finally:
        conn.close()
    return user_id


def get_user_by_email(email: str) -> Optional[Dict]:
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            f"SELECT {_USER_COLUMNS} FROM users WHERE email = ?",
            (email.strip().lower(),),
        )
        row = cur.fetchone()
    finally:
        conn.close()
    return dict(row) if row else None


def get_user_by_id(user_id: str) -> Optional[Dict]:
    """Look up a user by id. Returns dict or None."""
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE id = ?", (user_id,))
        row = cur.fetchone()
    finally:
        conn.close()
    return dict(row) if row else None


def get_or_create_user(email: str) -> Dict:
    """Alert sign-ups may come from visitors without an account."""
    user = get_user_by_email(email)
    if user:
        return user
    create_user(email)
    return get_user_by_email(email)


def set_user_password(user_id: str, raw_password: str) -> None:
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            "UPDATE users SET password_hash = ? WHERE id = ?",
            (hash_password(raw_password), user_id),
        )
        conn.commit()
    finally:
        conn.close()


def set_user_role(user_id: str, role: str) -> bool:
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute("UPDATE users SET role = ? WHERE id = ?", (role, user_id))
        updated = cur.rowcount
        conn.commit()
    finally:
        conn.close()
    return updated > 0


__all__ = [
    "new_user_id",
    "create_user",
    "get_user_by_email",
    "get_user_by_id",
    "get_or_create_user",
    "set_user_password",
    "set_user_role",
]
