"""
Schema and migration helpers for Postgres.
"""
from __future__ import annotations

import logging
import os

from core.db.base import get_conn
from core.db.users import create_user, get_user_by_email, set_user_password, set_user_role
from core.vocabulary import CATEGORY_CHIPS, JOB_TYPES, REMOTE_SCOPES

log = logging.getLogger("db")


def _enum_check(column: str, values) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"CHECK ({column} IN ({quoted}))"


def init_db() -> None:
    """Create the marketplace tables if they don't exist, then seed reference data."""
    conn = get_conn()
    cur = conn.cursor()

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS users(
            id UUID PRIMARY KEY,
            email TEXT NOT NULL UNIQUE,
            name TEXT,
            password_hash TEXT,
            role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'employer', 'admin')),
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
        """
    )
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS sessions(
            id TEXT PRIMARY KEY,
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            created_at TIMESTAMPTZ NOT NULL,
            last_seen_at TIMESTAMPTZ NOT NULL,
            expires_at TIMESTAMPTZ NOT NULL
        )
        """
    )
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS categories(
            id SERIAL PRIMARY KEY,
            slug TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
        """
    )
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS companies(
            id SERIAL PRIMARY KEY,
            name TEXT NOT NULL,
            slug TEXT NOT NULL UNIQUE,
            logo_url TEXT,
            website_url TEXT,
            location TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
        """
    )
    cur.execute(
        f"""
        CREATE TABLE IF NOT EXISTS jobs(
            id SERIAL PRIMARY KEY,
            title TEXT NOT NULL,
            slug TEXT NOT NULL UNIQUE,
            company_id INTEGER NOT NULL REFERENCES companies(id) ON DELETE CASCADE,
            category_id INTEGER NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
            location TEXT NOT NULL,
            salary_min NUMERIC,
            salary_max NUMERIC,
            salary_currency TEXT DEFAULT 'USD',
            job_type TEXT NOT NULL DEFAULT 'full_time' {_enum_check("job_type", JOB_TYPES)},
            remote_scope TEXT NOT NULL DEFAULT 'worldwide' {_enum_check("remote_scope", REMOTE_SCOPES)},
            is_featured BOOLEAN NOT NULL DEFAULT FALSE,
            is_premium BOOLEAN NOT NULL DEFAULT FALSE,
            apply_url TEXT NOT NULL,
            description_html TEXT NOT NULL,
            tags TEXT[],
            posted_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
        """
    )
    cur.execute("CREATE INDEX IF NOT EXISTS jobs_posted_at_idx ON jobs (posted_at DESC)")
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS alerts(
            id SERIAL PRIMARY KEY,
            user_id UUID REFERENCES users(id) ON DELETE CASCADE,
            email TEXT NOT NULL,
            keyword TEXT,
            frequency TEXT NOT NULL DEFAULT 'daily' CHECK (frequency IN ('daily', 'weekly')),
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
        """
    )
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS user_preferences(
            id SERIAL PRIMARY KEY,
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            data TEXT NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
        """
    )

    conn.commit()
    conn.close()

    seed_categories()
    ensure_admin_from_env()


def seed_categories() -> None:
    """Insert the vocabulary categories (idempotent)."""
    conn = get_conn()
    cur = conn.cursor()

    for chip in CATEGORY_CHIPS:
        cur.execute(
            """
            INSERT INTO categories (slug, name)
            VALUES (?, ?)
            ON CONFLICT (slug) DO NOTHING
            """,
            (chip["slug"], chip["label"]),
        )

    conn.commit()
    conn.close()


def ensure_admin_from_env() -> None:
    """
    Optionally seed/update an admin account from environment variables.
    Set ADMIN_EMAIL and ADMIN_PASSWORD before startup to use.
    """
    admin_email = os.getenv("ADMIN_EMAIL")
    admin_password = os.getenv("ADMIN_PASSWORD")

    if not admin_email or not admin_password:
        return

    existing = get_user_by_email(admin_email)
    if existing:
        if existing.get("role") != "admin":
            set_user_role(existing["id"], "admin")
        set_user_password(existing["id"], admin_password)
        return

    create_user(admin_email, admin_password, role="admin")
    log.info("Seeded admin user", extra={"email": admin_email.strip().lower()})


__all__ = [
    "init_db",
    "seed_categories",
    "ensure_admin_from_env",
]
