"""
Job listing storage helpers.
"""
from __future__ import annotations

import logging
import re
import secrets
from datetime import datetime, timezone
from typing import Dict, List, Optional

from core.db.base import get_conn
from core.db.companies.companies_store import get_or_create_company
from core.search import FilterSet, compose_job_query, total_pages

log = logging.getLogger("db")

_JOB_FROM = """
    FROM jobs j
    LEFT JOIN companies c ON c.id = j.company_id
    LEFT JOIN categories cat ON cat.id = j.category_id
"""


def search_jobs(filters: FilterSet) -> Dict:
    """
    Run the composed search. Returns {items, page, pageSize, total, totalPages}.
    Store errors propagate to the caller.
    """
    query = compose_job_query(filters)

    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            f"""
            SELECT j.id, j.slug, j.title, j.location, j.salary_min, j.salary_max,
                   j.salary_currency, j.job_type, j.remote_scope, j.is_featured,
                   j.is_premium, j.tags, j.posted_at,
                   c.name AS company_name, c.logo_url AS company_logo,
                   cat.slug AS category_slug
            {_JOB_FROM}
            {query.where_sql}
            ORDER BY {query.order_sql}
            LIMIT ? OFFSET ?
            """,
            (*query.params, query.limit, query.offset),
        )
        rows = [dict(r) for r in cur.fetchall()]

        cur.execute(
            f"SELECT COUNT(*) AS count {_JOB_FROM} {query.where_sql}",
            tuple(query.params),
        )
        count_row = cur.fetchone()
    finally:
        conn.close()

    total = int(count_row["count"]) if count_row else 0
    return {
        "items": rows,
        "page": filters.page,
        "pageSize": filters.page_size,
        "total": total,
        "totalPages": total_pages(total, filters.page_size),
    }


def get_jobs_posted_since(since: datetime) -> List[Dict]:
    """Return listings posted strictly after `since`, newest first."""
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT id, slug, title, tags, posted_at
            FROM jobs
            WHERE posted_at > ?
            ORDER BY posted_at DESC, id DESC
            """,
            (since,),
        )
        rows = cur.fetchall()
    finally:
        conn.close()
    return [dict(r) for r in rows]


SIMILAR_JOBS_LIMIT = 6


def get_job_by_slug(slug: str) -> Optional[Dict]:
    """One listing with its company and category fields, or None."""
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            f"""
            SELECT j.id, j.slug, j.title, j.location, j.salary_min, j.salary_max,
                   j.salary_currency, j.job_type, j.remote_scope, j.is_featured,
                   j.is_premium, j.posted_at, j.apply_url, j.description_html, j.tags,
                   j.category_id,
                   c.name AS company_name, c.logo_url AS company_logo,
                   c.website_url AS company_website, c.location AS company_location,
                   cat.slug AS category_slug, cat.name AS category_name
            {_JOB_FROM}
            WHERE j.slug = ?
            LIMIT 1
            """,
            (slug,),
        )
        row = cur.fetchone()
    finally:
        conn.close()
    return dict(row) if row else None


def get_similar_jobs(category_id: int, exclude_slug: str, limit: int = SIMILAR_JOBS_LIMIT) -> List[Dict]:
    """Newest listings from the same category, excluding the one being viewed."""
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT j.id, j.slug, j.title, j.location, j.posted_at, c.name AS company_name
            FROM jobs j
            LEFT JOIN companies c ON c.id = j.company_id
            WHERE j.category_id = ? AND j.slug <> ?
            ORDER BY j.posted_at DESC, j.id DESC
            LIMIT ?
            """,
            (category_id, exclude_slug, limit),
        )
        rows = cur.fetchall()
    finally:
        conn.close()
    return [dict(r) for r in rows]


def get_category_by_slug(slug: str) -> Optional[Dict]:
    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute("SELECT id, slug, name FROM categories WHERE slug = ?", (slug,))
        row = cur.fetchone()
    finally:
        conn.close()
    return dict(row) if row else None


def _slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
    return slug or "job"


def create_job(
    *,
    title: str,
    company_name: str,
    category_id: int,
    location: str,
    apply_url: str,
    description_html: str,
    job_type: str = "full_time",
    remote_scope: str = "worldwide",
    salary_min=None,
    salary_max=None,
    salary_currency: str = "USD",
    tags: Optional[List[str]] = None,
    is_featured: bool = False,
    is_premium: bool = False,
    posted_at: Optional[datetime] = None,
) -> Dict:
    """Insert a listing (creating the company if needed) and return the stored row."""
    company = get_or_create_company(company_name)
    clean_tags = list(dict.fromkeys(t.strip() for t in (tags or []) if t and t.strip()))
    slug = f"{_slugify(title)}-{secrets.token_hex(3)}"
    posted = posted_at or datetime.now(timezone.utc)

    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO jobs (
                title, slug, company_id, category_id, location, salary_min, salary_max,
                salary_currency, job_type, remote_scope, is_featured, is_premium,
                apply_url, description_html, tags, posted_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            RETURNING id, slug, title, tags, job_type, remote_scope, location,
                      salary_min, salary_max, is_featured, is_premium, posted_at
            """,
            (
                title.strip(),
                slug,
                company["id"],
                category_id,
                location.strip(),
                salary_min,
                salary_max,
                salary_currency,
                job_type,
                remote_scope,
                bool(is_featured),
                bool(is_premium),
                apply_url.strip(),
                description_html,
                clean_tags,
                posted,
            ),
        )
        row = cur.fetchone()
        conn.commit()
    finally:
        conn.close()

    log.info("Job created", extra={"job_id": row["id"], "slug": row["slug"]})
    return dict(row)


def get_stats() -> Dict:
    """Return simple stats about the database."""
    conn = get_conn()
    try:
        cur = conn.cursor()

        cur.execute("SELECT COUNT(*) AS count FROM jobs")
        jobs_row = cur.fetchone()

        cur.execute("SELECT COUNT(*) AS count FROM companies")
        companies_row = cur.fetchone()

        cur.execute("SELECT COUNT(*) AS count FROM alerts WHERE is_active = TRUE")
        alerts_row = cur.fetchone()
    finally:
        conn.close()

    return {
        "jobs": jobs_row["count"] if jobs_row else 0,
        "companies": companies_row["count"] if companies_row else 0,
        "active_alerts": alerts_row["count"] if alerts_row else 0,
    }


__all__ = [
    "search_jobs",
    "get_job_by_slug",
    "get_similar_jobs",
    "get_jobs_posted_since",
    "get_category_by_slug",
    "create_job",
    "get_stats",
]
