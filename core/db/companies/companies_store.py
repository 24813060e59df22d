"""
Company storage helpers.
"""
from __future__ import annotations

import re
from typing import Dict, List

from core.db.base import get_conn
from core.search import CompanyFilters, compose_company_query, escape_like, total_pages

NAME_LOOKUP_MIN_CHARS = 2
NAME_LOOKUP_LIMIT = 10


def search_companies(filters: CompanyFilters) -> Dict:
    """Paginated company list. Returns {items, page, pageSize, total, totalPages}."""
    query = compose_company_query(filters)

    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            f"""
            SELECT co.id, co.name, co.slug, co.website_url, co.location, co.logo_url, co.created_at
            FROM companies co
            {query.where_sql}
            ORDER BY {query.order_sql}
            LIMIT ? OFFSET ?
            """,
            (*query.params, query.limit, query.offset),
        )
        rows = [dict(r) for r in cur.fetchall()]

        cur.execute(
            f"SELECT COUNT(*) AS count FROM companies co {query.where_sql}",
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


def find_companies_by_name(q: str) -> List[Dict]:
    """Typeahead lookup: nothing for queries under two characters, at most ten rows."""
    q = (q or "").strip()
    if len(q) < NAME_LOOKUP_MIN_CHARS:
        return []

    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT id, name, slug, website_url
            FROM companies
            WHERE name ILIKE ?
            ORDER BY name
            LIMIT ?
            """,
            (f"%{escape_like(q)}%", NAME_LOOKUP_LIMIT),
        )
        rows = cur.fetchall()
    finally:
        conn.close()
    return [dict(r) for r in rows]


def _slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "company"


def get_or_create_company(name: str, location: str | None = None) -> Dict:
    """Return the company with this slug, inserting it first if missing."""
    name = (name or "").strip()
    if not name:
        raise ValueError("company name is required")
    slug = _slugify(name)

    conn = get_conn()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO companies (name, slug, location)
            VALUES (?, ?, ?)
            ON CONFLICT (slug) DO NOTHING
            """,
            (name, slug, location),
        )
        cur.execute("SELECT id, name, slug, location FROM companies WHERE slug = ?", (slug,))
        row = cur.fetchone()
        conn.commit()
    finally:
        conn.close()
    return dict(row)


__all__ = [
    "NAME_LOOKUP_MIN_CHARS",
    "NAME_LOOKUP_LIMIT",
    "search_companies",
    "find_companies_by_name",
    "get_or_create_company",
]
