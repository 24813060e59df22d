"""
Filter sets and query composition for job and company search.

Everything here is pure: parsing never raises on query-string garbage, and the
composer returns SQL fragments plus parameters for the stores to execute.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from core.vocabulary import JOB_TYPES, REMOTE_SCOPES

JOBS_PAGE_SIZE_DEFAULT = 20
JOBS_PAGE_SIZE_MAX = 50
# Company rows are cheap; callers rely on the larger ceiling.
COMPANIES_PAGE_SIZE_DEFAULT = 20
COMPANIES_PAGE_SIZE_MAX = 1000
# OFFSET is a Postgres bigint
MAX_OFFSET = 2 ** 63 - 1


@dataclass
class FilterSet:
    q: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    job_types: List[str] = field(default_factory=list)
    remote_scope: Optional[str] = None
    min_salary: Optional[Decimal] = None
    location: Optional[str] = None
    premium_only: bool = False
    sort: str = "date"
    page: int = 1
    page_size: int = JOBS_PAGE_SIZE_DEFAULT
    optimised: bool = False

    def has_constraints(self) -> bool:
        return bool(
            self.q
            or self.categories
            or self.job_types
            or self.remote_scope
            or self.min_salary is not None
            or self.location
            or self.premium_only
        )

    def as_params(self) -> Dict[str, Any]:
        """Query-string shaped view of the active constraints."""
        params: Dict[str, Any] = {}
        if self.q:
            params["q"] = self.q
        if self.categories:
            params["category"] = list(self.categories)
        if self.job_types:
            params["job_type"] = list(self.job_types)
        if self.remote_scope:
            params["remote_scope"] = self.remote_scope
        if self.min_salary is not None:
            params["min_salary"] = str(self.min_salary)
        if self.location:
            params["location"] = self.location
        if self.premium_only:
            params["premium"] = "true"
        return params


@dataclass
class CompanyFilters:
    q: Optional[str] = None
    location: Optional[str] = None
    page: int = 1
    page_size: int = COMPANIES_PAGE_SIZE_DEFAULT


@dataclass
class ComposedQuery:
    where_sql: str
    params: List[Any]
    order_sql: str
    limit: int
    offset: int


# -------- Robust parsing --------

def _parse_int(raw: Any, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return default


def parse_page(raw: Any) -> int:
    page = _parse_int(raw, 1)
    return page if page >= 1 else 1


def bound_page(page: int, page_size: int) -> int:
    """Pages whose offset cannot be expressed in SQL are out of range; use the first page."""
    if (page - 1) * page_size > MAX_OFFSET:
        return 1
    return page


def clamp_page_size(raw: Any, default: int, maximum: int) -> int:
    """Non-positive or non-numeric sizes fall back to the default; large ones are capped."""
    size = _parse_int(raw, default)
    if size <= 0:
        size = default
    return min(size, maximum)


def parse_decimal(raw: Any) -> Optional[Decimal]:
    if raw is None or str(raw).strip() == "":
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def _getlist(params: Any, key: str) -> List[str]:
    if hasattr(params, "getlist"):
        values = params.getlist(key)
    else:
        raw = params.get(key)
        if raw is None:
            values = []
        elif isinstance(raw, (list, tuple)):
            values = list(raw)
        else:
            values = [raw]
    return [str(v).strip() for v in values if v is not None and str(v).strip()]


def _get(params: Any, key: str) -> Optional[str]:
    values = _getlist(params, key)
    return values[0] if values else None


def parse_job_filters(params: Any) -> FilterSet:
    """
    Build a FilterSet from query parameters (Starlette QueryParams or a plain dict).

    Unknown job types / remote scopes and a non-numeric min_salary are dropped.
    """
    categories = list(dict.fromkeys(_getlist(params, "category")))

    raw_types = _getlist(params, "job_type")
    # Legacy form: one comma-joined value
    if len(raw_types) == 1 and "," in raw_types[0]:
        raw_types = [t.strip() for t in raw_types[0].split(",") if t.strip()]
    job_types = [t for t in dict.fromkeys(raw_types) if t in JOB_TYPES]

    remote_scope = _get(params, "remote_scope")
    if remote_scope not in REMOTE_SCOPES:
        remote_scope = None

    page_size = clamp_page_size(_get(params, "limit"), JOBS_PAGE_SIZE_DEFAULT, JOBS_PAGE_SIZE_MAX)

    return FilterSet(
        q=_get(params, "q"),
        categories=categories,
        job_types=job_types,
        remote_scope=remote_scope,
        min_salary=parse_decimal(_get(params, "min_salary")),
        location=_get(params, "location"),
        premium_only=_get(params, "premium") == "true",
        sort="relevance" if _get(params, "sort") == "relevance" else "date",
        page=bound_page(parse_page(_get(params, "page")), page_size),
        page_size=page_size,
    )


def parse_company_filters(params: Any) -> CompanyFilters:
    page_size = clamp_page_size(_get(params, "limit"), COMPANIES_PAGE_SIZE_DEFAULT, COMPANIES_PAGE_SIZE_MAX)
    return CompanyFilters(
        q=_get(params, "q"),
        location=_get(params, "location"),
        page=bound_page(parse_page(_get(params, "page")), page_size),
        page_size=page_size,
    )


# -------- Composition --------

def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains(text: str) -> str:
    return f"%{escape_like(text)}%"


def compose_job_query(filters: FilterSet) -> ComposedQuery:
    """
    Translate a FilterSet into a WHERE/ORDER BY pair over
    `jobs j LEFT JOIN companies c LEFT JOIN categories cat`.

    Values inside one dimension are OR-ed, dimensions are AND-ed.
    """
    clauses: List[str] = []
    params: List[Any] = []

    if filters.q:
        pattern = _contains(filters.q)
        clauses.append("(j.title ILIKE ? OR j.description_html ILIKE ? OR c.name ILIKE ?)")
        params.extend([pattern, pattern, pattern])

    if filters.categories:
        clauses.append("cat.slug = ANY(?)")
        params.append(list(filters.categories))

    if filters.job_types:
        clauses.append("j.job_type = ANY(?)")
        params.append(list(filters.job_types))

    if filters.remote_scope:
        clauses.append("j.remote_scope = ?")
        params.append(filters.remote_scope)

    if filters.min_salary is not None:
        # NULL salary_min never satisfies a floor
        clauses.append("j.salary_min >= ?")
        params.append(filters.min_salary)

    if filters.location:
        clauses.append("j.location ILIKE ?")
        params.append(_contains(filters.location))

    if filters.premium_only:
        clauses.append("j.is_premium = TRUE")

    where_sql = "WHERE " + " AND ".join(clauses) if clauses else ""

    if filters.sort == "relevance" and filters.q:
        order_sql = "j.is_featured DESC, j.is_premium DESC, j.posted_at DESC, j.id DESC"
    else:
        order_sql = "j.posted_at DESC, j.id DESC"

    return ComposedQuery(
        where_sql=where_sql,
        params=params,
        order_sql=order_sql,
        limit=filters.page_size,
        offset=(filters.page - 1) * filters.page_size,
    )


def compose_company_query(filters: CompanyFilters) -> ComposedQuery:
    clauses: List[str] = []
    params: List[Any] = []

    if filters.q:
        clauses.append("co.name ILIKE ?")
        params.append(_contains(filters.q))

    if filters.location:
        clauses.append("co.location ILIKE ?")
        params.append(_contains(filters.location))

    where_sql = "WHERE " + " AND ".join(clauses) if clauses else ""
    return ComposedQuery(
        where_sql=where_sql,
        params=params,
        order_sql="co.created_at DESC, co.id DESC",
        limit=filters.page_size,
        offset=(filters.page - 1) * filters.page_size,
    )


def total_pages(total: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(total / page_size)


__all__ = [
    "JOBS_PAGE_SIZE_DEFAULT",
    "JOBS_PAGE_SIZE_MAX",
    "COMPANIES_PAGE_SIZE_DEFAULT",
    "COMPANIES_PAGE_SIZE_MAX",
    "MAX_OFFSET",
    "FilterSet",
    "CompanyFilters",
    "ComposedQuery",
    "parse_page",
    "bound_page",
    "clamp_page_size",
    "parse_decimal",
    "parse_job_filters",
    "parse_company_filters",
    "escape_like",
    "compose_job_query",
    "compose_company_query",
    "total_pages",
]
