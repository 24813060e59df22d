"""
Company storage re-exports.
"""
from core.db.companies.companies_store import (
    find_companies_by_name,
    get_or_create_company,
    search_companies,
)

__all__ = [
    "find_companies_by_name",
    "get_or_create_company",
    "search_companies",
]
