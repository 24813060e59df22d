"""
Job listing storage re-exports.
"""
from core.db.jobs.jobs_store import (
    create_job,
    get_category_by_slug,
    get_job_by_slug,
    get_jobs_posted_since,
    get_similar_jobs,
    get_stats,
    search_jobs,
)

__all__ = [
    "create_job",
    "get_category_by_slug",
    "get_job_by_slug",
    "get_jobs_posted_since",
    "get_similar_jobs",
    "get_stats",
    "search_jobs",
]
