"""
Single import surface for the storage layer.
"""
from core.db.companies import (
    find_companies_by_name,
    get_or_create_company,
    search_companies,
)
from core.db.jobs import (
    create_job,
    get_category_by_slug,
    get_job_by_slug,
    get_jobs_posted_since,
    get_similar_jobs,
    get_stats,
    search_jobs,
)
from core.db.preferences import get_preferences, save_preferences
from core.db.schema import ensure_admin_from_env, init_db, seed_categories
from core.db.subscriptions import (
    add_subscription,
    deactivate_subscription,
    get_active_subscriptions,
    get_subscriptions_for_email,
)
from core.db.users import (
    SESSION_TIMEOUT_MINUTES,
    create_session,
    create_user,
    delete_session,
    get_or_create_user,
    get_session,
    get_user_by_email,
    get_user_by_id,
    hash_password,
    set_user_password,
    set_user_role,
    touch_session,
    verify_password,
)

__all__ = [
    "find_companies_by_name",
    "get_or_create_company",
    "search_companies",
    "create_job",
    "get_category_by_slug",
    "get_job_by_slug",
    "get_jobs_posted_since",
    "get_similar_jobs",
    "get_stats",
    "search_jobs",
    "get_preferences",
    "save_preferences",
    "ensure_admin_from_env",
    "init_db",
    "seed_categories",
    "add_subscription",
    "deactivate_subscription",
    "get_active_subscriptions",
    "get_subscriptions_for_email",
    "SESSION_TIMEOUT_MINUTES",
    "create_session",
    "create_user",
    "delete_session",
    "get_or_create_user",
    "get_session",
    "get_user_by_email",
    "get_user_by_id",
    "hash_password",
    "set_user_password",
    "set_user_role",
    "touch_session",
    "verify_password",
]
