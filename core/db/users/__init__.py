"""
User-related storage helpers, split by responsibility.
"""
from core.db.users.auth import hash_password, verify_password
from core.db.users.user_store import (
    create_user,
    get_or_create_user,
    get_user_by_email,
    get_user_by_id,
    new_user_id,
    set_user_password,
    set_user_role,
)
from core.db.users.sessions import (
    SESSION_TIMEOUT_MINUTES,
    create_session,
    delete_session,
    get_session,
    touch_session,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_user",
    "get_or_create_user",
    "get_user_by_email",
    "get_user_by_id",
    "new_user_id",
    "set_user_password",
    "set_user_role",
    "SESSION_TIMEOUT_MINUTES",
    "create_session",
    "delete_session",
    "get_session",
    "touch_session",
]
