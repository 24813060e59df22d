"""
Keyword alert subscription storage re-exports.
"""
from core.db.subscriptions.subs_store import (
    add_subscription,
    deactivate_subscription,
    get_active_subscriptions,
    get_subscriptions_for_email,
)

__all__ = [
    "add_subscription",
    "deactivate_subscription",
    "get_active_subscriptions",
    "get_subscriptions_for_email",
]
