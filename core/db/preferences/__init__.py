"""
Onboarding preference storage re-exports.
"""
from core.db.preferences.prefs_store import get_preferences, save_preferences

__all__ = ["get_preferences", "save_preferences"]
