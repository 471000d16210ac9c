"""
Feature Flags - Easy on/off toggle for features.
Change values here to enable/disable functionality.
"""

import os


class Features:
    """Feature toggles - set via env vars or defaults"""

    # === CALENDAR ===
    # Advisory overlap lookup on create/update (never blocks writes)
    CONFLICT_CHECK_ENABLED: bool = os.getenv("CONFLICT_CHECK_ENABLED", "true").lower() == "true"
    # Expand daily/weekly/monthly events into derived instances on create
    RECURRENCE_ENABLED: bool = os.getenv("RECURRENCE_ENABLED", "true").lower() == "true"

    # === LOGGING ===
    LOG_FILE: str = os.getenv("LOG_FILE", "calendar.log")

    # === DEBUG ===
    DEBUG_MODE: bool = os.getenv("DEBUG", "false").lower() == "true"

    @classmethod
    def to_dict(cls) -> dict:
        """Get all features as dict (useful for logging)"""
        return {
            "conflict_check_enabled": cls.CONFLICT_CHECK_ENABLED,
            "recurrence_enabled": cls.RECURRENCE_ENABLED,
            "log_file": cls.LOG_FILE,
            "debug_mode": cls.DEBUG_MODE,
        }


# Shortcut
features = Features()
