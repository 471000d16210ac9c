"""
Domain constants - limits, formats and recurrence rules.
Centralized here for easy modification.
"""

# Event field limits (mirror the calendar_events table)
MAX_TITLE_LENGTH = 200
MAX_CATEGORY_LENGTH = 50
COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

# === Recurrence ===
# Additional instances generated after the base event (base + N = total)
RECURRENCE_INSTANCE_COUNTS = {
    "daily": 29,    # 30 days
    "weekly": 51,   # 52 weeks
    "monthly": 11,  # 12 months
}

# Calendar unit used to step each recurrence kind
RECURRENCE_UNITS = {
    "daily": "day",
    "weekly": "week",
    "monthly": "month",
}

# Table names
CALENDAR_EVENTS_TABLE = "calendar_events"
