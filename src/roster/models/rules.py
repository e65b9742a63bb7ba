"""
Business Rules and Constants
============================
Central source of truth for positions, rank vocabulary, PTO types and
placeholder values.
"""
from typing import Dict, Tuple

# Positions that count as routine patrol coverage
PREDEFINED_POSITIONS: Tuple[str, ...] = (
    "Supervisor",
    "District 1",
    "District 2",
    "District 3",
    "District 4",
    "District 5",
    "District 6",
    "District 7/8",
    "Patrol",
    "Desk",
    "Traffic",
    "K-9",
)

# Substrings that mark a position as a special assignment
SPECIAL_KEYWORDS: Tuple[str, ...] = (
    "special",
    "training",
    "detail",
    "court",
    "extra",
    "other",
)

PARTNER_PATTERN = r"\bpartner(ed)?\s+with\b"

# Reason aliases -> normalized PTO type
PTO_ALIASES: Dict[str, Tuple[str, ...]] = {
    "vacation": ("vacation", "vac"),
    "holiday": ("holiday", "hol"),
    "sick": ("sick",),
    "comp": ("comp",),
}

# Profile placeholders for missing fields
UNKNOWN_NAME = "Unknown"
UNKNOWN_BADGE = "9999"
DEFAULT_RANK = "Officer"

# Badges that cannot be parsed sort after every real badge
BADGE_SENTINEL = 10 ** 9

OFF_UNSPECIFIED_LABEL = "Off, unspecified"

# Day-of-week convention: 0 = Sunday ... 6 = Saturday
DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
