"""Officer profile and rank classification."""
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from .calendar import parse_date
from .rules import DEFAULT_RANK, UNKNOWN_BADGE, UNKNOWN_NAME


class RankClass(str, Enum):
    """Rank classes derived from the free-text rank field."""
    CHIEF = "chief"
    CAPTAIN = "captain"
    LIEUTENANT = "lieutenant"
    SERGEANT = "sergeant"
    OFFICER = "officer"
    PROBATIONARY = "probationary"

    @property
    def is_supervisor(self) -> bool:
        return self in (RankClass.CHIEF, RankClass.CAPTAIN, RankClass.LIEUTENANT, RankClass.SERGEANT)

    @property
    def is_command(self) -> bool:
        """Lieutenants and above; they precede sergeants in the supervisor order."""
        return self in (RankClass.CHIEF, RankClass.CAPTAIN, RankClass.LIEUTENANT)

    @property
    def abbreviation(self) -> str:
        return {
            RankClass.CHIEF: "CHIEF",
            RankClass.CAPTAIN: "CPT",
            RankClass.LIEUTENANT: "LT",
            RankClass.SERGEANT: "Sgt",
            RankClass.OFFICER: "Ofc",
            RankClass.PROBATIONARY: "PPO",
        }[self]

    @classmethod
    def from_rank(cls, rank: Optional[str]) -> "RankClass":
        """Classify a rank string; abbreviations only match as whole words."""
        text = str(rank or "").strip().lower()
        if not text:
            return cls.OFFICER
        words = set(re.findall(r"[a-z0-9]+", text))
        if "chief" in text:
            return cls.CHIEF
        if "captain" in text or words & {"capt", "cpt"}:
            return cls.CAPTAIN
        if "lieutenant" in text or "lt" in words:
            return cls.LIEUTENANT
        if "sergeant" in text or words & {"sgt"}:
            return cls.SERGEANT
        if "probationary" in text or "ppo" in words:
            return cls.PROBATIONARY
        return cls.OFFICER


@dataclass(frozen=True)
class Officer:
    """Officer profile as owned by the roster store."""

    id: str
    name: str = UNKNOWN_NAME
    badge_number: str = UNKNOWN_BADGE
    rank: str = DEFAULT_RANK
    hire_date: Optional[date] = None
    promotion_date_sergeant: Optional[date] = None
    promotion_date_lieutenant: Optional[date] = None
    service_credit_override: float = 0.0

    def __post_init__(self):
        # Blank profile fields fall back to placeholders
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "name", str(self.name or "").strip() or UNKNOWN_NAME)
        object.__setattr__(self, "badge_number", str(self.badge_number or "").strip() or UNKNOWN_BADGE)
        object.__setattr__(self, "rank", str(self.rank or "").strip() or DEFAULT_RANK)
        object.__setattr__(self, "service_credit_override", float(self.service_credit_override or 0.0))

    @property
    def rank_class(self) -> RankClass:
        return RankClass.from_rank(self.rank)

    @property
    def rank_abbreviation(self) -> str:
        if self.rank_class is RankClass.CHIEF and "deputy" in self.rank.lower():
            return "DC"
        return self.rank_class.abbreviation

    @property
    def last_name(self) -> str:
        parts = self.name.split()
        return parts[-1] if parts else ""

    @classmethod
    def placeholder(
        cls,
        officer_id: str,
        name: str = UNKNOWN_NAME,
        badge_number: str = UNKNOWN_BADGE,
        rank: str = DEFAULT_RANK,
    ) -> "Officer":
        """Profile used when the store has no record for an officer id."""
        return cls(id=officer_id, name=name, badge_number=badge_number, rank=rank)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "badge_number": self.badge_number,
            "rank": self.rank,
            "hire_date": self.hire_date.isoformat() if self.hire_date else None,
            "promotion_date_sergeant": (
                self.promotion_date_sergeant.isoformat() if self.promotion_date_sergeant else None
            ),
            "promotion_date_lieutenant": (
                self.promotion_date_lieutenant.isoformat() if self.promotion_date_lieutenant else None
            ),
            "service_credit_override": self.service_credit_override,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Officer":
        override = d.get("service_credit_override")
        try:
            override = float(override) if override not in (None, "") else 0.0
        except (TypeError, ValueError):
            override = 0.0
        return cls(
            id=str(d.get("id", "")),
            name=d.get("name") or d.get("full_name") or "",
            badge_number=str(d.get("badge_number") or ""),
            rank=d.get("rank") or "",
            hire_date=parse_date(d.get("hire_date")),
            promotion_date_sergeant=parse_date(d.get("promotion_date_sergeant")),
            promotion_date_lieutenant=parse_date(d.get("promotion_date_lieutenant")),
            service_credit_override=override,
        )
