"""
Engine Configuration
====================
Pydantic-validated settings for classification and seniority resolution.

Usage:
    from roster.models.config import EngineConfig

    config = EngineConfig(predefined_positions=["District 1", "District 2"])
    config = EngineConfig.from_file("engine.json")
"""
import json
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from roster.errors import ConfigError

from .rules import (
    DEFAULT_RANK,
    PREDEFINED_POSITIONS,
    PTO_ALIASES,
    SPECIAL_KEYWORDS,
    UNKNOWN_BADGE,
    UNKNOWN_NAME,
)


class PositionCategory(str, Enum):
    """Category tagged on a position record at data-entry time."""
    REGULAR = "regular"
    SPECIAL = "special"


class EngineConfig(BaseModel):
    """
    Validated engine configuration.

    `position_categories` is the primary source for special-assignment
    classification; the vocabulary and keyword lists are consulted only for
    positions that have no category.
    """
    model_config = ConfigDict(frozen=True)

    predefined_positions: List[str] = Field(default_factory=lambda: list(PREDEFINED_POSITIONS))
    special_keywords: List[str] = Field(default_factory=lambda: list(SPECIAL_KEYWORDS))
    position_categories: Dict[str, PositionCategory] = Field(default_factory=dict)
    pto_aliases: Dict[str, List[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in PTO_ALIASES.items()}
    )
    seniority_workers: Optional[int] = Field(
        default=None, ge=1, le=64, description="Thread cap for seniority lookups; None = one per officer"
    )
    unknown_name: str = UNKNOWN_NAME
    unknown_badge: str = UNKNOWN_BADGE
    default_rank: str = DEFAULT_RANK

    @field_validator("special_keywords")
    @classmethod
    def normalize_keywords(cls, v: List[str]) -> List[str]:
        return [k.strip().lower() for k in v if k and k.strip()]

    @field_validator("predefined_positions")
    @classmethod
    def strip_positions(cls, v: List[str]) -> List[str]:
        return [p.strip() for p in v if p and p.strip()]

    @field_validator("pto_aliases")
    @classmethod
    def validate_pto_aliases(cls, v: Dict[str, List[str]]) -> Dict[str, List[str]]:
        allowed = {"vacation", "holiday", "sick", "comp"}
        unknown = set(v) - allowed
        if unknown:
            raise ValueError(f"Unknown PTO types in pto_aliases: {sorted(unknown)}")
        return {k: [a.strip().lower() for a in aliases if a.strip()] for k, aliases in v.items()}

    def category_for(self, position: str) -> Optional[PositionCategory]:
        """Configured category, matched case-insensitively."""
        if not position:
            return None
        if position in self.position_categories:
            return self.position_categories[position]
        key = position.strip().lower()
        for name, category in self.position_categories.items():
            if name.strip().lower() == key:
                return category
        return None

    @classmethod
    def from_dict(cls, d: dict) -> "EngineConfig":
        try:
            return cls.model_validate(d)
        except ValidationError as e:
            raise ConfigError(str(e)) from e

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "EngineConfig":
        """Load a JSON configuration file."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        return cls.from_dict(data)
