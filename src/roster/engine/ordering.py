"""
Officer Categorizer & Sorter
============================
Partitions officers into Supervisor / Regular / Probationary classes and
sorts each class into a total order that every roster surface relies on
(force-list and overtime ranking use it directly).

Supervisors:   lieutenants/captains/chiefs before sergeants, seniority desc,
               last name asc, badge asc, officer id
Regular, PPO:  seniority desc, badge asc (unparsable last), last name asc,
               officer id
"""
import unicodedata
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Tuple

from roster.models.officer import Officer, RankClass
from roster.models.rules import BADGE_SENTINEL


@dataclass(frozen=True)
class RankedOfficer:
    """An officer together with the seniority used to order them."""
    officer: Officer
    seniority: float = 0.0

    @property
    def id(self) -> str:
        return self.officer.id

    @property
    def rank_class(self) -> RankClass:
        return self.officer.rank_class


@dataclass(frozen=True)
class CategorizedRoster:
    """Ordered officer classes."""
    supervisors: Tuple[RankedOfficer, ...] = field(default_factory=tuple)
    regular_officers: Tuple[RankedOfficer, ...] = field(default_factory=tuple)
    probationary: Tuple[RankedOfficer, ...] = field(default_factory=tuple)

    def ordered(self) -> Tuple[RankedOfficer, ...]:
        """All officers in display order: supervisors, regular, probationary."""
        return self.supervisors + self.regular_officers + self.probationary

    def position_of(self) -> Dict[str, int]:
        return {ro.id: i for i, ro in enumerate(self.ordered())}

    def __len__(self) -> int:
        return len(self.supervisors) + len(self.regular_officers) + len(self.probationary)


def name_key(name: str) -> str:
    """Case-insensitive, accent-folded sort key."""
    decomposed = unicodedata.normalize("NFKD", name or "")
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


def badge_key(badge_number: str) -> int:
    """Badge as an integer; unparsable badges map to a sentinel that sorts last."""
    try:
        return int(str(badge_number).strip())
    except (TypeError, ValueError):
        return BADGE_SENTINEL


def supervisor_sort_key(ro: RankedOfficer) -> tuple:
    officer = ro.officer
    tier = 0 if officer.rank_class.is_command else 1
    return (
        tier,
        -ro.seniority,
        name_key(officer.last_name),
        badge_key(officer.badge_number),
        officer.id,
    )


def officer_sort_key(ro: RankedOfficer) -> tuple:
    officer = ro.officer
    return (
        -ro.seniority,
        badge_key(officer.badge_number),
        name_key(officer.last_name),
        officer.id,
    )


def categorize_officers(
    officers: Iterable[Officer],
    seniority: Mapping[str, float],
) -> CategorizedRoster:
    """
    Partition and sort officers.

    Args:
        officers: Officers to place (duplicates by id are collapsed)
        seniority: {officer_id: score}; missing ids score 0

    Returns:
        CategorizedRoster with each class in its total order
    """
    unique: Dict[str, Officer] = {}
    for officer in officers:
        unique.setdefault(officer.id, officer)

    supervisors: List[RankedOfficer] = []
    regular: List[RankedOfficer] = []
    probationary: List[RankedOfficer] = []
    for officer_id in sorted(unique):
        officer = unique[officer_id]
        ranked = RankedOfficer(officer, float(seniority.get(officer_id, 0.0)))
        rank_class = officer.rank_class
        if rank_class.is_supervisor:
            supervisors.append(ranked)
        elif rank_class is RankClass.PROBATIONARY:
            probationary.append(ranked)
        else:
            regular.append(ranked)

    return CategorizedRoster(
        supervisors=tuple(sorted(supervisors, key=supervisor_sort_key)),
        regular_officers=tuple(sorted(regular, key=officer_sort_key)),
        probationary=tuple(sorted(probationary, key=officer_sort_key)),
    )
