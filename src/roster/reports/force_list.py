"""
Force List
==========
Order in which officers are forced to stay over. Most junior first:

    seniority asc, badge desc, last name asc, officer id

Lieutenants and above and probationary officers are never forced.
Sergeants and officers are listed as separate groups.
"""
from dataclasses import dataclass
from typing import List, Mapping, Optional

from roster.engine.ordering import RankedOfficer, badge_key, name_key
from roster.engine.resolver import ScheduleResolution
from roster.models.officer import RankClass


@dataclass(frozen=True)
class ForceListEntry:
    officer_id: str
    name: str
    badge_number: str
    rank: str
    seniority: float
    group: str
    force_count: int = 0


def _force_sort_key(ro: RankedOfficer) -> tuple:
    return (
        ro.seniority,
        -badge_key(ro.officer.badge_number),
        name_key(ro.officer.last_name),
        ro.id,
    )


def is_force_eligible(rank_class: RankClass) -> bool:
    return rank_class in (RankClass.SERGEANT, RankClass.OFFICER)


def build_force_list(
    resolution: ScheduleResolution,
    force_counts: Optional[Mapping[str, int]] = None,
) -> List[ForceListEntry]:
    """
    Force list for the officers appearing in a resolution.

    Args:
        resolution: Resolved schedule
        force_counts: {officer_id: times forced}, display only

    Returns:
        Sergeants first, then officers, each group in force order
    """
    force_counts = force_counts or {}
    eligible = [ro for ro in resolution.categorized.ordered() if is_force_eligible(ro.rank_class)]
    entries = []
    for group, rank_class in (("supervisor", RankClass.SERGEANT), ("officer", RankClass.OFFICER)):
        members = sorted((ro for ro in eligible if ro.rank_class is rank_class), key=_force_sort_key)
        for ro in members:
            entries.append(ForceListEntry(
                officer_id=ro.id,
                name=ro.officer.name,
                badge_number=ro.officer.badge_number,
                rank=ro.officer.rank_abbreviation,
                seniority=ro.seniority,
                group=group,
                force_count=int(force_counts.get(ro.id, 0)),
            ))
    return entries
