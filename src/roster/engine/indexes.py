"""
Record Indexes
==============
Lookup structures built once per resolution pass:

- RecurringPatternIndex: (officer, day-of-week) -> standing patterns
- ExceptionIndex: (officer, date) -> the single winning exception

Both are built from lists that were already filtered to one shift.
"""
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from roster.models.records import RecurringAssignment, ScheduleException
from roster.utils.logging_setup import get_logger

logger = get_logger("roster.engine.indexes")


class RecurringPatternIndex:
    """Standing weekly patterns keyed by (officer_id, day_of_week)."""

    def __init__(self, patterns: Iterable[RecurringAssignment]):
        self._by_key: Dict[Tuple[str, int], List[RecurringAssignment]] = defaultdict(list)
        self._by_day: Dict[int, Set[str]] = defaultdict(set)
        for pattern in patterns:
            self._by_key[(pattern.officer_id, pattern.day_of_week)].append(pattern)
            self._by_day[pattern.day_of_week].add(pattern.officer_id)
        logger.debug(f"Indexed {sum(len(v) for v in self._by_key.values())} recurring patterns "
                     f"over {len(self._by_key)} (officer, weekday) keys")

    def __len__(self) -> int:
        return len(self._by_key)

    def officers_on(self, dow: int) -> Set[str]:
        """Officers with any pattern on this weekday (date validity not checked)."""
        return set(self._by_day.get(dow, ()))

    def lookup(self, officer_id: str, d: date, dow: int) -> Optional[RecurringAssignment]:
        """
        Pattern in effect for officer on date d.

        Duplicate patterns for the same (officer, weekday) resolve to the
        first applicable one in insertion order.
        """
        candidates = [p for p in self._by_key.get((officer_id, dow), ()) if p.applies_on(d)]
        if not candidates:
            return None
        if len(candidates) > 1:
            logger.warning(
                f"Duplicate recurring patterns for officer {officer_id} on {d}: "
                f"{[p.id for p in candidates]}; using {candidates[0].id}"
            )
        return candidates[0]


def _recency_key(position: int, exception: ScheduleException) -> Tuple[bool, datetime, int]:
    # Untimestamped records are older than any timestamped one
    created = exception.created_at
    if created is not None and created.tzinfo is not None:
        created = created.replace(tzinfo=None) - created.utcoffset()
    return (created is not None, created or datetime.min, position)


class ExceptionIndex:
    """
    Dated overrides keyed by (officer_id, date).

    When several exceptions exist for the same key, the most recently
    created one wins; ties fall back to the later insertion position.
    """

    def __init__(self, exceptions: Iterable[ScheduleException]):
        best: Dict[Tuple[str, date], Tuple[Tuple[bool, datetime, int], ScheduleException]] = {}
        duplicates: Dict[Tuple[str, date], int] = defaultdict(int)
        for position, exc in enumerate(exceptions):
            key = (exc.officer_id, exc.date)
            rank = _recency_key(position, exc)
            if key in best:
                duplicates[key] += 1
                if rank > best[key][0]:
                    best[key] = (rank, exc)
            else:
                best[key] = (rank, exc)

        self._by_key: Dict[Tuple[str, date], ScheduleException] = {k: v[1] for k, v in best.items()}
        self._by_date: Dict[date, Set[str]] = defaultdict(set)
        for officer_id, d in self._by_key:
            self._by_date[d].add(officer_id)

        for (officer_id, d), extra in sorted(duplicates.items()):
            logger.warning(
                f"{extra + 1} exceptions for officer {officer_id} on {d}; "
                f"keeping most recent ({self._by_key[(officer_id, d)].id})"
            )
        self.duplicate_count = sum(duplicates.values())

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, key: Tuple[str, date]) -> bool:
        return key in self._by_key

    def officers_on(self, d: date) -> Set[str]:
        return set(self._by_date.get(d, ()))

    def lookup(self, officer_id: str, d: date) -> Optional[ScheduleException]:
        return self._by_key.get((officer_id, d))
