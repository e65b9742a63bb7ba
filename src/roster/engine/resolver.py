"""
Schedule Resolver
=================
Single entry point consumed by every roster surface:

    merge -> classify -> resolve seniority -> categorize/sort -> evaluate staffing

`build_resolution` is the pure reducer over in-memory records;
`resolve_schedule` fetches from a RosterSource and delegates to it.
`ScheduleResolver` adds a cache keyed by (shift_id, start, end) that drops
results of superseded requests.
"""
import threading
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

from roster.models.assignment import Anomaly, DailyAssignment
from roster.models.config import EngineConfig
from roster.models.officer import Officer
from roster.models.records import RecurringAssignment, ScheduleException, StaffingRequirement
from roster.sources.base import RosterSource
from roster.utils.logging_setup import ResolutionLogger, get_logger
from roster.utils.structured_logging import bind_context, clear_context, get_structured_logger

from .classifier import classify_day, compute_primary_shifts
from .merger import merge_schedule
from .ordering import CategorizedRoster, categorize_officers
from .seniority import SeniorityCache, resolve_seniority
from .staffing import StaffingVerdict, evaluate_staffing, requirements_by_day

logger = get_logger("roster.engine.resolver")
slog = ResolutionLogger("roster.engine.resolver")
events = get_structured_logger("roster.engine")

ResolutionKey = Tuple[str, date, date]


@dataclass(frozen=True)
class ScheduleResolution:
    """Resolved schedule for one shift over a closed date range."""
    shift_id: str
    start: date
    end: date
    per_date: Mapping[date, Tuple[DailyAssignment, ...]]
    categorized: CategorizedRoster
    staffing_by_date: Mapping[date, StaffingVerdict]
    officers: Mapping[str, Officer] = field(default_factory=lambda: MappingProxyType({}))
    seniority: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def key(self) -> ResolutionKey:
        return (self.shift_id, self.start, self.end)

    @property
    def dates(self) -> List[date]:
        return sorted(self.per_date)

    def assignments_for(self, officer_id: str) -> List[DailyAssignment]:
        return [a for d in self.dates for a in self.per_date[d] if a.officer_id == officer_id]

    def anomalies(self) -> List[DailyAssignment]:
        """Assignments carrying a data anomaly, in date/roster order."""
        return [a for d in self.dates for a in self.per_date[d] if a.anomaly is not None]

    def understaffed_dates(self) -> List[date]:
        return [d for d in sorted(self.staffing_by_date) if self.staffing_by_date[d].is_understaffed]


def _placeholder_profiles(
    officer_ids: Iterable[str],
    known: Mapping[str, Officer],
    config: EngineConfig,
) -> Dict[str, Officer]:
    profiles = {}
    for oid in sorted(set(officer_ids)):
        if oid in known:
            profiles[oid] = known[oid]
        else:
            logger.warning(f"No profile for officer {oid}; using placeholder values")
            profiles[oid] = Officer.placeholder(
                oid, name=config.unknown_name, badge_number=config.unknown_badge, rank=config.default_rank
            )
    return profiles


def build_resolution(
    shift_id: str,
    start: date,
    end: date,
    recurring: Sequence[RecurringAssignment],
    exceptions: Sequence[ScheduleException],
    requirements: Iterable[StaffingRequirement] = (),
    officers: Optional[Mapping[str, Officer]] = None,
    seniority: Optional[Mapping[str, float]] = None,
    all_recurring: Optional[Sequence[RecurringAssignment]] = None,
    config: Optional[EngineConfig] = None,
    as_of: Optional[date] = None,
) -> ScheduleResolution:
    """
    Resolve a schedule from in-memory records.

    Args:
        shift_id: Shift being resolved
        start: First date (inclusive)
        end: Last date (inclusive)
        recurring: Standing patterns for the shift
        exceptions: Dated overrides for the shift
        requirements: Minimum staffing rows for the shift
        officers: {officer_id: Officer}; missing ids get placeholders
        seniority: {officer_id: score}; None computes from profiles
        all_recurring: Patterns across every shift, for primary-shift
                       detection (defaults to `recurring`)
        config: Engine configuration
        as_of: Reference date for seniority (defaults to today)

    Returns:
        ScheduleResolution
    """
    config = config or EngineConfig()

    merged = merge_schedule(shift_id, start, end, recurring, exceptions)
    primary_shifts = compute_primary_shifts(all_recurring if all_recurring is not None else recurring)
    classified = {d: classify_day(day, shift_id, primary_shifts, config) for d, day in merged.items()}

    officer_ids = {a.officer_id for day in classified.values() for a in day}
    profiles = _placeholder_profiles(officer_ids, officers or {}, config)

    if seniority is None:
        scores = resolve_seniority(profiles, fetch=None, as_of=as_of)
    else:
        scores = {oid: max(0.0, float(seniority.get(oid, 0.0))) for oid in profiles}

    categorized = categorize_officers(profiles.values(), scores)
    order = categorized.position_of()
    per_date = {
        d: tuple(sorted(day, key=lambda a: order[a.officer_id]))
        for d, day in sorted(classified.items())
    }

    staffing = evaluate_staffing(per_date, profiles, requirements_by_day(requirements, shift_id))

    return ScheduleResolution(
        shift_id=shift_id,
        start=start,
        end=end,
        per_date=MappingProxyType(per_date),
        categorized=categorized,
        staffing_by_date=MappingProxyType(staffing),
        officers=MappingProxyType(profiles),
        seniority=MappingProxyType(dict(scores)),
    )


def resolve_schedule(
    source: RosterSource,
    shift_id: str,
    start: date,
    end: date,
    config: Optional[EngineConfig] = None,
    as_of: Optional[date] = None,
) -> ScheduleResolution:
    """
    Fetch records for (shift_id, [start, end]) and resolve them.

    Recurring and exception fetch failures propagate as RosterSourceError.
    Staffing requirement and seniority failures degrade locally.
    """
    config = config or EngineConfig()
    as_of = as_of or date.today()

    bind_context(shift_id=shift_id, start=start.isoformat(), end=end.isoformat())
    try:
        slog.phase(f"Resolve shift {shift_id} {start}..{end}")
        events.info("resolution_started", days=(end - start).days + 1)

        slog.enter("Fetching records")
        recurring = source.fetch_recurring_assignments(shift_id, start, end)
        exceptions = source.fetch_exceptions(shift_id, start, end)
        all_recurring = source.fetch_recurring_assignments(None, start, end)
        try:
            requirements = source.fetch_staffing_requirements(shift_id)
        except Exception as e:
            slog.anomaly(f"Staffing requirements unavailable ({type(e).__name__}: {e}); minimums default to 0")
            requirements = []
        slog.detail("recurring", len(recurring))
        slog.detail("exceptions", len(exceptions))
        slog.detail("requirements", len(requirements))
        slog.exit("records fetched")

        officer_ids = (
            {r.officer_id for r in recurring if r.shift_id == shift_id}
            | {e.officer_id for e in exceptions if e.shift_id == shift_id}
        )
        try:
            known = source.fetch_officers(sorted(officer_ids))
        except Exception as e:
            slog.anomaly(f"Officer profiles unavailable ({type(e).__name__}: {e}); using placeholders")
            known = {}
        profiles = _placeholder_profiles(officer_ids, known, config)

        slog.step(f"Resolving seniority for {len(profiles)} officers")
        seniority_cache = SeniorityCache(
            fetch=source.fetch_seniority_input,
            as_of=as_of,
            max_workers=config.seniority_workers,
        )
        scores = seniority_cache.resolve(profiles.values())

        resolution = build_resolution(
            shift_id,
            start,
            end,
            recurring,
            exceptions,
            requirements=requirements,
            officers=profiles,
            seniority=scores,
            all_recurring=all_recurring,
            config=config,
            as_of=as_of,
        )

        anomalies = resolution.anomalies()
        for a in anomalies:
            if a.anomaly is Anomaly.OFF_UNSPECIFIED:
                events.warning("off_without_reason", officer_id=a.officer_id, date=a.date.isoformat())
        events.info(
            "resolution_completed",
            officers=len(resolution.categorized),
            assignments=sum(len(v) for v in resolution.per_date.values()),
            understaffed_days=len(resolution.understaffed_dates()),
            anomalies=len(anomalies),
        )
        return resolution
    finally:
        slog.indent = 0
        clear_context()


class ResolutionCache:
    """
    Results keyed by the full request tuple.

    `begin(key)` makes key the current request and returns a ticket;
    `complete(ticket, result)` stores the result only if no newer request
    for a different key started meanwhile. A superseded result is discarded
    wholesale.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._results: Dict[Hashable, ScheduleResolution] = {}
        self._generation = 0
        self._current: Optional[Tuple[int, Hashable]] = None

    def get(self, key: Hashable) -> Optional[ScheduleResolution]:
        with self._lock:
            return self._results.get(key)

    def begin(self, key: Hashable) -> Tuple[int, Hashable]:
        """Make key the current request; repeating the current key keeps its ticket."""
        with self._lock:
            if self._current is None or self._current[1] != key:
                self._generation += 1
                self._current = (self._generation, key)
            return self._current

    def complete(self, ticket: Tuple[int, Hashable], result: ScheduleResolution) -> bool:
        with self._lock:
            if self._current != ticket:
                logger.info(f"Discarding stale resolution for {ticket[1]}")
                return False
            self._results[ticket[1]] = result
            return True

    def invalidate(self, key: Optional[Hashable] = None) -> None:
        with self._lock:
            if key is None:
                self._results.clear()
            else:
                self._results.pop(key, None)


class ScheduleResolver:
    """Resolves schedules from a source, caching by (shift_id, start, end)."""

    def __init__(
        self,
        source: RosterSource,
        config: Optional[EngineConfig] = None,
        cache: Optional[ResolutionCache] = None,
    ):
        self.source = source
        self.config = config or EngineConfig()
        self.cache = cache or ResolutionCache()

    def resolve(
        self,
        shift_id: str,
        start: date,
        end: date,
        as_of: Optional[date] = None,
        refresh: bool = False,
    ) -> Optional[ScheduleResolution]:
        """
        Resolve (or return the cached) schedule.

        Returns None when a newer request superseded this one before it
        finished; the caller should render the newer result instead.
        """
        key: ResolutionKey = (shift_id, start, end)
        if refresh:
            self.cache.invalidate(key)
        else:
            cached = self.cache.get(key)
            if cached is not None:
                self.cache.begin(key)
                return cached

        ticket = self.cache.begin(key)
        result = resolve_schedule(self.source, shift_id, start, end, config=self.config, as_of=as_of)
        if not self.cache.complete(ticket, result):
            return None
        return result
