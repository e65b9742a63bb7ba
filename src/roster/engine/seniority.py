"""
Seniority Resolution
====================
Service credit in decimal years, used only to order officers.

A manual override > 0 always wins. Otherwise the relevant date is the
promotion date matching the officer's rank (sergeant date for sergeants,
lieutenant date for lieutenants, captains and chiefs), falling back to the
hire date. Elapsed time is computed from calendar component differences as
years + months/12 + days/365, rounded half-up to one decimal, floored at 0.

Roster-wide resolution fetches one input per distinct officer. The lookups
are independent and run concurrently on a thread pool; failures degrade to 0.
"""
import concurrent.futures
import math
from datetime import date
from typing import Dict, Iterable, Mapping, Optional, Union

from roster.models.officer import Officer, RankClass
from roster.models.records import SeniorityInput
from roster.utils.logging_setup import get_logger

logger = get_logger("roster.engine.seniority")

SeniorityLookupResult = Union[SeniorityInput, float, int, None]


def _round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def relevant_service_date(
    rank: Optional[str],
    hire_date: Optional[date],
    promotion_date_sergeant: Optional[date] = None,
    promotion_date_lieutenant: Optional[date] = None,
) -> Optional[date]:
    """Date from which service is credited for the officer's current rank."""
    rank_class = RankClass.from_rank(rank)
    if rank_class is RankClass.SERGEANT and promotion_date_sergeant:
        return promotion_date_sergeant
    if rank_class in (RankClass.LIEUTENANT, RankClass.CAPTAIN, RankClass.CHIEF) and promotion_date_lieutenant:
        return promotion_date_lieutenant
    return hire_date


def years_of_service(since: Optional[date], as_of: date) -> float:
    """Fractional years from `since` to `as_of`; 0 when since is unknown or in the future."""
    if since is None:
        return 0.0
    years = as_of.year - since.year
    months = as_of.month - since.month
    days = as_of.day - since.day
    total = years + months / 12 + days / 365
    return max(0.0, _round_half_up(total, 1))


def compute_seniority(
    hire_date: Optional[date],
    rank: Optional[str] = None,
    promotion_date_sergeant: Optional[date] = None,
    promotion_date_lieutenant: Optional[date] = None,
    override: Optional[float] = 0.0,
    as_of: Optional[date] = None,
) -> float:
    """
    Service credit for one officer.

    Args:
        hire_date: Date of hire
        rank: Current free-text rank
        promotion_date_sergeant: Promotion to sergeant
        promotion_date_lieutenant: Promotion to lieutenant
        override: Manual service credit; wins when > 0
        as_of: Reference date (defaults to today)

    Returns:
        Non-negative decimal years
    """
    if override and override > 0:
        return float(override)
    as_of = as_of or date.today()
    since = relevant_service_date(rank, hire_date, promotion_date_sergeant, promotion_date_lieutenant)
    return years_of_service(since, as_of)


def seniority_for_officer(officer: Officer, as_of: Optional[date] = None) -> float:
    """Service credit from the officer profile's own fields."""
    return compute_seniority(
        officer.hire_date,
        rank=officer.rank,
        promotion_date_sergeant=officer.promotion_date_sergeant,
        promotion_date_lieutenant=officer.promotion_date_lieutenant,
        override=officer.service_credit_override,
        as_of=as_of,
    )


def seniority_from_lookup(
    officer: Officer,
    looked_up: SeniorityLookupResult,
    as_of: Optional[date] = None,
) -> float:
    """
    Combine a source lookup with the profile.

    An external credit value is preferred; raw fields are computed locally;
    a missing lookup falls back to the profile fields.
    """
    if looked_up is None:
        return seniority_for_officer(officer, as_of)
    if isinstance(looked_up, SeniorityInput):
        return compute_seniority(
            looked_up.hire_date,
            rank=officer.rank,
            promotion_date_sergeant=looked_up.promotion_date_sergeant,
            promotion_date_lieutenant=looked_up.promotion_date_lieutenant,
            override=looked_up.override,
            as_of=as_of,
        )
    value = float(looked_up)
    if math.isnan(value):
        return seniority_for_officer(officer, as_of)
    return max(0.0, value)


def resolve_seniority(
    officers: Mapping[str, Officer],
    fetch=None,
    as_of: Optional[date] = None,
    max_workers: Optional[int] = None,
) -> Dict[str, float]:
    """
    Service credit for every officer, fetching inputs concurrently.

    Args:
        officers: {officer_id: Officer}
        fetch: callable(officer_id) -> SeniorityInput | float | None;
               None computes from the profiles only
        as_of: Reference date (defaults to today)
        max_workers: Thread cap (defaults to one thread per officer)

    Returns:
        {officer_id: score}; officers whose lookup failed score 0
    """
    as_of = as_of or date.today()
    officer_ids = sorted(officers)
    if not officer_ids:
        return {}

    if fetch is None:
        return {oid: seniority_for_officer(officers[oid], as_of) for oid in officer_ids}

    scores: Dict[str, float] = {}
    workers = max_workers or len(officer_ids)
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers, thread_name_prefix="seniority") as executor:
        futures = {executor.submit(fetch, oid): oid for oid in officer_ids}
        for future in concurrent.futures.as_completed(futures):
            oid = futures[future]
            try:
                scores[oid] = seniority_from_lookup(officers[oid], future.result(), as_of)
            except Exception as e:
                logger.warning(f"Seniority lookup failed for officer {oid}: {type(e).__name__}: {e}; using 0")
                scores[oid] = 0.0

    return {oid: scores[oid] for oid in officer_ids}


class SeniorityCache:
    """Per-pass cache so each officer is looked up at most once."""

    def __init__(self, fetch=None, as_of: Optional[date] = None, max_workers: Optional[int] = None):
        self._fetch = fetch
        self._as_of = as_of
        self._max_workers = max_workers
        self._scores: Dict[str, float] = {}

    def __contains__(self, officer_id: str) -> bool:
        return officer_id in self._scores

    def get(self, officer_id: str, default: float = 0.0) -> float:
        return self._scores.get(officer_id, default)

    def resolve(self, officers: Iterable[Officer]) -> Dict[str, float]:
        """Look up officers not seen yet in this pass and return all requested scores."""
        requested = {o.id: o for o in officers}
        missing = {oid: o for oid, o in requested.items() if oid not in self._scores}
        if missing:
            self._scores.update(resolve_seniority(missing, self._fetch, self._as_of, self._max_workers))
        return {oid: self._scores[oid] for oid in sorted(requested)}
