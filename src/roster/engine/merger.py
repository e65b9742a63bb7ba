"""
Schedule Merger
===============
Merges standing weekly patterns and dated exceptions into exactly one
effective assignment per (officer, date).

Precedence: an exception for (officer, date) always replaces the recurring
pattern for that pair, whatever its type. The check is an explicit lookup in
the exception index, so it holds for any ordering of the input lists.
"""
from datetime import date
from typing import Dict, Iterable, List, Tuple

from roster.models.assignment import DailyAssignment, ScheduleSource
from roster.models.calendar import date_range, day_of_week
from roster.models.records import RecurringAssignment, ScheduleException
from roster.utils.logging_setup import get_logger, log_function_call

from .indexes import ExceptionIndex, RecurringPatternIndex

logger = get_logger("roster.engine.merger")

MergedDay = Tuple[DailyAssignment, ...]


def from_exception(exc: ScheduleException, dow: int) -> DailyAssignment:
    """Unclassified assignment sourced from a dated exception."""
    return DailyAssignment(
        officer_id=exc.officer_id,
        date=exc.date,
        day_of_week=dow,
        shift_id=exc.shift_id,
        source=ScheduleSource.EXCEPTION,
        record_id=exc.id,
        is_regular_recurring_day=False,
        position=exc.position,
        unit=exc.unit,
        notes=exc.notes,
        is_off=exc.is_off,
        reason=exc.reason,
        custom_start_time=exc.custom_start_time,
        custom_end_time=exc.custom_end_time,
        is_extra_shift=exc.is_extra_shift,
        partner_officer_id=exc.partner_officer_id,
        declared_kind=exc.assignment_kind,
    )


def from_recurring(pattern: RecurringAssignment, d: date, dow: int) -> DailyAssignment:
    """Unclassified assignment sourced from a standing weekly pattern."""
    return DailyAssignment(
        officer_id=pattern.officer_id,
        date=d,
        day_of_week=dow,
        shift_id=pattern.shift_id,
        source=ScheduleSource.RECURRING,
        record_id=pattern.id,
        is_regular_recurring_day=True,
        position=pattern.position,
        unit=pattern.unit,
    )


def merge_day(
    d: date,
    patterns: RecurringPatternIndex,
    exceptions: ExceptionIndex,
) -> MergedDay:
    """Resolve one date; result is ordered by officer id."""
    dow = day_of_week(d)
    merged: Dict[str, DailyAssignment] = {}

    for officer_id in exceptions.officers_on(d):
        exc = exceptions.lookup(officer_id, d)
        if exc is not None:
            merged[officer_id] = from_exception(exc, dow)

    for officer_id in patterns.officers_on(dow):
        if (officer_id, d) in exceptions:
            continue  # exception wins
        pattern = patterns.lookup(officer_id, d, dow)
        if pattern is not None:
            merged[officer_id] = from_recurring(pattern, d, dow)

    return tuple(merged[oid] for oid in sorted(merged))


@log_function_call
def merge_schedule(
    shift_id: str,
    start: date,
    end: date,
    recurring: Iterable[RecurringAssignment],
    exceptions: Iterable[ScheduleException],
) -> Dict[date, MergedDay]:
    """
    Merge records for one shift over the closed range [start, end].

    Args:
        shift_id: Shift being resolved; records for other shifts are ignored
        start: First date (inclusive)
        end: Last date (inclusive)
        recurring: Standing weekly patterns
        exceptions: Dated overrides

    Returns:
        {date: tuple of DailyAssignment}; every date of the range is present,
        possibly with an empty tuple
    """
    if end < start:
        logger.warning(f"Empty date range: {start} > {end}")
        return {}

    shift_recurring: List[RecurringAssignment] = [r for r in recurring if r.shift_id == shift_id]
    shift_exceptions: List[ScheduleException] = [
        e for e in exceptions if e.shift_id == shift_id and start <= e.date <= end
    ]

    pattern_index = RecurringPatternIndex(shift_recurring)
    exception_index = ExceptionIndex(shift_exceptions)

    result = {d: merge_day(d, pattern_index, exception_index) for d in date_range(start, end)}

    total = sum(len(v) for v in result.values())
    logger.debug(f"Merged shift {shift_id} {start}..{end}: {total} assignments over {len(result)} days")
    return result
