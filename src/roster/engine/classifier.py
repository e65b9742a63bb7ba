"""
Assignment Classifier
=====================
Annotates each merged assignment with exactly one kind. Rules are evaluated
in order; the first match wins:

0. a kind declared on the exception record at write time
1. TimeOff        - is_off with a non-empty reason
2. Overtime       - flagged extra shift, or the officer's primary shift
                    differs from the queried shift
3. Special        - partnership, a position tagged special, or (for
                    untagged positions) the vocabulary/keyword fallback
4. Regular        - everything else

An is_off flag without a reason is an anomaly: it stays Regular, carries
Anomaly.OFF_UNSPECIFIED and is logged so operators can fix the record.
"""
import re
from collections import Counter, defaultdict
from dataclasses import replace
from typing import Dict, Iterable, Mapping, Optional

from roster.models.assignment import (
    Anomaly,
    AssignmentKind,
    DailyAssignment,
    PTODetail,
    PTOType,
)
from roster.models.config import EngineConfig, PositionCategory
from roster.models.records import RecurringAssignment
from roster.models.rules import PARTNER_PATTERN
from roster.utils.logging_setup import get_logger

logger = get_logger("roster.engine.classifier")

_PARTNER_RE = re.compile(PARTNER_PATTERN, re.IGNORECASE)


def compute_primary_shifts(recurring: Iterable[RecurringAssignment]) -> Dict[str, str]:
    """
    Primary shift per officer: the shift holding most of their recurring
    assignments across all shifts. Ties go to the smallest shift id.
    """
    counts: Dict[str, Counter] = defaultdict(Counter)
    for pattern in recurring:
        counts[pattern.officer_id][pattern.shift_id] += 1

    primary = {}
    for officer_id, per_shift in counts.items():
        primary[officer_id] = min(per_shift, key=lambda s: (-per_shift[s], s))
    return primary


def normalize_pto_type(reason: str, config: Optional[EngineConfig] = None) -> PTOType:
    """Match a free-text reason to a PTO type, case-insensitively."""
    config = config or EngineConfig()
    text = (reason or "").strip().lower()
    if not text:
        return PTOType.OTHER
    words = set(re.findall(r"[a-z]+", text))
    for pto_name, aliases in config.pto_aliases.items():
        for alias in aliases:
            # Short aliases ("vac", "hol") only match whole words
            if (len(alias) >= 4 and alias in text) or alias in words or text == alias:
                return PTOType(pto_name)
    return PTOType.OTHER


def is_special_position(position: str, config: Optional[EngineConfig] = None) -> bool:
    """
    Special-assignment test for a position name.

    A configured category decides outright; untagged positions fall back to
    the vocabulary and keyword heuristics. Empty positions are not special.
    """
    config = config or EngineConfig()
    name = (position or "").strip()
    if not name:
        return False

    category = config.category_for(name)
    if category is not None:
        return category is PositionCategory.SPECIAL

    lowered = name.lower()
    if _PARTNER_RE.search(lowered):
        return True
    if any(keyword in lowered for keyword in config.special_keywords):
        return True
    vocabulary = {p.lower() for p in config.predefined_positions}
    return lowered not in vocabulary


def _pto_detail(assignment: DailyAssignment, config: EngineConfig) -> PTODetail:
    return PTODetail(
        pto_type=normalize_pto_type(assignment.reason, config),
        reason=assignment.reason,
        is_full_shift=assignment.custom_start_time is None and assignment.custom_end_time is None,
        start_time=assignment.custom_start_time,
        end_time=assignment.custom_end_time,
    )


def classify_assignment(
    assignment: DailyAssignment,
    shift_id: str,
    primary_shifts: Mapping[str, str],
    config: Optional[EngineConfig] = None,
) -> DailyAssignment:
    """
    Return a classified copy of a merged assignment.

    Args:
        assignment: Output of the merger (kind not yet decided)
        shift_id: Shift being resolved
        primary_shifts: {officer_id: primary shift id} across all shifts
        config: Engine configuration

    Returns:
        New DailyAssignment with kind, pto and anomaly set
    """
    config = config or EngineConfig()

    declared = assignment.declared_kind
    if declared is not None:
        pto = _pto_detail(assignment, config) if declared is AssignmentKind.TIME_OFF else None
        return replace(assignment, kind=declared, pto=pto, anomaly=None)

    reason = assignment.reason.strip()
    if assignment.is_off and reason:
        return replace(assignment, kind=AssignmentKind.TIME_OFF, pto=_pto_detail(assignment, config))

    if assignment.is_off:
        logger.warning(
            f"Officer {assignment.officer_id} marked off on {assignment.date} without a reason "
            f"(record {assignment.record_id}); treating as unspecified"
        )
        return replace(assignment, kind=AssignmentKind.REGULAR, pto=None, anomaly=Anomaly.OFF_UNSPECIFIED)

    primary = primary_shifts.get(assignment.officer_id)
    if assignment.is_extra_shift or (primary is not None and primary != shift_id):
        return replace(assignment, kind=AssignmentKind.OVERTIME, pto=None, anomaly=None)

    if assignment.partner_officer_id or is_special_position(assignment.position, config):
        return replace(assignment, kind=AssignmentKind.SPECIAL, pto=None, anomaly=None)

    return replace(assignment, kind=AssignmentKind.REGULAR, pto=None, anomaly=None)


def classify_day(
    assignments: Iterable[DailyAssignment],
    shift_id: str,
    primary_shifts: Mapping[str, str],
    config: Optional[EngineConfig] = None,
) -> tuple:
    return tuple(classify_assignment(a, shift_id, primary_shifts, config) for a in assignments)
