"""Vacation and holiday blocks: runs of consecutive same-type days off."""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from roster.engine.resolver import ScheduleResolution
from roster.models.assignment import AssignmentKind, PTOType

BLOCK_TYPES = (PTOType.VACATION, PTOType.HOLIDAY)


@dataclass(frozen=True)
class VacationBlock:
    officer_id: str
    pto_type: PTOType
    start: date
    end: date
    dates: Tuple[date, ...]

    @property
    def days(self) -> int:
        return len(self.dates)


def build_vacation_blocks(
    resolution: ScheduleResolution,
    after: Optional[date] = None,
) -> Dict[str, List[VacationBlock]]:
    """
    Group vacation/holiday TimeOff days per officer into blocks.

    A block continues while the next day is exactly one day later and has
    the same PTO type. With `after`, only blocks ending after that date are
    kept. Officers are listed in roster order.
    """
    result: Dict[str, List[VacationBlock]] = {}
    for ro in resolution.categorized.ordered():
        entries = [
            (a.date, a.pto.pto_type)
            for a in resolution.assignments_for(ro.id)
            if a.kind is AssignmentKind.TIME_OFF and a.pto and a.pto.pto_type in BLOCK_TYPES
        ]
        blocks: List[VacationBlock] = []
        run: List[Tuple[date, PTOType]] = []
        for d, pto_type in entries:
            if run and (d - run[-1][0] != timedelta(days=1) or pto_type is not run[0][1]):
                blocks.append(_block(ro.id, run))
                run = []
            run.append((d, pto_type))
        if run:
            blocks.append(_block(ro.id, run))
        if after is not None:
            blocks = [b for b in blocks if b.end > after]
        if blocks:
            result[ro.id] = blocks
    return result


def _block(officer_id: str, run: List[Tuple[date, PTOType]]) -> VacationBlock:
    return VacationBlock(
        officer_id=officer_id,
        pto_type=run[0][1],
        start=run[0][0],
        end=run[-1][0],
        dates=tuple(d for d, _ in run),
    )
