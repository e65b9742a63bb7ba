"""Coverage tables and understaffing alerts."""
from typing import Dict, List

import pandas as pd

from roster.engine.resolver import ScheduleResolution
from roster.models.calendar import day_name

COVERAGE_COLUMNS = [
    "date", "day", "supervisors", "min_supervisors", "officers", "min_officers",
    "probationary", "supervisor_gap", "officer_gap", "understaffed", "shortfall",
]


def coverage_table(resolution: ScheduleResolution) -> pd.DataFrame:
    """
    Table: date, day, counts vs minimums, gaps and shortfall text.

    Gaps are current minus minimum; negative means short.
    """
    rows = []
    for d in sorted(resolution.staffing_by_date):
        v = resolution.staffing_by_date[d]
        rows.append({
            "date": d,
            "day": day_name(v.day_of_week),
            "supervisors": v.current_supervisors,
            "min_supervisors": v.minimum_supervisors,
            "officers": v.current_officers,
            "min_officers": v.minimum_officers,
            "probationary": v.current_probationary,
            "supervisor_gap": v.current_supervisors - v.minimum_supervisors,
            "officer_gap": v.current_officers - v.minimum_officers,
            "understaffed": v.is_understaffed,
            "shortfall": v.shortfall_description,
        })
    if not rows:
        return pd.DataFrame(columns=COVERAGE_COLUMNS)
    return pd.DataFrame(rows, columns=COVERAGE_COLUMNS)


def compute_coverage_summary(cov: pd.DataFrame) -> Dict[str, int]:
    """Summary over days that have a requirement."""
    if cov is None or cov.empty:
        return {"days": 0, "ok": 0, "understaffed": 0, "supervisor_deficit": 0, "officer_deficit": 0}
    focus = cov[(cov["min_supervisors"] > 0) | (cov["min_officers"] > 0)]
    return {
        "days": int(len(focus)),
        "ok": int((~focus["understaffed"]).sum()),
        "understaffed": int(focus["understaffed"].sum()),
        "supervisor_deficit": int((-focus["supervisor_gap"]).clip(lower=0).sum()),
        "officer_deficit": int((-focus["officer_gap"]).clip(lower=0).sum()),
    }


def understaffing_alerts(resolution: ScheduleResolution) -> List[dict]:
    """One alert per understaffed date, e.g. "Short 1 Supervisor(s) on Tue 2024-01-02"."""
    alerts = []
    for d in resolution.understaffed_dates():
        v = resolution.staffing_by_date[d]
        alerts.append({
            "date": d.isoformat(),
            "shift_id": resolution.shift_id,
            "supervisors_needed": v.supervisors_needed,
            "officers_needed": v.officers_needed,
            "message": f"Short {v.shortfall_description} on {day_name(v.day_of_week)} {d.isoformat()}",
        })
    return alerts
