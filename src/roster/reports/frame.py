"""Tabular views of a ScheduleResolution."""
from typing import Optional

import pandas as pd

from roster.engine.resolver import ScheduleResolution
from roster.models.calendar import day_name

FRAME_COLUMNS = [
    "date", "day", "officer_id", "name", "badge_number", "rank", "category",
    "seniority", "kind", "position", "unit", "source", "is_regular_recurring_day",
    "pto_type", "pto_label", "anomaly", "label",
]

ANOMALY_MARKER = "(!)"

KIND_CODES = {
    "regular": "",
    "time_off": "PTO",
    "special_assignment": "SPC",
    "overtime": "OT",
}


def _category(resolution: ScheduleResolution, officer_id: str) -> str:
    cat = resolution.categorized
    if any(ro.id == officer_id for ro in cat.supervisors):
        return "supervisor"
    if any(ro.id == officer_id for ro in cat.probationary):
        return "probationary"
    return "officer"


def resolution_to_dataframe(resolution: ScheduleResolution) -> pd.DataFrame:
    """One row per (date, officer), in date then roster order."""
    rows = []
    categories = {oid: _category(resolution, oid) for oid in resolution.officers}
    for d in resolution.dates:
        for a in resolution.per_date[d]:
            officer = resolution.officers[a.officer_id]
            rows.append({
                "date": d,
                "day": day_name(a.day_of_week),
                "officer_id": a.officer_id,
                "name": officer.name,
                "badge_number": officer.badge_number,
                "rank": officer.rank_abbreviation,
                "category": categories[a.officer_id],
                "seniority": resolution.seniority.get(a.officer_id, 0.0),
                "kind": a.kind.value,
                "position": a.position,
                "unit": a.unit,
                "source": a.source.value,
                "is_regular_recurring_day": a.is_regular_recurring_day,
                "pto_type": a.pto.pto_type.value if a.pto else None,
                "pto_label": a.pto.label if a.pto else None,
                "anomaly": a.anomaly.value if a.anomaly else None,
                "label": a.label,
            })
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def _cell(row) -> str:
    if row["anomaly"]:
        return f"{row['label']} {ANOMALY_MARKER}"
    if row["pto_label"]:
        return row["pto_label"]
    code = KIND_CODES.get(row["kind"], "")
    label = row["position"] or ""
    return f"{label} ({code})" if code and label else (label or code)


def roster_matrix(resolution: ScheduleResolution, fill_value: Optional[str] = "") -> pd.DataFrame:
    """Officer x date grid (the book view); rows keep roster order."""
    df = resolution_to_dataframe(resolution)
    if df.empty:
        return pd.DataFrame()
    df = df.assign(cell=df.apply(_cell, axis=1))
    piv = df.pivot_table(
        index="officer_id",
        columns="date",
        values="cell",
        aggfunc="first",
        fill_value=fill_value,
    )
    order = [ro.id for ro in resolution.categorized.ordered() if ro.id in piv.index]
    piv = piv.reindex(order)
    piv.index = [
        f"{resolution.officers[oid].rank_abbreviation} {resolution.officers[oid].name}"
        for oid in piv.index
    ]
    return piv
