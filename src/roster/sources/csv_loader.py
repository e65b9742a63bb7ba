"""CSV loading for roster records."""
from pathlib import Path
from typing import Callable, Dict, Iterable, List, TypeVar, Union

import pandas as pd

from roster.errors import RosterSourceError
from roster.models.officer import Officer
from roster.models.records import (
    RecurringAssignment,
    ScheduleException,
    StaffingRequirement,
)
from roster.utils.logging_setup import get_logger

from .memory import InMemoryRosterSource

logger = get_logger("roster.sources.csv_loader")

T = TypeVar("T")

Source = Union[str, Path, pd.DataFrame]

OFFICER_COLUMNS = {"id"}
RECURRING_COLUMNS = {"officer_id", "shift_id", "day_of_week"}
EXCEPTION_COLUMNS = {"officer_id", "shift_id", "date"}
STAFFING_COLUMNS = {"shift_id", "day_of_week"}
CREDIT_COLUMNS = {"officer_id", "service_credit"}


def _safe_float(value, default: float = 0.0) -> float:
    """Safely convert value to float."""
    try:
        return float(value)
    except (ValueError, TypeError):
        return default


def _read(source: Source, required: set, label: str) -> pd.DataFrame:
    """Read a CSV as strings (badges like "0042" keep their digits)."""
    if isinstance(source, pd.DataFrame):
        df = source.copy()
    else:
        try:
            df = pd.read_csv(source, dtype=str, keep_default_na=False)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise RosterSourceError(f"Cannot read {label} from {source}: {e}") from e

    df = df.fillna("")
    df.columns = [str(c).strip().lower() for c in df.columns]

    missing = required - set(df.columns)
    if missing:
        raise RosterSourceError(f"{label} CSV is missing columns: {sorted(missing)}")
    return df


def _rows(df: pd.DataFrame, build: Callable[[dict], T], label: str) -> List[T]:
    """Build one record per row; a malformed row is skipped, not fatal."""
    records = []
    for idx, row in df.iterrows():
        data = row.to_dict()
        if "id" not in data or not str(data["id"]).strip():
            data["id"] = f"{label}-{idx}"
        try:
            records.append(build(data))
        except ValueError as e:
            logger.warning(f"Skipping {label} row {idx}: {e}")
    return records


def load_officers(source: Source) -> List[Officer]:
    """
    Load officer profiles.

    Args:
        source: Path to CSV file or pandas DataFrame

    Returns:
        List of Officer objects; blank fields become placeholders
    """
    df = _read(source, OFFICER_COLUMNS, "officers")
    df = df[df["id"].astype(str).str.strip() != ""]
    return _rows(df, Officer.from_dict, "officer")


def load_recurring(source: Source) -> List[RecurringAssignment]:
    df = _read(source, RECURRING_COLUMNS, "recurring")
    return _rows(df, RecurringAssignment.from_dict, "recurring")


def load_exceptions(source: Source) -> List[ScheduleException]:
    df = _read(source, EXCEPTION_COLUMNS, "exceptions")
    return _rows(df, ScheduleException.from_dict, "exception")


def load_requirements(source: Source) -> List[StaffingRequirement]:
    df = _read(source, STAFFING_COLUMNS, "staffing")
    return _rows(df, StaffingRequirement.from_dict, "staffing")


def load_service_credits(source: Source) -> Dict[str, float]:
    """Precomputed service credits keyed by officer id (blank credits are skipped)."""
    df = _read(source, CREDIT_COLUMNS, "service_credit")
    credits = {}
    for _, row in df.iterrows():
        officer_id = str(row["officer_id"]).strip()
        raw = str(row["service_credit"]).strip()
        if officer_id and raw:
            credits[officer_id] = _safe_float(raw)
    return credits


def load_roster_directory(path: Union[str, Path]) -> InMemoryRosterSource:
    """
    Load a directory of roster CSVs.

    Expected files: officers.csv, recurring.csv, exceptions.csv, staffing.csv
    and optionally service_credit.csv. Missing optional files are empty.

    Raises:
        RosterSourceError: if the directory or officers.csv is missing
    """
    root = Path(path)
    if not root.is_dir():
        raise RosterSourceError(f"Roster directory not found: {root}")
    if not (root / "officers.csv").exists():
        raise RosterSourceError(f"officers.csv not found in {root}")

    def optional(name: str, loader: Callable[[Source], Iterable]) -> list:
        file = root / name
        if not file.exists():
            logger.info(f"{name} not found in {root}; treating as empty")
            return []
        return list(loader(file))

    credits_file = root / "service_credit.csv"
    source = InMemoryRosterSource(
        officers=load_officers(root / "officers.csv"),
        recurring=optional("recurring.csv", load_recurring),
        exceptions=optional("exceptions.csv", load_exceptions),
        requirements=optional("staffing.csv", load_requirements),
        service_credits=load_service_credits(credits_file) if credits_file.exists() else None,
    )
    logger.info(f"Loaded {source!r} from {root}")
    return source
