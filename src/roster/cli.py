import argparse
import json
from datetime import date
from typing import List, Optional

from roster.engine.resolver import ScheduleResolution, resolve_schedule
from roster.errors import RosterError
from roster.models.calendar import day_name, parse_date
from roster.models.config import EngineConfig
from roster.reports.coverage import understaffing_alerts
from roster.sources.csv_loader import load_roster_directory
from roster.utils.logging_setup import get_logger, setup_logging
from roster.utils.structured_logging import configure_structlog

logger = get_logger("roster.cli")

LOG_LEVELS = {0: "WARNING", 1: "INFO", 2: "DEBUG"}


def _date_arg(value: str) -> date:
    try:
        parsed = parse_date(value)
    except ValueError:
        parsed = None
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid date (expected YYYY-MM-DD): {value!r}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="roster", description="Resolve a shift roster from CSV data")
    p.add_argument("--data", required=True, help="Directory holding officers.csv, recurring.csv, ...")
    p.add_argument("--shift", required=True, help="Shift id to resolve")
    p.add_argument("--start", required=True, type=_date_arg, help="First date (YYYY-MM-DD)")
    p.add_argument("--end", required=True, type=_date_arg, help="Last date, inclusive (YYYY-MM-DD)")
    p.add_argument("--config", help="Engine configuration (JSON)")
    p.add_argument("--as-of", dest="as_of", type=_date_arg, help="Reference date for seniority")
    p.add_argument("--json", dest="json_out", action="store_true", help="JSON output")
    p.add_argument("--log-file", dest="log_file", default=None, help="Also log to this file")
    p.add_argument("-v", "--verbose", action="count", default=0)
    return p


def resolution_to_json(resolution: ScheduleResolution) -> dict:
    cat = resolution.categorized
    return {
        "shift_id": resolution.shift_id,
        "start": resolution.start.isoformat(),
        "end": resolution.end.isoformat(),
        "roster": {
            "supervisors": [ro.id for ro in cat.supervisors],
            "officers": [ro.id for ro in cat.regular_officers],
            "probationary": [ro.id for ro in cat.probationary],
        },
        "officers": {oid: o.to_dict() for oid, o in resolution.officers.items()},
        "seniority": dict(resolution.seniority),
        "days": [
            {
                "date": d.isoformat(),
                "assignments": [a.to_dict() for a in resolution.per_date[d]],
                "staffing": resolution.staffing_by_date[d].to_dict(),
            }
            for d in resolution.dates
        ],
        "alerts": understaffing_alerts(resolution),
    }


def _print_summary(resolution: ScheduleResolution) -> None:
    print(f"Shift {resolution.shift_id}: {resolution.start} .. {resolution.end}")
    print("Roster:")
    for ro in resolution.categorized.ordered():
        o = ro.officer
        print(f" - {o.rank_abbreviation:<5} {o.name} #{o.badge_number} ({ro.seniority:.1f} yrs)")
    print("Staffing:")
    for d in resolution.dates:
        v = resolution.staffing_by_date[d]
        flag = f"SHORT {v.shortfall_description}" if v.is_understaffed else "ok"
        print(f" - {day_name(v.day_of_week)} {d}: sup {v.current_supervisors}/{v.minimum_supervisors}, "
              f"ofc {v.current_officers}/{v.minimum_officers}, ppo {v.current_probationary} [{flag}]")
    anomalies = resolution.anomalies()
    if anomalies:
        print(f"Anomalies: {len(anomalies)}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(level=LOG_LEVELS.get(args.verbose, "DEBUG"), log_file=args.log_file)
    configure_structlog(json_output=args.json_out)

    if args.end < args.start:
        logger.error(f"--end {args.end} is before --start {args.start}")
        return 2

    try:
        config = EngineConfig.from_file(args.config) if args.config else EngineConfig()
        source = load_roster_directory(args.data)
        resolution = resolve_schedule(source, args.shift, args.start, args.end, config=config, as_of=args.as_of)
    except RosterError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    if args.json_out:
        print(json.dumps(resolution_to_json(resolution), ensure_ascii=False, indent=2))
    else:
        _print_summary(resolution)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
