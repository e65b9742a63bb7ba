# roster/reports - Projections over a resolved schedule
from .coverage import compute_coverage_summary, coverage_table, understaffing_alerts
from .force_list import ForceListEntry, build_force_list
from .frame import resolution_to_dataframe, roster_matrix
from .vacation import VacationBlock, build_vacation_blocks

__all__ = [
    "resolution_to_dataframe",
    "roster_matrix",
    "coverage_table",
    "compute_coverage_summary",
    "understaffing_alerts",
    "build_force_list",
    "ForceListEntry",
    "build_vacation_blocks",
    "VacationBlock",
]
