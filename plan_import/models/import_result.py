from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Import result models.

PlanCounts is what the transactional writer reports back; ImportResult is the
aggregate returned to the caller of import_project_plan and rendered as the
SUMMARY line.
"""


@dataclass(frozen=True)
class PlanCounts:
    """Node counts created (or, in dry mode, that would be created)."""
    phases: int
    sub_phases: int
    tasks: int


@dataclass(frozen=True)
class ImportResult:
    """Aggregated outcome of one import invocation.

    Row level conditions (skipped / dropped rows, unresolved assignees) are
    absorbed into counters; no per-row detail is surfaced.
    """
    project_id: str
    phases: int
    sub_phases: int
    tasks: int
    skipped_rows: int  # id or task name missing
    dropped_rows: int  # id outside the numbering grammar
    unresolved_assignees: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    persisted: bool = True  # False in dry mode (no writer / cursor)
