"""Domain models for the project-plan importer.

This package contains the data classes used throughout the importer: the
normalized row, the hierarchy id variants, the Phase/SubPhase/Task tree and
the result / error records.
"""

from .hierarchy_id import (
    HierarchyId,
    PhaseId,
    SubPhaseId,
    TaskId,
    Unrecognized,
    classify_hierarchy_id,
)
from .import_result import ImportResult, PlanCounts
from .plan import ParseStats, Phase, ProjectPlan, SubPhase, Task, TaskPriority, TaskStatus
from .row_data import RowData

__all__ = [
    # Row / id models
    "RowData",
    "HierarchyId",
    "PhaseId",
    "SubPhaseId",
    "TaskId",
    "Unrecognized",
    "classify_hierarchy_id",
    # Plan tree
    "Phase",
    "SubPhase",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "ProjectPlan",
    "ParseStats",
    # Results
    "PlanCounts",
    "ImportResult",
]
