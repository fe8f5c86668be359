from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""Project plan tree models: Phase -> SubPhase -> Task.

Nodes are built fresh for every import and handed to the persistence layer
as a whole. Ids are uuid4 strings generated client side so that foreign keys
(phaseId / subPhaseId) can be resolved from the in-memory tree before any
row is written.
"""

__all__ = [
    "TaskStatus",
    "TaskPriority",
    "Task",
    "SubPhase",
    "Phase",
    "ParseStats",
    "ProjectPlan",
    "new_node_id",
]


def new_node_id() -> str:
    return str(uuid.uuid4())


class TaskStatus(Enum):
    """Closed task status set shared with the task board.

    - TODO: not started (also the fallback for unknown / empty text)
    - IN_PROGRESS: work started
    - REVIEW: awaiting review
    - DONE: completed
    """
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    DONE = "DONE"


class TaskPriority(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


@dataclass
class Task:
    title: str
    sub_phase_id: str
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    description: str = ""
    assignee_name_raw: str | None = None  # 表の担当者欄そのまま
    resolved_assignee_id: str | None = None
    number: str | None = None  # hierarchy id text, e.g. "1.2.3"
    dependency: str | None = None
    week: str | None = None
    id: str = field(default_factory=new_node_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "assigneeNameRaw": self.assignee_name_raw,
            "resolvedAssigneeId": self.resolved_assignee_id,
            "subPhaseId": self.sub_phase_id,
            "number": self.number,
            "dependency": self.dependency,
            "week": self.week,
        }


@dataclass
class SubPhase:
    title: str
    order: float  # "N.M" encoded as float
    phase_id: str
    number: str
    synthesized: bool = False  # placeholder created for a task whose "N.M" row is missing
    tasks: list[Task] = field(default_factory=list)
    id: str = field(default_factory=new_node_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "order": self.order,
            "phaseId": self.phase_id,
            "tasks": [t.to_dict() for t in self.tasks],
        }


@dataclass
class Phase:
    title: str
    order: int
    number: str
    synthesized: bool = False
    project_id: str | None = None  # attached right before persistence
    sub_phases: list[SubPhase] = field(default_factory=list)
    id: str = field(default_factory=new_node_id)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "order": self.order,
            "subPhases": [sp.to_dict() for sp in self.sub_phases],
        }
        if self.project_id is not None:
            data["projectId"] = self.project_id
        return data


@dataclass(frozen=True)
class ParseStats:
    """Aggregate counters for one parse run.

    skipped_rows: rows without a hierarchy id or task name
    dropped_rows: rows whose id does not match the numbering grammar
    """
    total_rows: int  # normalized (non-blank) data rows
    header_row_index: int  # 0-based grid index of the detected header row
    skipped_rows: int
    dropped_rows: int
    phases: int
    sub_phases: int
    tasks: int
    synthesized_phases: int = 0
    synthesized_sub_phases: int = 0


@dataclass
class ProjectPlan:
    phases: list[Phase]
    stats: ParseStats

    def iter_tasks(self):
        for phase in self.phases:
            for sub_phase in phase.sub_phases:
                yield from sub_phase.tasks

    def attach_project(self, project_id: str) -> None:
        for phase in self.phases:
            phase.project_id = project_id

    def to_dict(self) -> dict[str, Any]:
        return {"phases": [p.to_dict() for p in self.phases]}
