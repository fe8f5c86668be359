from __future__ import annotations

from typing import Any

from ..models.plan import TaskPriority, TaskStatus

"""Status normalization and priority inference (pure functions)."""

_IN_PROGRESS_MARKERS = ("IN PROGRESS", "IN-PROGRESS", "INPROGRESS")
_DONE_MARKERS = ("DONE", "COMPLETED")
_TODO_MARKERS = ("TO BE", "NOT STARTED")

_PRIORITY_BY_STATUS = {
    TaskStatus.DONE: TaskPriority.LOW,
    TaskStatus.IN_PROGRESS: TaskPriority.HIGH,
    TaskStatus.REVIEW: TaskPriority.MEDIUM,
    TaskStatus.TODO: TaskPriority.MEDIUM,
}


def normalize_status(raw: Any) -> TaskStatus:
    """Map free-text status to TaskStatus.

    Checks run in priority order; anything unrecognized (including None)
    becomes TODO.

    >>> normalize_status("Completed")
    <TaskStatus.DONE: 'DONE'>
    >>> normalize_status("in-progress")
    <TaskStatus.IN_PROGRESS: 'IN_PROGRESS'>
    >>> normalize_status(None)
    <TaskStatus.TODO: 'TODO'>
    """
    if raw is None:
        return TaskStatus.TODO
    text = str(raw).strip().upper()
    if any(m in text for m in _IN_PROGRESS_MARKERS):
        return TaskStatus.IN_PROGRESS
    if "REVIEW" in text:
        return TaskStatus.REVIEW
    if any(m in text for m in _DONE_MARKERS) or text == "COMPLETE":
        return TaskStatus.DONE
    if any(m in text for m in _TODO_MARKERS):
        return TaskStatus.TODO
    return TaskStatus.TODO


def infer_priority(status: TaskStatus) -> TaskPriority:
    return _PRIORITY_BY_STATUS[status]
