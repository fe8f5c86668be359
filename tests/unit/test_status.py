from __future__ import annotations

import pytest

from plan_import.models.plan import TaskPriority, TaskStatus
from plan_import.services.status import infer_priority, normalize_status


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Completed", TaskStatus.DONE),
        ("done", TaskStatus.DONE),
        ("complete", TaskStatus.DONE),
        (" COMPLETE ", TaskStatus.DONE),
        ("in-progress", TaskStatus.IN_PROGRESS),
        ("In Progress", TaskStatus.IN_PROGRESS),
        ("inprogress", TaskStatus.IN_PROGRESS),
        ("Under Review", TaskStatus.REVIEW),
        ("To be started", TaskStatus.TODO),
        ("Not Started", TaskStatus.TODO),
        ("", TaskStatus.TODO),
        ("blocked", TaskStatus.TODO),
        (None, TaskStatus.TODO),
    ],
)
def test_normalize_status(raw, expected):
    assert normalize_status(raw) is expected


def test_priority_order_of_checks():
    # IN PROGRESS は REVIEW / DONE より優先
    assert normalize_status("in progress - review pending") is TaskStatus.IN_PROGRESS
    assert normalize_status("review done") is TaskStatus.REVIEW
    # "incomplete" はどのマーカーにも一致しない
    assert normalize_status("incomplete") is TaskStatus.TODO


def test_non_string_status_is_stringified():
    assert normalize_status(100) is TaskStatus.TODO


@pytest.mark.parametrize(
    "status,priority",
    [
        (TaskStatus.DONE, TaskPriority.LOW),
        (TaskStatus.IN_PROGRESS, TaskPriority.HIGH),
        (TaskStatus.REVIEW, TaskPriority.MEDIUM),
        (TaskStatus.TODO, TaskPriority.MEDIUM),
    ],
)
def test_infer_priority(status, priority):
    assert infer_priority(status) is priority
