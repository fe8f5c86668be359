from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

"""Column role resolution.

Maps semantic roles (hierarchy id, task name, status, ...) onto whatever header
labels the workbook actually uses. Matching falls through four tiers:

1. exact, case-insensitive
2. substring (header contains the pattern)
3. prefix on the first three characters of patterns with >= 3 characters
4. the first candidate literal

Tier 4 keeps the result deterministic when nothing matches: the returned label
simply finds no values in the rows.
"""

__all__ = [
    "COLUMN_ROLES",
    "DEFAULT_COLUMN_PATTERNS",
    "ColumnRoles",
    "resolve_column",
    "resolve_roles",
]

logger = logging.getLogger(__name__)

COLUMN_ROLES: tuple[str, ...] = (
    "hierarchy_id",
    "task_name",
    "status",
    "assignee",
    "description",
    "dependency",
    "week",
)

# 旧インポータで実際に使われていた列名を優先順に並べる
DEFAULT_COLUMN_PATTERNS: dict[str, tuple[str, ...]] = {
    "hierarchy_id": ("ID", "Task ID", "WBS", "No"),
    "task_name": ("Task Name", "DETAILED PROJECT PLAN", "Activity", "Task"),
    "status": ("Status", "Completed", "State"),
    "assignee": ("Task Ownership", "Ownership", "Owner", "Responsible", "Assignee"),
    "description": ("Deliverables", "Description", "PROJECT NAME", "Details"),
    "dependency": ("Dependency", "Depenedency", "Depends On"),
    "week": ("Week", "Timeline"),
}


@dataclass(frozen=True)
class ColumnRoles:
    """Header label chosen for each role."""
    hierarchy_id: str
    task_name: str
    status: str
    assignee: str
    description: str
    dependency: str
    week: str


def resolve_column(headers: Iterable[str], candidates: Sequence[str]) -> str:
    if not candidates:
        raise ValueError("at least one candidate pattern is required")
    labels = [h for h in headers if h]
    lowered = [(h, h.lower()) for h in labels]

    for pattern in candidates:
        p = pattern.lower()
        for label, low in lowered:
            if low == p:
                return label

    for pattern in candidates:
        p = pattern.lower()
        for label, low in lowered:
            if p in low:
                return label

    for pattern in candidates:
        if len(pattern) < 3:
            continue
        prefix = pattern[:3].lower()
        for label, low in lowered:
            if low.startswith(prefix):
                return label

    return candidates[0]


def resolve_roles(
    headers: Iterable[str],
    patterns: Mapping[str, Sequence[str]] | None = None,
    overrides: Mapping[str, str] | None = None,
) -> ColumnRoles:
    """Resolve every role; ``overrides`` (role -> label) bypass matching."""
    labels = list(headers)
    merged = dict(DEFAULT_COLUMN_PATTERNS)
    if patterns:
        merged.update({k: tuple(v) for k, v in patterns.items()})
    resolved: dict[str, str] = {}
    for role in COLUMN_ROLES:
        if overrides and role in overrides:
            resolved[role] = overrides[role]
        else:
            resolved[role] = resolve_column(labels, merged[role])
    logger.debug("resolved columns: %s", resolved)
    return ColumnRoles(**resolved)
