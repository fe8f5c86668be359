from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Protocol

from ..models.plan import Phase

"""Best-effort assignee resolution.

The ownership column holds free text ("John", "J. Doe", "jdoe@corp"). We look
for any consultant whose first name, last name or user email contains the text
(case-insensitive) and take the first hit. No ranking: short or common
fragments can resolve to the wrong person, and no match just leaves the task
unassigned.
"""

__all__ = [
    "DirectoryMatch",
    "ConsultantDirectory",
    "PgConsultantDirectory",
    "AssigneeResolver",
]

logger = logging.getLogger(__name__)

_LOOKUP_SQL = (
    'SELECT u."id" FROM "ConsultantProfile" c '
    'JOIN "User" u ON u."id" = c."userId" '
    'WHERE c."contactFirstName" ILIKE %s OR c."contactLastName" ILIKE %s OR u."email" ILIKE %s '
    "LIMIT 1"
)


@dataclass(frozen=True)
class DirectoryMatch:
    user_id: str


class ConsultantDirectory(Protocol):
    def lookup_by_name_fragment(self, text: str) -> DirectoryMatch | None: ...


def _like_pattern(text: str) -> str:
    # LIKE のメタ文字はリテラル扱い
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class PgConsultantDirectory:
    """Consultant lookup over the application's PostgreSQL schema (psycopg2 cursor)."""

    def __init__(self, cursor: Any) -> None:
        self.cursor = cursor

    def lookup_by_name_fragment(self, text: str) -> DirectoryMatch | None:
        pattern = _like_pattern(text)
        self.cursor.execute(_LOOKUP_SQL, (pattern, pattern, pattern))
        row = self.cursor.fetchone()
        if not row:
            return None
        return DirectoryMatch(user_id=str(row[0]))


class AssigneeResolver:
    """Resolve raw owner names against a ConsultantDirectory.

    Lookups are memoized for the lifetime of the resolver, which is one import.
    Directory errors propagate; only "no match" is absorbed.
    """

    def __init__(self, directory: ConsultantDirectory) -> None:
        self.directory = directory
        self._cache: dict[str, str | None] = {}

    def resolve(self, raw_name: str | None) -> str | None:
        if raw_name is None:
            return None
        text = str(raw_name).strip()
        if not text:
            return None
        key = text.lower()
        if key not in self._cache:
            match = self.directory.lookup_by_name_fragment(text)
            self._cache[key] = match.user_id if match else None
            if match is None:
                logger.debug("assignee unresolved: %r", text)
        return self._cache[key]

    def resolve_tasks(self, phases: Iterable[Phase]) -> int:
        """Fill Task.resolved_assignee_id in place; return the unresolved count.

        Tasks without any owner text are not counted as unresolved.
        """
        unresolved = 0
        for phase in phases:
            for sub_phase in phase.sub_phases:
                for task in sub_phase.tasks:
                    if not task.assignee_name_raw:
                        continue
                    task.resolved_assignee_id = self.resolve(task.assignee_name_raw)
                    if task.resolved_assignee_id is None:
                        unresolved += 1
        return unresolved
