from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any, Protocol

from ..models.import_result import PlanCounts
from ..models.plan import Phase
from .batch_insert import BatchInsertError, BatchMetrics, batch_insert

"""Transactional writer for an imported plan tree.

All Phase, SubPhase and Task rows of one import are written in a single
transaction. Foreign keys come straight from the in-memory tree (node ids are
generated client side), so the three tables are filled parent-first without
any RETURNING round trip. Any failure rolls the whole plan back.

Concurrent imports into the same project are not serialized here; both
transactions simply succeed and produce two trees.
"""

__all__ = [
    "PersistenceError",
    "PlanWriter",
    "PgPlanWriter",
    "project_exists",
]

logger = logging.getLogger(__name__)

PHASE_TABLE = '"Phase"'
SUB_PHASE_TABLE = '"SubPhase"'
TASK_TABLE = '"Task"'

PHASE_COLUMNS = ["id", "title", "order", "projectId", "createdAt", "updatedAt"]
SUB_PHASE_COLUMNS = ["id", "title", "order", "phaseId", "createdAt", "updatedAt"]
TASK_COLUMNS = [
    "id",
    "title",
    "description",
    "status",
    "priority",
    "projectId",
    "subPhaseId",
    "assigneeId",
    "createdById",
    "createdAt",
    "updatedAt",
]


class PersistenceError(Exception):
    """Raised when the plan could not be written; nothing was committed."""


class PlanWriter(Protocol):
    def create_project_plan(
        self, project_id: str, phases: Sequence[Phase], created_by_id: str | None = None
    ) -> PlanCounts: ...


def project_exists(cursor: Any, project_id: str) -> bool:
    cursor.execute('SELECT 1 FROM "Project" WHERE "id" = %s', (project_id,))
    return cursor.fetchone() is not None


def _log_batch(metrics: BatchMetrics) -> None:
    logger.debug(
        "insert %s rows=%d elapsed_sec=%.3f", metrics.table, metrics.batch_size, metrics.elapsed_seconds
    )


class PgPlanWriter:
    """PlanWriter over a psycopg2 cursor (autocommit connection, see db.connection)."""

    def __init__(self, cursor: Any, page_size: int = 1000) -> None:
        self.cursor = cursor
        self.page_size = page_size

    def _rows(
        self, project_id: str, phases: Sequence[Phase], created_by_id: str | None
    ) -> tuple[list[tuple[Any, ...]], list[tuple[Any, ...]], list[tuple[Any, ...]]]:
        now = datetime.now(UTC)
        phase_rows: list[tuple[Any, ...]] = []
        sub_phase_rows: list[tuple[Any, ...]] = []
        task_rows: list[tuple[Any, ...]] = []
        for phase in phases:
            phase_rows.append((phase.id, phase.title, phase.order, project_id, now, now))
            for sp in phase.sub_phases:
                sub_phase_rows.append((sp.id, sp.title, sp.order, phase.id, now, now))
                for task in sp.tasks:
                    task_rows.append(
                        (
                            task.id,
                            task.title,
                            task.description,
                            task.status.value,
                            task.priority.value,
                            project_id,
                            sp.id,
                            task.resolved_assignee_id,
                            created_by_id,
                            now,
                            now,
                        )
                    )
        return phase_rows, sub_phase_rows, task_rows

    def create_project_plan(
        self, project_id: str, phases: Sequence[Phase], created_by_id: str | None = None
    ) -> PlanCounts:
        phase_rows, sub_phase_rows, task_rows = self._rows(project_id, phases, created_by_id)
        cur = self.cursor
        try:
            cur.execute("BEGIN")
        except Exception as e:
            raise PersistenceError(f"failed to begin transaction: {e}") from e

        try:
            # 親 -> 子 の順で挿入 (FK 制約)
            for table, columns, rows in (
                (PHASE_TABLE, PHASE_COLUMNS, phase_rows),
                (SUB_PHASE_TABLE, SUB_PHASE_COLUMNS, sub_phase_rows),
                (TASK_TABLE, TASK_COLUMNS, task_rows),
            ):
                batch_insert(cur, table, columns, rows, page_size=self.page_size, metrics_callback=_log_batch)
            cur.execute("COMMIT")
        except Exception as e:
            try:
                cur.execute("ROLLBACK")
            except Exception:
                # the original error is the one worth reporting
                logger.warning("rollback failed after plan write error", exc_info=True)
            if isinstance(e, BatchInsertError):
                raise PersistenceError(str(e)) from e
            raise PersistenceError(f"plan write failed: {e}") from e

        logger.debug(
            "plan committed project=%s phases=%d subphases=%d tasks=%d",
            project_id,
            len(phase_rows),
            len(sub_phase_rows),
            len(task_rows),
        )
        return PlanCounts(phases=len(phase_rows), sub_phases=len(sub_phase_rows), tasks=len(task_rows))
