from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, BinaryIO

from ..config.loader import ImporterSettings
from ..db.plan_writer import PersistenceError, PgPlanWriter, PlanWriter, project_exists
from ..excel.header import HeaderDetector
from ..excel.reader import ParseError
from ..logging.error_log import ErrorLogBuffer
from ..logging.init import log_summary
from ..models.error_record import ImportErrorRecord
from ..models.import_result import ImportResult, PlanCounts
from .assignee import AssigneeResolver, ConsultantDirectory, PgConsultantDirectory
from .parser import parse
from .summary import render_summary_line

"""Import orchestration: workbook bytes -> persisted project plan.

Flow:
1. validate the request (project id present, project exists when a cursor is given)
2. parse the workbook into a plan tree
3. resolve assignees against the consultant directory
4. attach the project id and hand the tree to the transactional writer
5. log the SUMMARY line and return aggregate counts

ParseError and PersistenceError are recorded in the error log and re-raised
unchanged; row level problems only show up as counters.
"""

__all__ = [
    "ImportRequestError",
    "import_project_plan",
]

logger = logging.getLogger(__name__)


class ImportRequestError(Exception):
    """Invalid import request (missing / unknown project)."""


def _record_failure(
    error_log: ErrorLogBuffer, file_name: str, project_id: str, error_type: str, message: str
) -> None:
    error_log.append(
        ImportErrorRecord.create(
            file=file_name,
            project_id=project_id,
            row=-1,
            error_type=error_type,
            message=message,
        )
    )
    try:
        error_log.flush()
    except OSError:
        # ログ書き込み失敗で元の例外を隠さない
        logger.warning("failed to flush error log", exc_info=True)


def import_project_plan(
    buffer: bytes | bytearray | BinaryIO,
    project_id: str,
    *,
    cursor: Any = None,
    directory: ConsultantDirectory | None = None,
    writer: PlanWriter | None = None,
    created_by_id: str | None = None,
    settings: ImporterSettings | None = None,
    header_detector: HeaderDetector | None = None,
    column_map: Mapping[str, str] | None = None,
    file_name: str = "<buffer>",
    error_log: ErrorLogBuffer | None = None,
) -> ImportResult:
    """Parse ``buffer`` and create the plan under ``project_id``.

    Args:
        buffer: uploaded workbook bytes
        project_id: target project
        cursor: psycopg2 cursor; when given, the project is checked and the
            PostgreSQL directory / writer are used unless overridden
        directory: consultant directory for assignee lookups
        writer: transactional plan writer; without writer and cursor the
            import runs dry (nothing persisted, counts still reported)
        created_by_id: user recorded as task creator

    Raises:
        ImportRequestError: missing project id or unknown project
        ParseError: the workbook could not be turned into a plan
        PersistenceError: the write failed and was rolled back
    """
    start_time = datetime.now(UTC)
    if error_log is None:
        error_log = ErrorLogBuffer()

    if not project_id:
        raise ImportRequestError("Please provide a project ID")

    if cursor is not None:
        if writer is None:
            writer = PgPlanWriter(cursor)
        if directory is None:
            directory = PgConsultantDirectory(cursor)
        if not project_exists(cursor, project_id):
            raise ImportRequestError(f"Project not found: {project_id}")

    try:
        plan = parse(buffer, header_detector=header_detector, column_map=column_map, settings=settings)
    except ParseError as e:
        logger.error("parse failed file=%s: %s", file_name, e)
        _record_failure(error_log, file_name, project_id, "PARSE_ERROR", str(e))
        raise

    if directory is not None:
        unresolved = AssigneeResolver(directory).resolve_tasks(plan.phases)
    else:
        unresolved = sum(1 for t in plan.iter_tasks() if t.assignee_name_raw)

    plan.attach_project(project_id)

    if writer is not None:
        try:
            counts = writer.create_project_plan(project_id, plan.phases, created_by_id=created_by_id)
        except PersistenceError as e:
            logger.error("import failed project=%s: %s", project_id, e)
            _record_failure(error_log, file_name, project_id, "PERSISTENCE_ERROR", str(e))
            raise
        persisted = True
    else:
        counts = PlanCounts(
            phases=plan.stats.phases,
            sub_phases=plan.stats.sub_phases,
            tasks=plan.stats.tasks,
        )
        persisted = False

    end_time = datetime.now(UTC)
    result = ImportResult(
        project_id=project_id,
        phases=counts.phases,
        sub_phases=counts.sub_phases,
        tasks=counts.tasks,
        skipped_rows=plan.stats.skipped_rows,
        dropped_rows=plan.stats.dropped_rows,
        unresolved_assignees=unresolved,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        persisted=persisted,
    )
    # log_summary が "SUMMARY " を付与するので先頭ラベルを外す
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    return result
