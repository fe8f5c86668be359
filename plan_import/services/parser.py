from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import BinaryIO

from ..config.loader import ImporterSettings
from ..excel.columns import resolve_roles
from ..excel.header import FixedHeaderDetector, HeaderDetector, KeywordHeaderDetector
from ..excel.reader import ParseError, load_sheet, normalize_rows
from ..models.plan import ParseStats, ProjectPlan
from .hierarchy import build_hierarchy

"""Workbook -> ProjectPlan.

parse() is the importer's single synchronous entry point:

    load_sheet -> header detection -> column resolution -> normalize_rows
    -> build_hierarchy

It performs no persistence and no directory lookups.
"""

__all__ = [
    "parse",
    "default_header_detector",
]

logger = logging.getLogger(__name__)


def default_header_detector(settings: ImporterSettings) -> HeaderDetector:
    if settings.header_row is not None:
        return FixedHeaderDetector(settings.header_row)
    return KeywordHeaderDetector(settings.header_keywords, settings.header_scan_rows)


def parse(
    buffer: bytes | bytearray | BinaryIO,
    *,
    header_detector: HeaderDetector | None = None,
    column_map: Mapping[str, str] | None = None,
    settings: ImporterSettings | None = None,
) -> ProjectPlan:
    """Parse a plan workbook into a Phase/SubPhase/Task tree.

    Args:
        buffer: workbook bytes (first worksheet is used)
        header_detector: overrides the settings-derived detector
        column_map: explicit role -> header label map; roles named here skip
            heuristic matching (merged over settings.column_map)
        settings: importer settings, defaults when omitted

    Raises:
        ParseError: unreadable workbook, no header labels, or no data rows
    """
    settings = settings or ImporterSettings()
    detector = header_detector or default_header_detector(settings)

    grid = load_sheet(buffer)
    try:
        detection = detector.detect(grid)
        logger.debug("header row=%d labels=%s", detection.row_index, list(detection.headers.values()))
        rows = normalize_rows(grid, detection, null_sentinels=settings.null_sentinels)

        overrides: dict[str, str] = dict(settings.column_map or {})
        if column_map:
            overrides.update(column_map)
        roles = resolve_roles(detection.headers.values(), settings.column_patterns, overrides or None)

        build = build_hierarchy(rows, roles)
    except ParseError:
        raise
    except Exception as e:
        raise ParseError(f"Failed to parse Excel file: {e}") from e

    stats = ParseStats(
        total_rows=len(rows),
        header_row_index=detection.row_index,
        skipped_rows=build.skipped_rows,
        dropped_rows=build.dropped_rows,
        phases=len(build.phases),
        sub_phases=build.sub_phase_count,
        tasks=build.task_count,
        synthesized_phases=build.synthesized_phases,
        synthesized_sub_phases=build.synthesized_sub_phases,
    )
    logger.info(
        "parsed plan phases=%d subphases=%d tasks=%d skipped_rows=%d dropped_rows=%d",
        stats.phases,
        stats.sub_phases,
        stats.tasks,
        stats.skipped_rows,
        stats.dropped_rows,
    )
    return ProjectPlan(phases=build.phases, stats=stats)
