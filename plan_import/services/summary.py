from __future__ import annotations

from ..models.import_result import ImportResult

"""SUMMARY line rendering for one import."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for tiny values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line for an ImportResult.

    Format:
    SUMMARY project={id} phases={n} subphases={n} tasks={n} skipped_rows={n}
    dropped_rows={n} unresolved_assignees={n} mode={live|dry} elapsed_sec={s}

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> r = ImportResult(
        ...     project_id="p1", phases=2, sub_phases=3, tasks=10, skipped_rows=1,
        ...     dropped_rows=0, unresolved_assignees=2, start_time=t, end_time=t,
        ...     elapsed_seconds=0.0,
        ... )
        >>> render_summary_line(r)
        'SUMMARY project=p1 phases=2 subphases=3 tasks=10 skipped_rows=1 dropped_rows=0 unresolved_assignees=2 mode=live elapsed_sec=0'
    """
    return (
        f"SUMMARY project={result.project_id} "
        f"phases={result.phases} "
        f"subphases={result.sub_phases} "
        f"tasks={result.tasks} "
        f"skipped_rows={result.skipped_rows} "
        f"dropped_rows={result.dropped_rows} "
        f"unresolved_assignees={result.unresolved_assignees} "
        f"mode={'live' if result.persisted else 'dry'} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
