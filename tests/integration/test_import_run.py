from __future__ import annotations

import json
import re
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from plan_import import import_project_plan
from plan_import.db.plan_writer import PersistenceError
from plan_import.logging.init import setup_logging
from scripts.gen_sample_plan import generate_plan_rows


@pytest.fixture()
def inserted(monkeypatch):
    """Capture execute_values calls as {table: rows}."""
    import plan_import.db.batch_insert as bi

    captured: dict[str, list[tuple]] = {}

    def fake_execute_values(cursor, sql, rows, page_size=1000):
        captured.setdefault(sql.split()[2], []).extend(rows)

    monkeypatch.setattr(bi, "execute_values", fake_execute_values)
    return captured


def _cursor(project_found: bool = True, assignee_id: str | None = "user-1") -> MagicMock:
    cursor = MagicMock()

    def fetchone():
        sql = cursor.execute.call_args.args[0]
        if '"Project"' in sql:
            return (1,) if project_found else None
        return (assignee_id,) if assignee_id else None

    cursor.fetchone.side_effect = fetchone
    return cursor


def _executed(cursor: MagicMock) -> list[str]:
    return [c.args[0] for c in cursor.execute.call_args_list]


def test_live_import_over_cursor(scenario_a_workbook, inserted, temp_workdir: Path, capsys):
    setup_logging()
    cursor = _cursor()
    result = import_project_plan(scenario_a_workbook, "proj-1", cursor=cursor, created_by_id="admin-1")

    assert (result.phases, result.sub_phases, result.tasks) == (1, 1, 1)
    assert result.unresolved_assignees == 0
    assert result.persisted

    statements = _executed(cursor)
    assert statements[0].startswith('SELECT 1 FROM "Project"')
    # execute_values is patched, so the transaction shows up as BEGIN/COMMIT only
    assert statements[-2:] == ["BEGIN", "COMMIT"]

    (task_row,) = inserted['"Task"']
    (sp_row,) = inserted['"SubPhase"']
    (phase_row,) = inserted['"Phase"']
    assert phase_row[3] == "proj-1"
    assert sp_row[3] == phase_row[0]
    assert task_row[6] == sp_row[0]
    assert task_row[7] == "user-1"
    assert task_row[8] == "admin-1"

    out = capsys.readouterr().out
    assert re.search(r"^SUMMARY project=proj-1 phases=1 subphases=1 tasks=1 .* mode=live", out, re.M)
    # no error log on success
    assert list((temp_workdir / "logs").iterdir()) == []


def test_assignee_lookup_runs_once_per_name(make_workbook, inserted, temp_workdir: Path):
    rows = [
        ["ID", "Task Name", "Task Ownership", "Status"],
        ["1.1.1", "A", "John Doe", None],
        ["1.1.2", "B", "john doe", None],
        ["1.1.3", "C", "Ghost", None],
    ]
    cursor = _cursor(assignee_id=None)
    result = import_project_plan(make_workbook(rows), "proj-1", cursor=cursor)
    lookups = [s for s in _executed(cursor) if '"ConsultantProfile"' in s]
    assert len(lookups) == 2
    assert result.unresolved_assignees == 3
    assert [r[7] for r in inserted['"Task"']] == [None, None, None]


def test_generated_plan_live_import(make_workbook, inserted, temp_workdir: Path):
    rows = generate_plan_rows(phases=4, sub_phases=3, tasks=5, seed=1)
    result = import_project_plan(make_workbook(rows), "proj-9", cursor=_cursor())
    assert (result.phases, result.sub_phases, result.tasks) == (4, 12, 60)
    assert len(inserted['"Phase"']) == 4
    assert len(inserted['"SubPhase"']) == 12
    assert len(inserted['"Task"']) == 60


def test_persistence_failure_rolls_back_and_logs(scenario_a_workbook, monkeypatch, temp_workdir: Path, capsys):
    import plan_import.db.batch_insert as bi

    def fake_execute_values(cursor, sql, rows, page_size=1000):
        if '"Task"' in sql:
            raise RuntimeError('insert or update on table "Task" violates foreign key constraint')

    monkeypatch.setattr(bi, "execute_values", fake_execute_values)
    setup_logging()
    cursor = _cursor()

    with pytest.raises(PersistenceError, match="foreign key"):
        import_project_plan(scenario_a_workbook, "proj-1", cursor=cursor, file_name="plan.xlsx")

    statements = _executed(cursor)
    assert statements[-1] == "ROLLBACK"
    assert "COMMIT" not in statements

    (log_file,) = (temp_workdir / "logs").glob("import-errors-*.log")
    rec = json.loads(log_file.read_text(encoding="utf-8").strip())
    assert rec["error_type"] == "PERSISTENCE_ERROR"
    assert rec["file"] == "plan.xlsx"
    assert rec["project_id"] == "proj-1"

    out = capsys.readouterr().out
    assert "ERROR import failed project=proj-1" in out
    assert "SUMMARY" not in out


def test_unknown_project_writes_nothing(scenario_a_workbook, inserted, temp_workdir: Path):
    from plan_import import ImportRequestError

    cursor = _cursor(project_found=False)
    with pytest.raises(ImportRequestError, match="Project not found"):
        import_project_plan(scenario_a_workbook, "missing", cursor=cursor)
    assert "BEGIN" not in _executed(cursor)
    assert inserted == {}
