# Shared pytest fixtures
from __future__ import annotations

import io
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from plan_import.logging.init import reset_logging
from plan_import.services.assignee import DirectoryMatch

# ヘッダ + 3 行の最小計画 (Scenario A 相当)
SCENARIO_A_ROWS: list[list[Any]] = [
    ["ID", "Task Name", "Task Ownership", "Status"],
    ["1", "Planning", None, None],
    ["1.1", "Kickoff", "John Doe", "Not Started"],
    ["1.1.1", "Draft Charter", "John Doe", "In Progress"],
]


def workbook_bytes(rows: list[list[Any]], sheets: dict[str, list[list[Any]]] | None = None) -> bytes:
    """Create an in-memory .xlsx; ``rows`` go to the first sheet."""
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Plan", header=False, index=False)
        for name, extra in (sheets or {}).items():
            pd.DataFrame(extra).to_excel(writer, sheet_name=name, header=False, index=False)
    return buf.getvalue()


@pytest.fixture()
def make_workbook() -> Callable[..., bytes]:
    return workbook_bytes


@pytest.fixture()
def scenario_a_workbook() -> bytes:
    return workbook_bytes(SCENARIO_A_ROWS)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_settings_yaml() -> str:
    return """header:
  keywords: [task, activity, status, ownership]
  scan_rows: 8
column_patterns:
  assignee: [Responsible, Owner]
column_map:
  hierarchy_id: "Ref"
null_sentinels: ["n/a", "-"]
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_settings(temp_workdir: Path, sample_settings_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "plan_import.yml"
    cfg.write_text(sample_settings_yaml, encoding="utf-8")
    return cfg


@pytest.fixture(autouse=True)
def _reset_logging():
    reset_logging()
    yield
    reset_logging()


class FakeDirectory:
    """ConsultantDirectory double.

    Same rule as the SQL lookup: the text must be contained in the first name,
    the last name or the email (case-insensitive), each checked on its own.
    """

    def __init__(self, people: list[tuple[str, str, str, str]] | None = None, fail: bool = False) -> None:
        self.people = people or []  # (first, last, email, user_id)
        self.fail = fail
        self.queries: list[str] = []

    def lookup_by_name_fragment(self, text: str) -> DirectoryMatch | None:
        self.queries.append(text)
        if self.fail:
            raise RuntimeError("directory unavailable")
        needle = text.lower()
        for first, last, email, user_id in self.people:
            if any(needle in field.lower() for field in (first, last, email)):
                return DirectoryMatch(user_id=user_id)
        return None


@pytest.fixture()
def fake_directory() -> FakeDirectory:
    return FakeDirectory(
        [
            ("John", "Doe", "john.doe@example.com", "user-john"),
            ("Jane", "Smith", "jane@example.com", "user-jane"),
        ]
    )


@pytest.fixture()
def directory_factory() -> type[FakeDirectory]:
    return FakeDirectory
