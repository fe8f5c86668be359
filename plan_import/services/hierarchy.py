from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..excel.columns import ColumnRoles
from ..models.hierarchy_id import PhaseId, SubPhaseId, TaskId, Unrecognized, classify_hierarchy_id
from ..models.plan import Phase, SubPhase, Task
from ..models.row_data import RowData
from .status import infer_priority, normalize_status

"""Phase / SubPhase / Task tree assembly.

Rows are consumed in worksheet order and classified by their hierarchy id:

- "N"      -> a new Phase every time (duplicate ids give sibling phases)
- "N.M"    -> a new SubPhase under the latest Phase "N"
- "N.M.K…" -> a Task under the latest SubPhase "N.M"

Ancestors referenced by a child but never present in the sheet are
synthesized with placeholder titles. Rows without id / task name are skipped,
rows whose id is outside the numbering grammar are dropped; both are only
counted. No final sort: output order is discovery order.
"""

__all__ = [
    "HierarchyBuild",
    "build_hierarchy",
]

logger = logging.getLogger(__name__)


@dataclass
class HierarchyBuild:
    phases: list[Phase] = field(default_factory=list)
    skipped_rows: int = 0
    dropped_rows: int = 0
    synthesized_phases: int = 0
    synthesized_sub_phases: int = 0

    @property
    def sub_phase_count(self) -> int:
        return sum(len(p.sub_phases) for p in self.phases)

    @property
    def task_count(self) -> int:
        return sum(len(sp.tasks) for p in self.phases for sp in p.sub_phases)


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _phase_order(number: str) -> int | None:
    try:
        return int(number)
    except ValueError:
        # sys.int_info.default_max_str_digits を超える桁数
        return None


def build_hierarchy(rows: Iterable[RowData], roles: ColumnRoles) -> HierarchyBuild:
    """Assemble the plan tree from normalized rows.

    The number -> node maps are local to this call and discarded afterwards;
    a later duplicate id overwrites the map entry so that following children
    attach to the most recent node.
    """
    result = HierarchyBuild()
    phase_by_number: dict[str, Phase] = {}
    sub_phase_by_number: dict[str, SubPhase] = {}

    def ensure_phase(number: str) -> Phase:
        phase = phase_by_number.get(number)
        if phase is None:
            phase = Phase(title=f"{number}. Phase", order=int(number), number=number, synthesized=True)
            result.phases.append(phase)
            phase_by_number[number] = phase
            result.synthesized_phases += 1
            logger.debug("synthesized placeholder phase %s", number)
        return phase

    def ensure_sub_phase(phase_number: str, number: str) -> SubPhase:
        sub_phase = sub_phase_by_number.get(number)
        if sub_phase is None:
            phase = ensure_phase(phase_number)
            sub_phase = SubPhase(
                title=f"{number}. Subphase",
                order=float(number),
                phase_id=phase.id,
                number=number,
                synthesized=True,
            )
            phase.sub_phases.append(sub_phase)
            sub_phase_by_number[number] = sub_phase
            result.synthesized_sub_phases += 1
            logger.debug("synthesized placeholder subphase %s", number)
        return sub_phase

    for row in rows:
        raw_id = row.get(roles.hierarchy_id)
        task_name = _text(row.get(roles.task_name))
        if raw_id is None or task_name is None:
            result.skipped_rows += 1
            logger.debug("row=%d skipped: missing id or task name", row.row_number)
            continue

        hid = classify_hierarchy_id(raw_id)
        if isinstance(hid, PhaseId):
            phase_number = hid.number
        elif isinstance(hid, (SubPhaseId, TaskId)):
            phase_number = hid.phase_number
        else:
            phase_number = None
        if phase_number is not None and _phase_order(phase_number) is None:
            hid = Unrecognized(raw=raw_id)

        if isinstance(hid, PhaseId):
            phase = Phase(title=f"{hid.number}. {task_name}", order=int(hid.number), number=hid.number)
            result.phases.append(phase)
            phase_by_number[hid.number] = phase
        elif isinstance(hid, SubPhaseId):
            phase = ensure_phase(hid.phase_number)
            sub_phase = SubPhase(
                title=f"{hid.number}. {task_name}",
                order=float(hid.number),
                phase_id=phase.id,
                number=hid.number,
            )
            phase.sub_phases.append(sub_phase)
            sub_phase_by_number[hid.number] = sub_phase
        elif isinstance(hid, TaskId):
            sub_phase = ensure_sub_phase(hid.phase_number, hid.sub_phase_number)
            status = normalize_status(row.get(roles.status))
            sub_phase.tasks.append(
                Task(
                    title=task_name,
                    sub_phase_id=sub_phase.id,
                    status=status,
                    priority=infer_priority(status),
                    description=_text(row.get(roles.description)) or "",
                    assignee_name_raw=_text(row.get(roles.assignee)),
                    number=hid.number,
                    dependency=_text(row.get(roles.dependency)),
                    week=_text(row.get(roles.week)),
                )
            )
        else:
            result.dropped_rows += 1
            logger.debug("row=%d dropped: unrecognized id %r", row.row_number, hid.raw)

    return result
