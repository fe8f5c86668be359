from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Union

import numpy as np

"""Hierarchy id classifier.

Spreadsheet ids follow the grammar ``Int ("." Int)*``. The segment count
decides the node kind:

    "3"       -> PhaseId
    "3.2"     -> SubPhaseId
    "3.2.1"   -> TaskId      (deeper ids such as "3.2.1.4" are tasks of "3.2")
    anything else -> Unrecognized

Classification is total: it never raises and is independent of tree assembly.
"""

__all__ = [
    "PhaseId",
    "SubPhaseId",
    "TaskId",
    "Unrecognized",
    "HierarchyId",
    "classify_hierarchy_id",
    "hierarchy_id_text",
]

HIERARCHY_ID_PATTERN = re.compile(r"^[0-9]+(\.[0-9]+)*$")


@dataclass(frozen=True)
class PhaseId:
    number: str  # "3"

    @property
    def text(self) -> str:
        return self.number


@dataclass(frozen=True)
class SubPhaseId:
    phase_number: str  # "3"
    number: str  # "3.2"

    @property
    def text(self) -> str:
        return self.number


@dataclass(frozen=True)
class TaskId:
    phase_number: str  # "3"
    sub_phase_number: str  # "3.2"
    number: str  # "3.2.1" (or deeper)

    @property
    def text(self) -> str:
        return self.number


@dataclass(frozen=True)
class Unrecognized:
    raw: Any


HierarchyId = Union[PhaseId, SubPhaseId, TaskId, Unrecognized]


def hierarchy_id_text(value: Any) -> str | None:
    """Convert a raw cell value into hierarchy id text.

    Excel stores ``1`` and ``1.1`` typed as numbers, so pandas hands them over
    as int / float. Integral floats lose their ``.0``; other floats use the
    shortest round-trip repr (``1.1`` -> ``"1.1"``). Note that a numeric
    ``1.10`` cell is indistinguishable from ``1.1`` at this point.
    Returns None for values that cannot carry an id (dates, booleans, NaN).
    """
    if value is None:
        return None
    if isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (float, np.floating)):
        f = float(value)
        if math.isnan(f) or math.isinf(f):
            return None
        if f.is_integer():
            return str(int(f))
        return repr(f)
    if isinstance(value, str):
        return value.strip()
    return None


def classify_hierarchy_id(value: Any) -> HierarchyId:
    text = hierarchy_id_text(value)
    if not text or not HIERARCHY_ID_PATTERN.match(text):
        return Unrecognized(raw=value)
    parts = text.split(".")
    if len(parts) == 1:
        return PhaseId(number=text)
    if len(parts) == 2:
        return SubPhaseId(phase_number=parts[0], number=text)
    # 3 セグメント以上は先頭 2 セグメントが所属サブフェーズ
    return TaskId(
        phase_number=parts[0],
        sub_phase_number=f"{parts[0]}.{parts[1]}",
        number=text,
    )
