from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""RowData model for the project-plan importer.

RowData represents a single worksheet row after header detection and
normalization: header label -> cell value, absent cells omitted.
"""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """Logical representation of a single row after normalization.

    The row_number refers to the original worksheet row (1-based), so the
    header row itself is never a RowData and the first data row is
    header_row_index + 2.
    """
    row_number: int  # 1-based worksheet row
    values: dict[str, Any]  # header label -> value (None / blank cells omitted)

    def get(self, label: str, default: Any = None) -> Any:
        return self.values.get(label, default)
