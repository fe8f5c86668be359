from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Sequence
from typing import Any, BinaryIO

import pandas as pd

from plan_import.excel.header import HeaderDetection
from plan_import.models.row_data import RowData

"""Workbook reader and row normalizer.

load_sheet decodes the first worksheet of an in-memory workbook into a
row-major grid (None for empty cells); normalize_rows turns the rows below the
detected header into label-keyed RowData, dropping blank rows.
"""

__all__ = [
    "ParseError",
    "load_sheet",
    "normalize_rows",
]

logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Raised when the workbook cannot yield a usable plan (terminal)."""


def _to_cell(value: Any) -> Any:
    # pandas は空セルを NaN / NaT で返すので None に揃える
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):  # list-like cells: keep as is
        pass
    return value


def load_sheet(buffer: bytes | bytearray | BinaryIO) -> list[list[Any]]:
    """Read the first worksheet of ``buffer`` as a raw grid.

    Parameters
    ----------
    buffer: workbook bytes (or a binary file object) as received from upload

    Raises
    ------
    ParseError: unreadable / corrupt binary, or a sheet without any rows
    """
    if isinstance(buffer, (bytes, bytearray)):
        if not buffer:
            raise ParseError("Failed to parse Excel file: empty buffer")
        source: BinaryIO = io.BytesIO(bytes(buffer))
    else:
        source = buffer
    try:
        # ヘッダなしで生読み (ヘッダ行は後段で推定)
        df = pd.read_excel(source, sheet_name=0, header=None, dtype=object)
    except Exception as e:
        raise ParseError(f"Failed to parse Excel file: {e}") from e

    grid = [[_to_cell(v) for v in row] for row in df.itertuples(index=False, name=None)]
    if not grid:
        raise ParseError("No data found in Excel sheet")
    logger.debug("loaded sheet rows=%d cols=%d", len(grid), df.shape[1])
    return grid


def normalize_rows(
    rows: Sequence[Sequence[Any]],
    detection: HeaderDetection,
    null_sentinels: Iterable[str] | None = None,
) -> list[RowData]:
    """Build RowData for every row after the header row.

    Cells without a header label and None cells are skipped; strings are
    stripped and blank strings (or configured null sentinels) count as absent.
    Rows that end up empty are dropped.

    Raises
    ------
    ParseError: no header labels, or no data rows after normalization
    """
    if not detection.headers:
        raise ParseError(f"no header row found (row {detection.row_index} has no labels)")
    sentinels = {s.strip().upper() for s in null_sentinels} if null_sentinels else set()

    records: list[RowData] = []
    for offset, raw in enumerate(rows[detection.row_index + 1:]):
        values: dict[str, Any] = {}
        for col, value in enumerate(raw):
            label = detection.headers.get(col)
            if label is None or value is None:
                continue
            if isinstance(value, str):
                value = value.strip()
                if value == "" or value.upper() in sentinels:
                    continue
            # 同名ラベルが複数ある場合は左側の列を優先
            values.setdefault(label, value)
        if not values:
            continue
        row_number = detection.row_index + offset + 2  # 1-based worksheet row
        records.append(RowData(row_number=row_number, values=values))

    if not records:
        raise ParseError("No data found in Excel sheet")
    return records
