from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

"""Header row detection.

ISO checklist workbooks usually open with a banner / title block, so the real
header is rarely row 0. KeywordHeaderDetector scores the first rows by keyword
presence and column density; FixedHeaderDetector lets a caller that already
knows the layout skip the heuristic altogether.
"""

__all__ = [
    "DEFAULT_HEADER_KEYWORDS",
    "DEFAULT_SCAN_ROWS",
    "HeaderDetection",
    "HeaderDetector",
    "KeywordHeaderDetector",
    "FixedHeaderDetector",
    "build_header_map",
]

logger = logging.getLogger(__name__)

DEFAULT_HEADER_KEYWORDS: tuple[str, ...] = ("task", "activity", "status", "ownership")
DEFAULT_SCAN_ROWS = 10


@dataclass(frozen=True)
class HeaderDetection:
    row_index: int  # 0-based grid index
    headers: dict[int, str]  # column index -> trimmed label


class HeaderDetector(Protocol):
    def detect(self, rows: Sequence[Sequence[Any]]) -> HeaderDetection: ...


def build_header_map(row: Sequence[Any]) -> dict[int, str]:
    """Column index -> trimmed label for every non-null, non-blank cell."""
    headers: dict[int, str] = {}
    for idx, value in enumerate(row):
        if value is None:
            continue
        label = str(value).strip()
        if label:
            headers[idx] = label
    return headers


def _row_text(row: Sequence[Any]) -> str:
    return " ".join(str(v) for v in row if v is not None).lower()


def _column_count(row: Sequence[Any]) -> int:
    return sum(1 for v in row if v is not None and str(v).strip() != "")


class KeywordHeaderDetector:
    """Pick the densest keyword-bearing row among the first ``scan_rows`` rows.

    score = number of populated columns if the row's joined, lower-cased text
    contains any keyword, else 0. Highest score wins, the first row wins ties,
    and row 0 is used when nothing scores above zero.
    """

    def __init__(
        self,
        keywords: Sequence[str] = DEFAULT_HEADER_KEYWORDS,
        scan_rows: int = DEFAULT_SCAN_ROWS,
    ) -> None:
        self.keywords = tuple(k.lower() for k in keywords)
        self.scan_rows = scan_rows

    def score(self, row: Sequence[Any]) -> int:
        text = _row_text(row)
        if any(k in text for k in self.keywords):
            return _column_count(row)
        return 0

    def detect(self, rows: Sequence[Sequence[Any]]) -> HeaderDetection:
        best_idx = 0
        best_score = 0
        for i in range(min(self.scan_rows, len(rows))):
            score = self.score(rows[i])
            logger.debug("header scan row=%d score=%d", i, score)
            if score > best_score:  # strict: first occurrence wins ties
                best_idx = i
                best_score = score
        if best_score == 0:
            logger.debug("no keyword row found; falling back to row 0")
        headers = build_header_map(rows[best_idx]) if rows else {}
        return HeaderDetection(row_index=best_idx, headers=headers)


class FixedHeaderDetector:
    """Use a known header row index without any scoring."""

    def __init__(self, row_index: int = 0) -> None:
        self.row_index = row_index

    def detect(self, rows: Sequence[Sequence[Any]]) -> HeaderDetection:
        if self.row_index >= len(rows):
            return HeaderDetection(row_index=self.row_index, headers={})
        return HeaderDetection(row_index=self.row_index, headers=build_header_map(rows[self.row_index]))
