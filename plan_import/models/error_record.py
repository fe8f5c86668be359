from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ImportErrorRecord model for structured error logging.

One JSON Lines record per terminal import failure (parse or persistence).
row=-1 is the sentinel for file-level errors where no single row applies.
"""

__all__ = [
    "ImportErrorRecord",
]


@dataclass(frozen=True)
class ImportErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Uploaded workbook name (or "<buffer>" when unnamed)
        project_id: Target project id
        row: Worksheet row number (1-based). -1 for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Error description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    project_id: str
    row: int  # 行番号。不明な場合 -1
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, project_id: str, row: int, error_type: str, message: str) -> ImportErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ImportErrorRecord(
            timestamp=ts,
            file=file,
            project_id=project_id,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
