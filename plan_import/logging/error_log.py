from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from plan_import.models.error_record import ImportErrorRecord

"""Error log buffering.

Terminal import failures are buffered as ImportErrorRecord and flushed as
JSON Lines to ``logs/import-errors-YYYYMMDD-HHMMSS.log`` (UTC). The file is
created lazily, so runs without errors leave nothing behind.
"""

__all__ = [
    "ImportErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for error records. flush() appends JSON Lines.

    Not thread safe; one buffer per import call.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ImportErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"import-errors-{stamp}.log"
        return self._file_path

    def append(self, record: ImportErrorRecord) -> None:
        self._records.append(record)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
