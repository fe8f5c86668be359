from __future__ import annotations

import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from psycopg2.extras import execute_values

"""Batched INSERT helper on top of psycopg2.extras.execute_values.

The caller owns the transaction; this module only issues the INSERT and wraps
driver errors in BatchInsertError.
"""


class BatchInsertError(Exception):
    pass


@dataclass(frozen=True)
class BatchMetrics:
    """Timing data for a single batch insert."""
    table: str
    batch_size: int
    elapsed_seconds: float


def batch_insert(
    cursor: Any,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[Any]],
    page_size: int = 1000,
    metrics_callback: Callable[[BatchMetrics], None] | None = None,
) -> int:
    """Insert ``rows`` into ``table`` and return the number of rows sent.

    Parameters
    ----------
    cursor: psycopg2 cursor (inside an open transaction)
    table: target table, already quoted if it needs quoting (e.g. '"Phase"')
    columns: column names; quoted here
    rows: row value sequences in ``columns`` order
    page_size: execute_values page size
    metrics_callback: receives BatchMetrics; not called for empty ``rows``
    """
    rows_list = list(rows)
    if not rows_list:
        return 0

    cols_sql = ",".join(f'"{c}"' for c in columns)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"

    start = time.perf_counter()
    try:
        execute_values(cursor, sql, rows_list, page_size=page_size)
    except Exception as e:
        raise BatchInsertError(f"insert into {table} failed: {e}") from e
    finally:
        if metrics_callback is not None:
            metrics_callback(
                BatchMetrics(
                    table=table,
                    batch_size=len(rows_list),
                    elapsed_seconds=time.perf_counter() - start,
                )
            )
    return len(rows_list)
