from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import psycopg2
from dotenv import load_dotenv

from ..config.loader import DatabaseConfig

"""PostgreSQL connection helper.

DSN resolution order:
    1. DATABASE_URL / PGDSN (after loading .env, which overrides the process env)
    2. ``database.dsn`` from the settings file
    3. PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE, each falling back
       to the matching ``database`` setting
"""

__all__ = [
    "resolve_dsn",
    "connect",
    "load_env_file",
]

logger = logging.getLogger(__name__)


def load_env_file(path: Path = Path(".env"), override: bool = True) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def resolve_dsn(db_cfg: DatabaseConfig) -> str:
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if dsn:
        return dsn
    host = os.getenv("PGHOST", db_cfg.host or "localhost")
    port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
    user = os.getenv("PGUSER", db_cfg.user or "postgres")
    password = os.getenv("PGPASSWORD", db_cfg.password or "")
    database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
    dsn = f"host={host} port={port} user={user} dbname={database}"
    if password:
        dsn += f" password={password}"
    return dsn


@contextmanager
def connect(db_cfg: DatabaseConfig | None = None, env_file: Path | None = Path(".env")) -> Iterator[Any]:
    """Yield a psycopg2 cursor.

    The connection runs in autocommit mode so that the explicit BEGIN / COMMIT /
    ROLLBACK issued by the plan writer are the only transaction boundaries.
    """
    if env_file is not None:
        load_env_file(env_file)
    dsn = resolve_dsn(db_cfg or DatabaseConfig())
    conn = psycopg2.connect(dsn)
    conn.autocommit = True
    cur = conn.cursor()
    try:
        yield cur
    finally:
        try:
            cur.close()
        finally:
            conn.close()
