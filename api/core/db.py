"""
Async database access (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`). Feature stores receive the pool
handle explicitly instead of reaching for it themselves.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import config

_pool: asyncpg.Pool | None = None

logger = logging.getLogger(__name__)


def _sanitize_database_url(url: str) -> str:
    # asyncpg does not understand libpq's sslmode parameter.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    return _sanitize_database_url(config.raw_database_url())


async def init_pool(dsn: str | None = None) -> asyncpg.Pool:
    global _pool
    if _pool is not None:
        return _pool
    _pool = await asyncpg.create_pool(
        dsn=dsn or database_url(),
        min_size=config.pool_min_size(),
        max_size=config.pool_max_size(),
        command_timeout=config.command_timeout(),
    )
    logger.info(
        "db_pool_ready min_size=%s max_size=%s",
        config.pool_min_size(),
        config.pool_max_size(),
    )
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool
