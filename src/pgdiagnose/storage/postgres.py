"""PostgreSQL storage for diagnostic jobs.

Each job is one row of the ``results`` table; the probe outcomes are kept as
a JSON document. The table is created outside this package:

    CREATE TABLE results (
        id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
        app text,
        database text,
        url text,
        checks jsonb NOT NULL,
        created_at timestamptz NOT NULL DEFAULT now()
    );
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import TYPE_CHECKING

import asyncpg

from pgdiagnose.domain import Job, Report

if TYPE_CHECKING:
    from asyncpg import Pool

logger = logging.getLogger(__name__)

_INSERT_SQL = """
INSERT INTO results (app, database, url, checks)
VALUES ($1, $2, $3, $4::jsonb)
RETURNING id::text
"""

_SELECT_SQL = """
SELECT id::text AS id, app, database, url, checks::text AS checks, created_at
FROM results
WHERE id = $1
"""


class PostgresReportStore:
    """asyncpg-backed report store.

    Example:
        >>> store = PostgresReportStore("postgresql:///pgdiagnose")
        >>> await store.initialize()
        >>> try:
        ...     job_id = await store.save(job)
        ... finally:
        ...     await store.close()
    """

    def __init__(self, dsn: str, min_size: int = 1, max_size: int = 10) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._pool: Pool | None = None

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    async def initialize(self) -> None:
        """Create the connection pool.

        Raises:
            asyncpg.PostgresError: If the store database cannot be reached.
        """
        if self._pool is not None:
            logger.warning("PostgresReportStore already initialized, skipping")
            return
        self._pool = await asyncpg.create_pool(
            dsn=self._dsn, min_size=self._min_size, max_size=self._max_size
        )
        logger.info(
            "PostgresReportStore initialized",
            extra={"pool_min_size": self._min_size, "pool_max_size": self._max_size},
        )

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("PostgresReportStore closed")

    def _require_pool(self) -> Pool:
        if self._pool is None:
            raise RuntimeError("PostgresReportStore not initialized. Call initialize() first.")
        return self._pool

    async def save(self, job: Job) -> str:
        pool = self._require_pool()
        checks = json.dumps(job.report.to_list(), indent=2)
        async with pool.acquire() as conn:
            job_id = await conn.fetchval(_INSERT_SQL, job.app, job.database, job.url, checks)
        return job_id

    async def load(self, job_id: str) -> Job | None:
        try:
            key = uuid.UUID(job_id)
        except ValueError:
            return None

        pool = self._require_pool()
        async with pool.acquire() as conn:
            row = await conn.fetchrow(_SELECT_SQL, key)
        if row is None:
            return None
        return Job(
            id=row["id"],
            app=row["app"] or "",
            database=row["database"] or "",
            url=row["url"] or "",
            report=Report.from_list(json.loads(row["checks"])),
            created_at=row["created_at"],
        )

    async def ping(self) -> None:
        pool = self._require_pool()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
