import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any, Protocol, runtime_checkable

import asyncpg

from pgdiagnose.db.exceptions import ConnectionFailedError

logger = logging.getLogger(__name__)


@runtime_checkable
class Connection(Protocol):
    """The subset of ``asyncpg.Connection`` the probes rely on."""

    async def fetch(self, query: str, *args: Any) -> Sequence[Any]:
        ...

    async def fetchval(self, query: str, *args: Any) -> Any:
        ...


@asynccontextmanager
async def open_connection(
    dsn: str,
    connect_timeout: float = 10.0,
    command_timeout: float | None = None,
) -> AsyncIterator[asyncpg.Connection]:
    """Open a connection to ``dsn``, check it with ``SELECT 1`` and close it on exit.

    Raises:
        ConnectionFailedError: If the target is blank, unreachable, rejects
            the login or does not answer the ping.
    """
    if not dsn.strip():
        raise ConnectionFailedError("blank connection target")

    try:
        conn = await asyncpg.connect(
            dsn=dsn, timeout=connect_timeout, command_timeout=command_timeout
        )
    except (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError, ValueError) as exc:
        raise ConnectionFailedError(f"could not connect: {exc}") from exc

    try:
        try:
            await conn.execute("SELECT 1")
        except (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
            raise ConnectionFailedError(f"ping failed: {exc}") from exc
        yield conn
    finally:
        await conn.close()
        logger.debug("Closed diagnostic connection")
