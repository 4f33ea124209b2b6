from collections.abc import Mapping
from typing import Any

import pytest


class FakeConnection:
    """In-process stand-in for an asyncpg connection.

    ``results`` maps SQL text to the rows ``fetch`` returns (or an exception
    to raise); ``values`` maps a substring of a ``fetchval`` query to its
    value (or an exception). Unknown ``fetch`` queries return no rows.
    """

    def __init__(
        self,
        results: Mapping[str, list[dict[str, Any]] | Exception] | None = None,
        values: Mapping[str, Any] | None = None,
    ) -> None:
        self.results = dict(results or {})
        self.values = dict(values or {})
        self.queries: list[str] = []
        self.pings = 0
        self.closed = 0

    async def fetch(self, query: str, *args: Any) -> list[dict[str, Any]]:
        self.queries.append(query)
        result = self.results.get(query, [])
        if isinstance(result, Exception):
            raise result
        return result

    async def fetchval(self, query: str, *args: Any) -> Any:
        self.queries.append(query)
        for fragment, value in self.values.items():
            if fragment in query:
                if isinstance(value, Exception):
                    raise value
                return value
        raise OSError(f"no value for query: {query}")

    async def execute(self, query: str, *args: Any) -> str:
        self.pings += 1
        return "SELECT 1"

    async def close(self) -> None:
        self.closed += 1


@pytest.fixture
def make_connection():
    return FakeConnection
