from typing import Any, ClassVar, Protocol, runtime_checkable

from pgdiagnose.db import Connection
from pgdiagnose.domain import Plan, ProbeOutcome, Severity


@runtime_checkable
class Probe(Protocol):
    """Protocol for diagnostic probes.

    ``run`` may raise on query failure; the battery turns that into a
    skipped outcome.
    """

    @property
    def name(self) -> str:
        ...

    async def run(self, conn: Connection, plan: Plan) -> ProbeOutcome:
        ...


class RowsProbe:
    """A probe whose severity only depends on whether its query returned rows."""

    name: ClassVar[str]
    sql: ClassVar[str]
    severity_when_found: ClassVar[Severity] = Severity.RED

    async def run(self, conn: Connection, plan: Plan) -> ProbeOutcome:
        rows = await fetch_rows(conn, self.sql)
        severity = self.severity_when_found if rows else Severity.GREEN
        return ProbeOutcome(name=self.name, severity=severity, findings=rows)


async def fetch_rows(conn: Connection, sql: str, *args: Any) -> list[dict[str, Any]]:
    return [dict(record) for record in await conn.fetch(sql, *args)]
