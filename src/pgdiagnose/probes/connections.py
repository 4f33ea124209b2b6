from pgdiagnose.db import Connection
from pgdiagnose.domain import Plan, ProbeOutcome, Severity
from pgdiagnose.probes.base import fetch_rows
from pgdiagnose.probes.queries import CONNECTION_COUNT_SQL

YELLOW_RATIO = 0.75
RED_RATIO = 0.9


def connection_count_severity(count: int, limit: int) -> Severity:
    """Classify ``count`` open connections against a plan ``limit``.

    A limit of zero or less means the plan is unknown and is always red.
    """
    if limit <= 0:
        return Severity.RED
    ratio = count / limit
    if ratio >= RED_RATIO:
        return Severity.RED
    if ratio >= YELLOW_RATIO:
        return Severity.YELLOW
    return Severity.GREEN


class ConnectionCountProbe:
    name: str = "Connection Count"

    async def run(self, conn: Connection, plan: Plan) -> ProbeOutcome:
        rows = await fetch_rows(conn, CONNECTION_COUNT_SQL)
        count = rows[0]["count"] if rows else 0
        return ProbeOutcome(
            name=self.name,
            severity=connection_count_severity(count, plan.connection_limit),
            findings=rows,
        )
