import logging
import re
from dataclasses import dataclass
from typing import Any

from pgdiagnose.db import Connection
from pgdiagnose.domain import Plan, ProbeOutcome, Severity
from pgdiagnose.probes.base import fetch_rows
from pgdiagnose.probes.queries import INT4_SEQUENCES_SQL, SEQUENCE_USAGE_SQL

logger = logging.getLogger(__name__)

YELLOW_PERCENT = 75.0
RED_PERCENT = 90.0

_QUALIFIED_NAME = re.compile(r"\A([A-Za-z_][A-Za-z0-9_$]*)\.([A-Za-z_][A-Za-z0-9_$]*)\Z")


@dataclass(frozen=True, slots=True)
class SequenceCandidate:
    column: str
    sequence: str


def quote_sequence(name: str) -> str | None:
    """Quote a ``schema.sequence`` name for use in FROM, or None if it is not one."""
    match = _QUALIFIED_NAME.match(name)
    if not match:
        return None
    return ".".join(f'"{part}"' for part in match.groups())


def sequence_severity(percentages: list[float]) -> Severity:
    """Classify the usage of the sequences that crossed the yellow cutoff."""
    if not percentages:
        return Severity.GREEN
    highest = max(percentages)
    if highest >= RED_PERCENT:
        return Severity.RED
    if highest >= YELLOW_PERCENT:
        return Severity.YELLOW
    return Severity.GREEN


class SequenceExhaustionProbe:
    """Sequences feeding 32-bit integer columns that are running out of values.

    Discovery lists every int4 column defaulting to ``nextval`` of a
    sequence; each sequence is then measured with its own query, since its
    name is only known after discovery. A sequence that cannot be measured
    is logged and left out.
    """

    name: str = "Sequence Exhaustion"

    async def run(self, conn: Connection, plan: Plan) -> ProbeOutcome:
        candidates = await self.discover(conn)

        findings: list[dict[str, Any]] = []
        for candidate in candidates:
            percent = await self._measure(conn, candidate)
            if percent is not None and percent >= YELLOW_PERCENT:
                findings.append(
                    {
                        "column": candidate.column,
                        "sequence": candidate.sequence,
                        "percent_used": percent,
                    }
                )

        severity = sequence_severity([f["percent_used"] for f in findings])
        return ProbeOutcome(name=self.name, severity=severity, findings=findings)

    async def discover(self, conn: Connection) -> list[SequenceCandidate]:
        candidates: list[SequenceCandidate] = []
        for row in await fetch_rows(conn, INT4_SEQUENCES_SQL):
            if quote_sequence(row["seq"]) is None:
                logger.debug("Ignoring sequence with unusable name %r", row["seq"])
                continue
            candidates.append(SequenceCandidate(column=row["col"], sequence=row["seq"]))
        return candidates

    async def _measure(self, conn: Connection, candidate: SequenceCandidate) -> float | None:
        sql = SEQUENCE_USAGE_SQL.format(sequence=quote_sequence(candidate.sequence))
        try:
            value = await conn.fetchval(sql)
        except Exception:
            logger.warning("Could not measure sequence %s", candidate.sequence, exc_info=True)
            return None
        return float(value) if value is not None else None
