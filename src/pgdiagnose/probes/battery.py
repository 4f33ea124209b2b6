import logging
from collections.abc import Sequence

from pgdiagnose.db import Connection
from pgdiagnose.domain import Plan, ProbeOutcome, Report
from pgdiagnose.probes.activity import (
    BlockingQueriesProbe,
    IdleInTransactionProbe,
    LongQueriesProbe,
)
from pgdiagnose.probes.base import Probe
from pgdiagnose.probes.connections import ConnectionCountProbe
from pgdiagnose.probes.relations import BloatProbe, HitRateProbe, UnusedIndexesProbe
from pgdiagnose.probes.sequences import SequenceExhaustionProbe

logger = logging.getLogger(__name__)


class ProbeBattery:
    """A fixed, ordered set of probes run one after another on one connection."""

    def __init__(self, probes: Sequence[Probe]) -> None:
        self._probes: tuple[Probe, ...] = tuple(probes)

    @classmethod
    def default(cls) -> "ProbeBattery":
        return cls(
            [
                ConnectionCountProbe(),
                LongQueriesProbe(),
                IdleInTransactionProbe(),
                UnusedIndexesProbe(),
                BloatProbe(),
                HitRateProbe(),
                BlockingQueriesProbe(),
                SequenceExhaustionProbe(),
            ]
        )

    @property
    def probes(self) -> tuple[Probe, ...]:
        return self._probes

    async def run(self, conn: Connection, plan: Plan) -> Report:
        outcomes = [await self._run_probe(probe, conn, plan) for probe in self._probes]
        return Report(outcomes=tuple(outcomes))

    async def _run_probe(self, probe: Probe, conn: Connection, plan: Plan) -> ProbeOutcome:
        try:
            return await probe.run(conn, plan)
        except Exception:
            logger.warning("Probe %r failed, marking it skipped", probe.name, exc_info=True)
            return ProbeOutcome.skipped(probe.name)
