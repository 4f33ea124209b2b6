from pgdiagnose.probes.activity import (
    BlockingQueriesProbe,
    IdleInTransactionProbe,
    LongQueriesProbe,
)
from pgdiagnose.probes.base import Probe, RowsProbe
from pgdiagnose.probes.battery import ProbeBattery
from pgdiagnose.probes.connections import ConnectionCountProbe, connection_count_severity
from pgdiagnose.probes.load import check_load
from pgdiagnose.probes.relations import BloatProbe, HitRateProbe, UnusedIndexesProbe
from pgdiagnose.probes.sequences import SequenceExhaustionProbe, sequence_severity

__all__ = [
    "Probe",
    "RowsProbe",
    "ProbeBattery",
    "ConnectionCountProbe",
    "LongQueriesProbe",
    "IdleInTransactionProbe",
    "UnusedIndexesProbe",
    "BloatProbe",
    "HitRateProbe",
    "BlockingQueriesProbe",
    "SequenceExhaustionProbe",
    "check_load",
    "connection_count_severity",
    "sequence_severity",
]
