from pgdiagnose.domain import Severity
from pgdiagnose.probes.base import RowsProbe
from pgdiagnose.probes.queries import BLOAT_SQL, HIT_RATE_SQL, UNUSED_INDEXES_SQL


class UnusedIndexesProbe(RowsProbe):
    """Large btree indexes that are never or seldom scanned."""

    name = "Unused Indexes"
    sql = UNUSED_INDEXES_SQL
    severity_when_found = Severity.YELLOW


class BloatProbe(RowsProbe):
    name = "Bloat"
    sql = BLOAT_SQL


class HitRateProbe(RowsProbe):
    """Cache and index hit ratios below 0.99."""

    name = "Hit Rate"
    sql = HIT_RATE_SQL
