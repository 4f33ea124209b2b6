from pgdiagnose.probes.base import RowsProbe
from pgdiagnose.probes.queries import (
    BLOCKING_QUERIES_SQL,
    IDLE_IN_TRANSACTION_SQL,
    LONG_QUERIES_SQL,
)


class LongQueriesProbe(RowsProbe):
    """Active statements that have been running for more than a minute."""

    name = "Long Queries"
    sql = LONG_QUERIES_SQL


class IdleInTransactionProbe(RowsProbe):
    """Sessions that have sat idle inside an open transaction for over a minute."""

    name = "Idle-in-Transaction"
    sql = IDLE_IN_TRANSACTION_SQL


class BlockingQueriesProbe(RowsProbe):
    """Ungranted locks paired with the session holding the same transaction id."""

    name = "Blocking Queries"
    sql = BLOCKING_QUERIES_SQL
