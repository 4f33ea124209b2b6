from pgdiagnose.storage.base import ReportStore
from pgdiagnose.storage.memory import InMemoryReportStore
from pgdiagnose.storage.postgres import PostgresReportStore

__all__ = ["ReportStore", "InMemoryReportStore", "PostgresReportStore"]
