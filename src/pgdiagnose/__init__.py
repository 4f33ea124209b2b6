__version__ = "0.1.0"

from pgdiagnose.core import JobOrchestrator, JobResponse, run_battery
from pgdiagnose.db import ConnectionFailedError, open_connection
from pgdiagnose.domain import (
    Job,
    JobParams,
    Plan,
    ProbeOutcome,
    Report,
    Severity,
)
from pgdiagnose.plans import get_plan
from pgdiagnose.probes import Probe, ProbeBattery
from pgdiagnose.storage import InMemoryReportStore, PostgresReportStore, ReportStore

__all__ = [
    "__version__",
    "JobOrchestrator",
    "JobResponse",
    "run_battery",
    "ConnectionFailedError",
    "open_connection",
    "Job",
    "JobParams",
    "Plan",
    "ProbeOutcome",
    "Report",
    "Severity",
    "get_plan",
    "Probe",
    "ProbeBattery",
    "ReportStore",
    "InMemoryReportStore",
    "PostgresReportStore",
]
