"""Domain models for probe outcomes, reports and jobs."""

from pgdiagnose.domain.models import (
    SKIPPED_REASON,
    Findings,
    Job,
    JobParams,
    Plan,
    ProbeOutcome,
    Report,
    Severity,
    remove_password,
)

__all__ = [
    "SKIPPED_REASON",
    "Findings",
    "Job",
    "JobParams",
    "Plan",
    "ProbeOutcome",
    "Report",
    "Severity",
    "remove_password",
]
