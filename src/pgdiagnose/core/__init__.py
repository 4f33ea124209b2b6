from pgdiagnose.core.orchestrator import JobOrchestrator, JobResponse, render_job
from pgdiagnose.core.runner import run_battery

__all__ = ["JobOrchestrator", "JobResponse", "render_job", "run_battery"]
