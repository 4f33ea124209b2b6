from typing import Protocol, runtime_checkable

from pgdiagnose.domain import Job


@runtime_checkable
class ReportStore(Protocol):
    """Write-once, read-many storage for finished jobs.

    ``save`` allocates the job id; ``load`` returns None for ids that are
    unknown or not written yet.
    """

    async def save(self, job: Job) -> str:
        ...

    async def load(self, job_id: str) -> Job | None:
        ...

    async def ping(self) -> None:
        ...
