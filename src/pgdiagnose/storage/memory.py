import asyncio
import json
import uuid
from datetime import UTC, datetime
from typing import Any

from pgdiagnose.domain import Job


class InMemoryReportStore:
    """Report store kept in process memory.

    Jobs are held as JSON text so a loaded job never shares state with the
    one that was saved.
    """

    def __init__(self) -> None:
        self._rows: dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def save(self, job: Job) -> str:
        job_id = str(uuid.uuid4())
        row: dict[str, Any] = job.to_dict()
        row["id"] = job_id
        row["created_at"] = datetime.now(UTC).isoformat()
        async with self._lock:
            self._rows[job_id] = json.dumps(row)
        return job_id

    async def load(self, job_id: str) -> Job | None:
        async with self._lock:
            row = self._rows.get(job_id)
        if row is None:
            return None
        return Job.from_dict(json.loads(row))

    async def ping(self) -> None:
        return None

    @property
    def job_ids(self) -> tuple[str, ...]:
        return tuple(self._rows)
