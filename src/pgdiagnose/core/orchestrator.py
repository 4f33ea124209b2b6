import asyncio
import functools
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from pgdiagnose.config import Settings
from pgdiagnose.core.runner import run_battery
from pgdiagnose.domain import Job, JobParams, Plan, Report, remove_password
from pgdiagnose.plans import get_plan
from pgdiagnose.probes import check_load
from pgdiagnose.storage import ReportStore

logger = logging.getLogger(__name__)

BatteryRunner = Callable[[str, Plan], Awaitable[Report]]

DEFAULT_DEADLINE_SECONDS = 25.0

CREATE_FAILED_BODY = json.dumps({"error": "Couldn't create job"})
SEND_FAILED_BODY = json.dumps({"error": "Couldn't send report"})
TIMEOUT_BODY = json.dumps({"error": "Couldn't finish job in time"})


@dataclass(frozen=True, slots=True)
class JobResponse:
    status_code: int
    body: str


def render_job(job: Job) -> str:
    return json.dumps(job.to_dict(), indent=2)


class JobOrchestrator:
    """Runs diagnostic jobs in the background and answers within a deadline.

    Each submitted job becomes its own task that runs the probe battery,
    saves the report and loads it back. ``submit`` waits for that task for
    at most ``deadline`` seconds; when the deadline passes first the task is
    left running and still saves its report.

    A caller that hits the deadline does not learn the job id, since the
    store only allocates it once the report is saved.
    """

    def __init__(
        self,
        store: ReportStore,
        runner: BatteryRunner | None = None,
        deadline: float = DEFAULT_DEADLINE_SECONDS,
    ) -> None:
        self._store = store
        self._runner = runner or run_battery
        self._deadline = deadline
        self._jobs: set[asyncio.Task[JobResponse]] = set()

    @classmethod
    def from_settings(cls, store: ReportStore, settings: Settings) -> "JobOrchestrator":
        runner = functools.partial(
            run_battery,
            connect_timeout=settings.connect_timeout_seconds,
            command_timeout=settings.command_timeout_seconds,
        )
        return cls(store, runner=runner, deadline=settings.job_deadline_seconds)

    @property
    def deadline(self) -> float:
        return self._deadline

    @property
    def pending_jobs(self) -> int:
        return len(self._jobs)

    async def submit(self, params: JobParams) -> JobResponse:
        params = params.sanitized()
        safe_url = remove_password(params.url)
        if not safe_url:
            logger.warning("Rejected job: bad postgres url")
            return JobResponse(500, CREATE_FAILED_BODY)

        task = asyncio.create_task(self._create_job(params, safe_url))
        self._jobs.add(task)
        task.add_done_callback(self._jobs.discard)

        done, _ = await asyncio.wait({task}, timeout=self._deadline)
        if task in done:
            return task.result()

        logger.warning(
            "Job for %s still running after %.1fs, answering with a timeout",
            safe_url,
            self._deadline,
        )
        return JobResponse(500, TIMEOUT_BODY)

    async def get(self, job_id: str) -> JobResponse:
        try:
            job = await self._store.load(job_id)
        except Exception:
            logger.warning("Could not load job %s", job_id, exc_info=True)
            job = None
        if job is None:
            return JobResponse(404, "")
        return JobResponse(200, render_job(job))

    async def drain(self) -> None:
        """Wait for every job that is still running."""
        while self._jobs:
            await asyncio.gather(*self._jobs, return_exceptions=True)

    async def _create_job(self, params: JobParams, safe_url: str) -> JobResponse:
        try:
            job_id = await self._run_and_save(params, safe_url)
        except Exception:
            logger.exception("Couldn't create job for %s", safe_url)
            return JobResponse(500, CREATE_FAILED_BODY)

        try:
            job = await self._store.load(job_id)
        except Exception:
            logger.exception("Couldn't load job %s after saving it", job_id)
            job = None
        if job is None:
            return JobResponse(500, SEND_FAILED_BODY)
        return JobResponse(201, render_job(job))

    async def _run_and_save(self, params: JobParams, safe_url: str) -> str:
        report = await self._runner(params.url, get_plan(params.plan))
        report = report.with_outcome(check_load(params.load_avg_1m))

        job_id = await self._store.save(
            Job(report=report, app=params.app, database=params.database, url=safe_url)
        )
        logger.info("New job id: %s", job_id)
        return job_id
