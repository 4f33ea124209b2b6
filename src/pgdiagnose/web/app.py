"""HTTP surface of the diagnostic service.

Routes:
    POST /reports       run a diagnostic job (201, or 500 on failure/timeout)
    GET  /reports/{id}  fetch a stored report (200, or 404)
    GET  /health        check the report store (200 "ok", or 500)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse

from pgdiagnose.config import Settings
from pgdiagnose.core import JobOrchestrator
from pgdiagnose.storage import PostgresReportStore, ReportStore
from pgdiagnose.web.schemas import ReportRequest

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


def create_app(
    settings: Settings | None = None,
    store: ReportStore | None = None,
    orchestrator: JobOrchestrator | None = None,
) -> FastAPI:
    settings = settings or Settings()
    store = store or PostgresReportStore(
        settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )
    orchestrator = orchestrator or JobOrchestrator.from_settings(store, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if isinstance(store, PostgresReportStore):
            await store.initialize()
        yield
        logger.info("Waiting for %d running job(s)", orchestrator.pending_jobs)
        await orchestrator.drain()
        if isinstance(store, PostgresReportStore):
            await store.close()

    app = FastAPI(title="pgdiagnose", lifespan=lifespan)
    app.state.orchestrator = orchestrator
    app.state.store = store

    if settings.is_production:

        @app.middleware("http")
        async def require_https(request: Request, call_next):
            proto = request.headers.get("x-forwarded-proto")
            if proto != "https":
                logger.warning("Rejected request that was not https: %r", proto)
                return Response(status_code=401)
            return await call_next(request)

    @app.post("/reports")
    async def create_report(body: ReportRequest) -> Response:
        result = await orchestrator.submit(body.to_params())
        return Response(
            content=result.body, status_code=result.status_code, media_type=JSON_MEDIA_TYPE
        )

    @app.get("/reports/{job_id}")
    async def get_report(job_id: str) -> Response:
        result = await orchestrator.get(job_id)
        return Response(
            content=result.body, status_code=result.status_code, media_type=JSON_MEDIA_TYPE
        )

    @app.get("/health")
    async def health() -> PlainTextResponse:
        try:
            await store.ping()
        except Exception:
            logger.exception("Report store health check failed")
            return PlainTextResponse("database error", status_code=500)
        return PlainTextResponse("ok")

    return app
