import asyncio
import random
from typing import Any

import httpx

from pgdiagnose.api.exceptions import (
    DiagnoseAPIError,
    JobTimeoutError,
    NotFoundError,
    RateLimitError,
)
from pgdiagnose.domain import Job

TIMEOUT_ERROR = "Couldn't finish job in time"


class DiagnoseClient:
    """Async client for the pgdiagnose HTTP service.

    Usage:
        async with DiagnoseClient("https://pgdiagnose.example.com") as client:
            job = await client.create_report(url="postgres://u:p@host/db", plan="standard-0")
            again = await client.get_report(job.id)
    """

    MAX_RETRIES = 3
    BASE_BACKOFF = 1.0
    MAX_JITTER = 0.5

    def __init__(self, base_url: str, timeout: float = 35.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "DiagnoseClient":
        self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self, method: str, endpoint: str, payload: dict[str, Any] | None = None
    ) -> httpx.Response:
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        url = f"{self.base_url}{endpoint}"
        retries = 0
        while True:
            response = await self._client.request(
                method, url, json=payload, headers={"Accept": "application/json"}
            )

            if response.status_code == 429:
                if retries >= self.MAX_RETRIES:
                    retry_after = response.headers.get("Retry-After")
                    raise RateLimitError(
                        "Rate limit exceeded after max retries",
                        retry_after=float(retry_after) if retry_after else None,
                    )

                delay = self.BASE_BACKOFF * (2**retries) + random.uniform(0, self.MAX_JITTER)
                await asyncio.sleep(delay)
                retries += 1
                continue

            return response

    async def create_report(
        self,
        url: str,
        plan: str = "",
        app: str = "",
        database: str = "",
        load_avg_1m: float | None = None,
    ) -> Job:
        payload: dict[str, Any] = {"url": url, "plan": plan, "app": app, "database": database}
        if load_avg_1m is not None:
            payload["metrics"] = [{"load_avg_1m": load_avg_1m}]

        response = await self._request("POST", "/reports", payload)
        if response.status_code == 201:
            return Job.from_dict(response.json())

        message = _error_message(response)
        if message == TIMEOUT_ERROR:
            raise JobTimeoutError(message)
        raise DiagnoseAPIError(message)

    async def get_report(self, job_id: str) -> Job:
        response = await self._request("GET", f"/reports/{job_id}")
        if response.status_code == 404:
            raise NotFoundError(f"Report {job_id} not found")
        response.raise_for_status()
        return Job.from_dict(response.json())


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"Unexpected response {response.status_code}"
    if isinstance(data, dict) and "error" in data:
        return str(data["error"])
    return f"Unexpected response {response.status_code}"
