"""Core domain models for database health reports."""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import StrEnum
from typing import Any
from urllib.parse import urlsplit, urlunsplit

Findings = list[dict[str, Any]] | dict[str, str]

SKIPPED_REASON: dict[str, str] = {"error": "could not do check"}


class Severity(StrEnum):
    """Probe classification. ``SKIPPED`` means the probe could not run."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    SKIPPED = "skipped"

    @property
    def concern(self) -> int | None:
        """Ordering of concern, green < yellow < red. None for skipped."""
        return _CONCERN.get(self)


_CONCERN = {Severity.GREEN: 0, Severity.YELLOW: 1, Severity.RED: 2}


@dataclass(frozen=True, slots=True)
class Plan:
    """Connection ceiling of a hosting plan."""

    connection_limit: int = 0


@dataclass(frozen=True, slots=True)
class ProbeOutcome:
    """The result of running one probe."""

    name: str
    severity: Severity
    findings: Findings = field(default_factory=list)

    @classmethod
    def skipped(cls, name: str, reason: dict[str, str] | None = None) -> "ProbeOutcome":
        return cls(name=name, severity=Severity.SKIPPED, findings=dict(reason or SKIPPED_REASON))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "status": self.severity.value, "results": self.findings}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProbeOutcome":
        results = data.get("results")
        if results is None:
            results = []
        return cls(name=data["name"], severity=Severity(data["status"]), findings=results)


@dataclass(frozen=True, slots=True)
class Report:
    """Ordered probe outcomes for one job. There is no rolled-up severity."""

    outcomes: tuple[ProbeOutcome, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self) -> Iterator[ProbeOutcome]:
        return iter(self.outcomes)

    def get(self, name: str) -> ProbeOutcome | None:
        """Return the outcome of the probe called ``name``, if present."""
        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome
        return None

    def with_outcome(self, outcome: ProbeOutcome) -> "Report":
        return Report(outcomes=(*self.outcomes, outcome))

    def to_list(self) -> list[dict[str, Any]]:
        return [outcome.to_dict() for outcome in self.outcomes]

    @classmethod
    def from_list(cls, data: list[dict[str, Any]]) -> "Report":
        return cls(outcomes=tuple(ProbeOutcome.from_dict(item) for item in data))


@dataclass(frozen=True, slots=True)
class Job:
    """A persisted report together with the labels it was requested with.

    ``id`` and ``created_at`` are allocated by the report store; a draft job
    that has not been saved yet carries ``None`` for both.
    """

    report: Report
    app: str = ""
    database: str = ""
    url: str = ""
    id: str | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "app": self.app,
            "database": self.database,
            "url": self.url,
            "checks": self.report.to_list(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Job":
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=data.get("id"),
            app=data.get("app") or "",
            database=data.get("database") or "",
            url=data.get("url") or "",
            report=Report.from_list(data.get("checks") or []),
            created_at=created_at,
        )


_VALID_LABEL = re.compile(r"\A[a-zA-Z0-9\-_]+\Z")


def _sanitize_label(value: str) -> str:
    return value if _VALID_LABEL.match(value) else ""


@dataclass(frozen=True, slots=True)
class JobParams:
    """Input of a diagnostic request."""

    url: str
    plan: str = ""
    app: str = ""
    database: str = ""
    load_avg_1m: float | None = None

    def sanitized(self) -> "JobParams":
        """Blank out labels that are not plain ``[a-zA-Z0-9_-]+`` words."""
        return replace(
            self,
            plan=_sanitize_label(self.plan),
            app=_sanitize_label(self.app),
            database=_sanitize_label(self.database),
        )


def remove_password(url: str) -> str:
    """Return ``url`` with its password blanked, or "" if it names no user.

    The username is kept; the password is replaced by an empty one so the
    stored target still shows which role was inspected.
    """
    try:
        parts = urlsplit(url)
        username = parts.username
        host = parts.hostname
        port = parts.port
    except ValueError:
        return ""
    if not parts.scheme or username is None:
        return ""

    netloc = f"{username}:@"
    if host:
        netloc += f"[{host}]" if ":" in host else host
    if port is not None:
        netloc += f":{port}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))
