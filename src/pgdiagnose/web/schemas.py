from pydantic import BaseModel, Field

from pgdiagnose.domain import JobParams


class MetricSample(BaseModel):
    load_avg_1m: float | None = None


class ReportRequest(BaseModel):
    url: str
    plan: str = ""
    app: str = ""
    database: str = ""
    metrics: list[MetricSample] = Field(default_factory=list)

    def to_params(self) -> JobParams:
        load = self.metrics[0].load_avg_1m if self.metrics else None
        return JobParams(
            url=self.url,
            plan=self.plan,
            app=self.app,
            database=self.database,
            load_avg_1m=load,
        )
