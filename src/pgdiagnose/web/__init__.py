from pgdiagnose.web.app import create_app
from pgdiagnose.web.schemas import MetricSample, ReportRequest

__all__ = ["create_app", "MetricSample", "ReportRequest"]
