from pgdiagnose.api.client import DiagnoseClient
from pgdiagnose.api.exceptions import (
    DiagnoseAPIError,
    JobTimeoutError,
    NotFoundError,
    RateLimitError,
)

__all__ = [
    "DiagnoseClient",
    "DiagnoseAPIError",
    "JobTimeoutError",
    "NotFoundError",
    "RateLimitError",
]
