class DiagnoseAPIError(Exception):
    """The diagnostic service answered with an error body or an unexpected status."""


class RateLimitError(DiagnoseAPIError):
    """Still throttled (429) after the client used up its retries."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class NotFoundError(DiagnoseAPIError):
    """No report is stored under the id, or it has not been written yet."""


class JobTimeoutError(DiagnoseAPIError):
    """The service did not finish the job before its deadline.

    The job keeps running on the server, but its id is not returned.
    """
