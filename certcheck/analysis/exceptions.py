class AnalysisError(Exception):
    """Raised when the remote analysis does not produce a usable result."""


class AnalysisNetworkError(AnalysisError):
    """Raised when the request could not be sent or no response arrived."""


class AnalysisRequestError(AnalysisError):
    """Raised when the service answers with a non-success status code."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(AnalysisError):
    """Raised when a success response body is not a valid analysis result."""
