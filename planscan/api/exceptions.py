class ApiError(Exception):
    """Base exception for all backend communication failures."""


class ApiTransportError(ApiError):
    """Raised when a request never reached the server or no response came back."""


class ApiResponseError(ApiError):
    """Raised when the server answers with a non-success status."""

    def __init__(self, message: str, *, status_code: int, detail: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ApiProtocolError(ApiError):
    """Raised when a response body does not have the expected shape."""


class StreamError(ApiError):
    """Raised when the processing stream reports an error event."""


class StreamLivenessError(ApiError):
    """Raised when the processing stream ends or stalls before a terminal event."""


class ProcessingCancelledError(ApiError):
    """Raised when a processing run is cancelled by its caller."""
