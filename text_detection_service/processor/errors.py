class TextDetectionServiceError(Exception):
    """Base class for request-local failures of the detection pipeline."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TextDetectionServiceError):
    """The upload was rejected (missing, empty or unsupported format)."""


class StorageError(TextDetectionServiceError):
    """The upload could not be written to or read back from local storage."""


class ServiceError(TextDetectionServiceError):
    """The detection provider call failed (transport, auth, throttling, timeout)."""

    def __init__(self, code: str, message: str = "") -> None:
        super().__init__(message or code)
        self.code = code

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"
