from __future__ import annotations

import time
from enum import Enum

from pydantic import BaseModel, Field

from text_detection_service.dto.detection_result import DetectionRequest, DetectionResult
from text_detection_service.dto.uploaded_image import UploadedImage


class RequestState(str, Enum):
    RECEIVED = "RECEIVED"
    VALIDATED = "VALIDATED"
    STORED = "STORED"
    DETECTED = "DETECTED"
    RESPONDED = "RESPONDED"
    FAILED = "FAILED"


ALLOWED_TRANSITIONS: dict[RequestState, frozenset[RequestState]] = {
    RequestState.RECEIVED: frozenset({RequestState.VALIDATED, RequestState.FAILED}),
    RequestState.VALIDATED: frozenset({RequestState.STORED, RequestState.FAILED}),
    RequestState.STORED: frozenset({RequestState.DETECTED, RequestState.FAILED}),
    RequestState.DETECTED: frozenset({RequestState.RESPONDED, RequestState.FAILED}),
    RequestState.RESPONDED: frozenset(),
    RequestState.FAILED: frozenset(),
}


class DetectionContext(BaseModel):
    """Holds per-request state for the ingest -> detect -> shape pipeline.

    One context is created per HTTP request and never shared, so the stored
    file path travels with the request instead of through module state.
    """

    original_name: str = ""
    """File name sent by the client (empty if the upload had none)."""

    state: RequestState = RequestState.RECEIVED
    """Current position in the request state machine."""

    uploaded_image: UploadedImage | None = None
    """Stored upload, set once the file is written."""

    detection_request: DetectionRequest | None = None
    """Bytes read back from the stored upload."""

    result: DetectionResult | None = None
    """Provider result for this request's image."""

    error: str | None = None
    """Message of the error that moved the request to FAILED."""

    started_at: float = Field(default_factory=time.time)

    @property
    def is_terminal(self) -> bool:
        return self.state in (RequestState.RESPONDED, RequestState.FAILED)

    @property
    def elapsed(self) -> float:
        return time.time() - self.started_at

    def transition(self, new_state: RequestState) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise RuntimeError(f"illegal request state transition {self.state.value} -> {new_state.value}")
        self.state = new_state

    def fail(self, error: Exception) -> None:
        self.error = str(error)
        if not self.is_terminal:
            self.transition(RequestState.FAILED)
