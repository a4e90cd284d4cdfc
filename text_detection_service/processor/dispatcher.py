from __future__ import annotations

import logging
from typing import Any

import anyio
import anyio.to_thread
from starlette.datastructures import UploadFile

from text_detection_service.dto.detection_context import DetectionContext, RequestState
from text_detection_service.dto.detection_result import DetectionRequest, DetectionResult
from text_detection_service.processor.detection_client import TextDetector
from text_detection_service.processor.errors import ServiceError, TextDetectionServiceError, ValidationError
from text_detection_service.processor.ingestor import EMPTY_FILE_MESSAGE, ImageIngestor
from text_detection_service.processor.shaper import Shaper
from text_detection_service.settings import settings
from text_detection_service.utils.utils import setup_logging


class Dispatcher:
    """Runs one upload through ingest -> read -> detect -> shape.

    The dispatcher itself holds only read-only collaborators; everything that
    belongs to a request lives in the DetectionContext created per call.
    """

    def __init__(self, detector: TextDetector, ingestor: ImageIngestor,
                 provider_timeout: float | None = None, log: logging.Logger | None = None) -> None:
        self.detector = detector
        self.ingestor = ingestor
        self.provider_timeout = provider_timeout or settings.PROVIDER_TIMEOUT
        self.log = log or setup_logging(component_name="dispatcher", log_level=settings.LOG_LEVEL)

    async def _detect(self, detection_request: DetectionRequest) -> DetectionResult:
        try:
            with anyio.fail_after(self.provider_timeout):
                return await anyio.to_thread.run_sync(
                    self.detector.detect_text, detection_request.image_bytes, abandon_on_cancel=True)
        except TimeoutError as exception:
            # the worker thread is abandoned, its late result is discarded
            raise ServiceError("Timeout", "text detection did not finish within "
                               + str(self.provider_timeout) + " seconds") from exception

    def _advance(self, context: DetectionContext, new_state: RequestState) -> None:
        context.transition(new_state)
        self.log.debug("request %s -> %s",
                       context.uploaded_image.file_id if context.uploaded_image else context.original_name,
                       new_state.value)

    async def dispatch(self, upload: UploadFile | None, shaper: Shaper) -> Any:
        """Detect text in `upload` and return `shaper(result)`.

        The stored upload is deleted before returning, on success and on every
        error path. Errors propagate as TextDetectionServiceError subclasses.

        Args:
            upload: The first file part of the multipart body, or None if the
                request carried no file.
            shaper: Response shaper applied to the detection result.

        Returns:
            Any: JSON-serializable shaped response.
        """
        context = DetectionContext(original_name=(upload.filename or "") if upload is not None else "")

        try:
            if upload is None or not upload.filename:
                raise ValidationError(EMPTY_FILE_MESSAGE)

            self.ingestor.resolve_extension(upload.filename)
            self._advance(context, RequestState.VALIDATED)

            context.uploaded_image = await self.ingestor.ingest(upload, upload.filename, upload.content_type)
            self._advance(context, RequestState.STORED)

            detection_request = DetectionRequest(image_bytes=await self.ingestor.read_bytes(context.uploaded_image))
            context.detection_request = detection_request
            result = await self._detect(detection_request)
            context.result = result
            self._advance(context, RequestState.DETECTED)

            shaped = shaper(result)
            self._advance(context, RequestState.RESPONDED)

            self.log.info("request %s finished | detections: %s | Elapsed : %s seconds",
                          context.uploaded_image.file_id, len(result.detections), context.elapsed)
            return shaped

        except ValidationError as exception:
            self.log.warning("upload rejected: %s | name: %s", exception.message, context.original_name)
            context.fail(exception)
            raise
        except TextDetectionServiceError as exception:
            self.log.error("request failed in state %s: %s | name: %s",
                           context.state.value, exception, context.original_name)
            context.fail(exception)
            raise
        except Exception as exception:
            self.log.exception("unexpected error while processing upload " + context.original_name)
            context.fail(exception)
            raise

        finally:
            await self.ingestor.release(context.uploaded_image)
            if upload is not None:
                await upload.close()
