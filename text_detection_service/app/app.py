import os

from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from text_detection_service.api.api import api
from text_detection_service.api.errors import register_error_handlers
from text_detection_service.processor.detection_client import RekognitionTextDetector, TextDetector
from text_detection_service.processor.dispatcher import Dispatcher
from text_detection_service.processor.ingestor import ImageIngestor
from text_detection_service.settings import settings
from text_detection_service.utils.utils import setup_logging


def create_app(detector: TextDetector | None = None, upload_dir: str | None = None) -> FastAPI:
    """
        :description: Creates FastAPI application with API router, error handlers and
                      the process-wide text detector and dispatcher
        :param detector: detector to use instead of the AWS Rekognition one
        :param upload_dir: directory for stored uploads, defaults to settings.UPLOAD_DIR
        :return: FastAPI application instance
    """

    log = setup_logging(component_name="api", log_level=settings.LOG_LEVEL)

    app = FastAPI(title="Text Detection Service",
                  description="Detects text in uploaded images",
                  version=settings.TEXT_DETECTION_SERVICE_VERSION,
                  default_response_class=ORJSONResponse,
                  debug=settings.DEBUG_MODE)
    app.include_router(api)
    register_error_handlers(app)

    upload_dir = upload_dir or settings.UPLOAD_DIR
    os.makedirs(upload_dir, exist_ok=True)

    if detector is None:
        detector = RekognitionTextDetector()

    ingestor = ImageIngestor(upload_dir=upload_dir, chunk_size=settings.UPLOAD_CHUNK_SIZE)
    app.state.detector = detector
    app.state.dispatcher = Dispatcher(detector=detector, ingestor=ingestor,
                                      provider_timeout=settings.PROVIDER_TIMEOUT)

    log.info("text detection service started | provider: %s | upload dir: %s",
             detector.name, upload_dir)

    return app
