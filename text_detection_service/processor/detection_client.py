from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import boto3
import pydantic
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from text_detection_service.dto.detection_result import DetectionResult
from text_detection_service.processor.errors import ServiceError, ValidationError
from text_detection_service.settings import Settings, settings
from text_detection_service.utils.utils import setup_logging

EMPTY_IMAGE_MESSAGE = "empty image"


class TextDetector(ABC):
    """Text detection capability the dispatcher forwards image bytes to."""

    name: str = "text-detector"

    @abstractmethod
    def detect_text(self, image_bytes: bytes) -> DetectionResult:
        """Return the detections found in `image_bytes`.

        Raises:
            ValidationError: `image_bytes` is empty.
            ServiceError: the provider call failed.
        """


def build_rekognition_client(config: Settings = settings) -> Any:
    """Create the boto3 Rekognition client shared by the whole process.

    Credentials fall back to the boto3 default chain when not configured.
    The client makes a single attempt per call, bounded by the provider timeout.
    """
    secret = config.TEXT_DETECTION_AWS_SECRET_ACCESS_KEY
    return boto3.client(
        "rekognition",
        region_name=config.AWS_REGION,
        aws_access_key_id=config.TEXT_DETECTION_AWS_ACCESS_KEY_ID,
        aws_secret_access_key=secret.get_secret_value() if secret is not None else None,
        config=Config(
            connect_timeout=config.PROVIDER_TIMEOUT,
            read_timeout=config.PROVIDER_TIMEOUT,
            retries={"total_max_attempts": 1, "mode": "standard"},
        ),
    )


class RekognitionTextDetector(TextDetector):

    name = "aws-rekognition"

    def __init__(self, client: Any = None, log: logging.Logger | None = None) -> None:
        self.client = client if client is not None else build_rekognition_client()
        self.log = log or setup_logging(component_name="detection_client", log_level=settings.LOG_LEVEL)

    def detect_text(self, image_bytes: bytes) -> DetectionResult:
        if not image_bytes:
            raise ValidationError(EMPTY_IMAGE_MESSAGE)

        call_start_time = time.time()

        try:
            response = self.client.detect_text(Image={"Bytes": image_bytes})
        except ClientError as exception:
            error = exception.response.get("Error", {})
            code = str(error.get("Code") or "ClientError")
            message = str(error.get("Message") or exception)
            self.log.error("rekognition detect_text failed | code: %s | message: %s", code, message)
            raise ServiceError(code, message) from exception
        except BotoCoreError as exception:
            self.log.error("rekognition detect_text transport failure: " + str(exception))
            raise ServiceError(type(exception).__name__, str(exception)) from exception

        self.log.info("rekognition detect_text finished | Elapsed : " +
                      str(time.time() - call_start_time) + " seconds")

        try:
            return DetectionResult.model_validate(response)
        except pydantic.ValidationError as exception:
            raise ServiceError("InvalidResponse", "unexpected detect_text response: " + str(exception)) from exception
