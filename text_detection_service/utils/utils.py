"""Utility helpers for the text detection service.

Shared behaviors across the API and processor layers: app info, error payloads,
upload file naming and cleanup, content sniffing and logging setup.
"""

import logging
import os
import sys
import time
import uuid
from typing import Any

import filetype

from text_detection_service.dto.error_response import ErrorResponse
from text_detection_service.settings import settings

# per path component limit of common filesystems (ext4, xfs, apfs)
MAX_FILE_NAME_BYTES = 255


def get_app_info() -> dict:
    """Return general information about the application.

    Used by the `/api/info` endpoint.

    Returns:
        dict: Application information (name, version, provider and region).
    """
    return {"service_app_name": "text-detection-service",
            "service_version": settings.TEXT_DETECTION_SERVICE_VERSION,
            "service_provider": "aws-rekognition",
            "service_region": settings.AWS_REGION}


def build_error_response(error: str, message: str) -> dict[str, Any]:
    """Build the JSON body returned for provider and storage failures.

    Args:
        error: Short error code (provider code or error class name).
        message: Human readable detail.

    Returns:
        dict[str, Any]: Error payload for the API.
    """
    return ErrorResponse(error=error, message=message).model_dump()


def generate_file_id() -> str:
    return uuid.uuid4().hex


def build_upload_file_name(file_id: str, original_name: str) -> str:
    """Return a request-unique storage name for an uploaded file.

    The name is `<epoch millis>-<file id>-<original base name>`, any directory
    components sent by the client are dropped. The stem of the base name is
    cut so the whole name fits in MAX_FILE_NAME_BYTES, the lower-cased
    extension is kept.

    Args:
        file_id: Unique id generated for the upload.
        original_name: File name sent by the client.

    Returns:
        str: File name to use inside the upload directory.
    """
    base_name = os.path.basename(original_name.replace("\\", "/")) or "image"
    stem, ext = os.path.splitext(base_name)
    ext = ext.lower()
    prefix = f"{int(time.time() * 1000)}-{file_id}-"

    budget = MAX_FILE_NAME_BYTES - len(prefix.encode("utf-8")) - len(ext.encode("utf-8"))
    stem = stem.encode("utf-8")[:max(budget, 0)].decode("utf-8", errors="ignore") or "image"
    return prefix + stem + ext


def delete_tmp_files(file_paths: list[str]) -> None:
    """Delete temporary files if they exist.

    Args:
        file_paths: Paths to delete (missing paths are ignored).
    """
    for file_path in file_paths:
        if file_path and os.path.exists(file_path):
            os.remove(file_path)


def detect_mime_type(head: bytes, fallback: str | None = None) -> str:
    """Best-effort MIME type detection using the `filetype` library.

    Args:
        head: First bytes of the file.
        fallback: Value to use when the content is not recognized
            (typically the multipart part header).

    Returns:
        str: Detected MIME type, the fallback, or `application/octet-stream`.
    """
    mime = None
    try:
        mime = filetype.guess_mime(head)
    except Exception:
        logging.error("Could not determine file Type")
    return mime or fallback or "application/octet-stream"


def setup_logging(component_name: str = "config_logger", log_level: int = 20) -> logging.Logger:
    """Configure a logger that writes to stdout with a consistent format.

    Args:
        component_name: Logger name to configure.
        log_level: Logging level to set on the logger and handler.

    Returns:
        logging.Logger: Configured logger instance.
    """
    root_logger = logging.getLogger(component_name)
    log_format = '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s'
    log_handler = logging.StreamHandler(sys.stdout)
    log_handler.setFormatter(logging.Formatter(fmt=log_format))
    log_handler.setLevel(level=log_level)
    root_logger.setLevel(level=log_level)
    root_logger.propagate = False

    # only add the handler if a previous one does not exists
    handler_exists = False
    for h in root_logger.handlers:
        if isinstance(h, logging.StreamHandler) and h.level == log_handler.level:
            handler_exists = True
            break

    if not handler_exists:
        root_logger.addHandler(log_handler)

    return root_logger
