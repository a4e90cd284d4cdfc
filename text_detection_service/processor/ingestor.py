from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

from starlette.concurrency import run_in_threadpool

from text_detection_service.dto.uploaded_image import UploadedImage
from text_detection_service.processor.errors import StorageError, ValidationError
from text_detection_service.settings import settings
from text_detection_service.utils.utils import (
    build_upload_file_name,
    delete_tmp_files,
    detect_mime_type,
    generate_file_id,
    setup_logging,
)

ALLOWED_IMAGE_EXTENSIONS: tuple[str, ...] = (".png", ".jpg", ".jpeg")

UNSUPPORTED_FORMAT_MESSAGE = "Please check the file format, it is not in image format that is jpeg,jpg or png"
EMPTY_FILE_MESSAGE = "The file cannot be empty"


class AsyncReadable(Protocol):
    async def read(self, size: int = -1) -> bytes: ...


class ImageIngestor:
    """Validates uploads and stores each one under a request-unique name."""

    def __init__(self, upload_dir: str, chunk_size: int = 1024 * 1024, log: logging.Logger | None = None) -> None:
        self.upload_dir = upload_dir
        self.chunk_size = chunk_size
        self.log = log or setup_logging(component_name="ingestor", log_level=settings.LOG_LEVEL)

    @staticmethod
    def resolve_extension(original_name: str | None) -> str:
        """Return the lower-cased image extension of `original_name`.

        Raises:
            ValidationError: the extension is not png, jpg or jpeg.
        """
        ext = os.path.splitext(os.path.basename(original_name or ""))[1].lower()
        if ext not in ALLOWED_IMAGE_EXTENSIONS:
            raise ValidationError(UNSUPPORTED_FORMAT_MESSAGE)
        return ext

    async def ingest(self, stream: AsyncReadable | None, original_name: str | None,
                     content_type: str | None = None) -> UploadedImage:
        """Validate the upload and write it to the upload directory.

        Nothing is written when validation fails. A partially written file is
        removed before StorageError is raised.

        Args:
            stream: Async readable upload body (starlette UploadFile).
            original_name: File name sent by the client.
            content_type: Content type from the multipart part header.

        Returns:
            UploadedImage: Handle to the stored file.
        """
        extension = self.resolve_extension(original_name)
        original_name = str(original_name)

        first_chunk = await stream.read(self.chunk_size) if stream is not None else b""
        if not first_chunk:
            raise ValidationError(EMPTY_FILE_MESSAGE)

        file_id = generate_file_id()
        storage_path = os.path.join(self.upload_dir, build_upload_file_name(file_id, original_name))
        created = False
        size = 0

        try:
            await run_in_threadpool(os.makedirs, self.upload_dir, exist_ok=True)
            # "x" so two requests can never end up writing the same path
            tmp_file = await run_in_threadpool(open, storage_path, "xb")
            created = True
            try:
                chunk = first_chunk
                while chunk:
                    await run_in_threadpool(tmp_file.write, chunk)
                    size += len(chunk)
                    chunk = await stream.read(self.chunk_size)
                await run_in_threadpool(os.fsync, tmp_file.fileno())
            finally:
                await run_in_threadpool(tmp_file.close)
        except OSError as exception:
            if created:
                await run_in_threadpool(delete_tmp_files, [storage_path])
            self.log.error("could not store upload file_id=%s path=%s: %s", file_id, storage_path, exception)
            raise StorageError("could not store upload " + file_id + ": "
                               + (exception.strerror or type(exception).__name__)) from exception

        uploaded_image = UploadedImage(
            file_id=file_id,
            storage_path=storage_path,
            original_name=original_name,
            extension=extension,  # type: ignore[arg-type]
            content_type=detect_mime_type(first_chunk[:262], fallback=content_type),
            size=size,
        )

        self.log.debug("stored upload file_id=%s name=%s bytes=%s type=%s",
                       file_id, original_name, size, uploaded_image.content_type)

        return uploaded_image

    async def read_bytes(self, uploaded_image: UploadedImage) -> bytes:
        try:
            return await run_in_threadpool(Path(uploaded_image.storage_path).read_bytes)
        except OSError as exception:
            self.log.error("could not read stored upload file_id=%s path=%s: %s",
                           uploaded_image.file_id, uploaded_image.storage_path, exception)
            raise StorageError("could not read stored upload " + uploaded_image.file_id + ": "
                               + (exception.strerror or type(exception).__name__)) from exception

    async def release(self, uploaded_image: UploadedImage | None) -> None:
        """Delete the stored file of a finished request (no-op if never stored)."""
        if uploaded_image is None:
            return
        try:
            await run_in_threadpool(delete_tmp_files, [uploaded_image.storage_path])
        except OSError:
            self.log.error("failed to delete stored upload: " + uploaded_image.storage_path, exc_info=True)
