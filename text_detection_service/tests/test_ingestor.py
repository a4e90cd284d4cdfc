import io
import os
import tempfile
import unittest

from starlette.datastructures import UploadFile

from text_detection_service.processor.errors import StorageError, ValidationError
from text_detection_service.processor.ingestor import (
    EMPTY_FILE_MESSAGE,
    UNSUPPORTED_FORMAT_MESSAGE,
    ImageIngestor,
)

from ..tests.utils_helpers import JPEG_HEADER, make_image


def make_upload(content: bytes, filename: str) -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)


class TestImageIngestor(unittest.IsolatedAsyncioTestCase):

    def setUp(self) -> None:
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.upload_dir = os.path.join(self.tmp_dir.name, "images")
        self.ingestor = ImageIngestor(upload_dir=self.upload_dir, chunk_size=4)

    def tearDown(self) -> None:
        self.tmp_dir.cleanup()

    def stored_files(self) -> list[str]:
        if not os.path.isdir(self.upload_dir):
            return []
        return os.listdir(self.upload_dir)

    async def test_ingest_stores_png_under_unique_name(self):
        content = make_image("hello world")
        uploaded = await self.ingestor.ingest(make_upload(content, "scan.png"), "scan.png")

        self.assertEqual(uploaded.extension, ".png")
        self.assertEqual(uploaded.original_name, "scan.png")
        self.assertEqual(uploaded.size, len(content))
        self.assertEqual(uploaded.content_type, "image/png")
        self.assertEqual(os.path.dirname(uploaded.storage_path), self.upload_dir)
        self.assertTrue(os.path.basename(uploaded.storage_path).endswith("-" + uploaded.file_id + "-scan.png"))
        with open(uploaded.storage_path, "rb") as f:
            self.assertEqual(f.read(), content)

    async def test_ingest_accepts_jpg_and_jpeg_in_any_case(self):
        for name, ext in (("a.jpg", ".jpg"), ("b.JPEG", ".jpeg"), ("c.Png", ".png")):
            uploaded = await self.ingestor.ingest(make_upload(JPEG_HEADER + b"x", name), name)
            self.assertEqual(uploaded.extension, ext)
        self.assertEqual(len(self.stored_files()), 3)

    async def test_ingest_rejects_unsupported_extension_without_writing(self):
        for name in ("notes.txt", "image.gif", "png", "archive.png.zip", ""):
            with self.assertRaises(ValidationError) as ctx:
                await self.ingestor.ingest(make_upload(b"data", name), name)
            self.assertEqual(ctx.exception.message, UNSUPPORTED_FORMAT_MESSAGE)
        self.assertEqual(self.stored_files(), [])

    async def test_ingest_rejects_empty_stream_without_writing(self):
        with self.assertRaises(ValidationError) as ctx:
            await self.ingestor.ingest(make_upload(b"", "empty.png"), "empty.png")
        self.assertEqual(ctx.exception.message, EMPTY_FILE_MESSAGE)

        with self.assertRaises(ValidationError):
            await self.ingestor.ingest(None, "missing.png")

        self.assertEqual(self.stored_files(), [])

    async def test_same_upload_twice_produces_two_files(self):
        content = make_image("same")
        first = await self.ingestor.ingest(make_upload(content, "same.png"), "same.png")
        second = await self.ingestor.ingest(make_upload(content, "same.png"), "same.png")

        self.assertNotEqual(first.file_id, second.file_id)
        self.assertNotEqual(first.storage_path, second.storage_path)
        self.assertEqual(len(self.stored_files()), 2)

    async def test_client_directories_are_dropped_from_name(self):
        uploaded = await self.ingestor.ingest(make_upload(make_image("x"), "../../etc/evil.png"),
                                              "../../etc/evil.png")
        self.assertEqual(os.path.dirname(uploaded.storage_path), self.upload_dir)
        self.assertTrue(uploaded.storage_path.endswith("-evil.png"))

    async def test_read_bytes_and_release(self):
        content = make_image("read me")
        uploaded = await self.ingestor.ingest(make_upload(content, "r.png"), "r.png")

        self.assertEqual(await self.ingestor.read_bytes(uploaded), content)

        await self.ingestor.release(uploaded)
        self.assertFalse(os.path.exists(uploaded.storage_path))

        # releasing twice or releasing nothing is harmless
        await self.ingestor.release(uploaded)
        await self.ingestor.release(None)

    async def test_read_bytes_of_missing_file_raises_storage_error(self):
        uploaded = await self.ingestor.ingest(make_upload(make_image("gone"), "g.png"), "g.png")
        os.remove(uploaded.storage_path)

        with self.assertRaises(StorageError):
            await self.ingestor.read_bytes(uploaded)

    async def test_unwritable_upload_dir_raises_storage_error(self):
        blocker = os.path.join(self.tmp_dir.name, "blocker")
        with open(blocker, "wb") as f:
            f.write(b"not a directory")
        ingestor = ImageIngestor(upload_dir=os.path.join(blocker, "images"))

        with self.assertRaises(StorageError):
            await ingestor.ingest(make_upload(make_image("x"), "x.png"), "x.png")

    async def test_long_file_name_is_shortened_to_fit_the_filesystem(self):
        name = "a" * 246 + ".PNG"
        content = make_image("long name")

        uploaded = await self.ingestor.ingest(make_upload(content, name), name)

        stored_name = os.path.basename(uploaded.storage_path)
        self.assertLessEqual(len(stored_name.encode("utf-8")), 255)
        self.assertTrue(stored_name.endswith("aaa.png"))
        self.assertIn("-" + uploaded.file_id + "-", stored_name)
        self.assertEqual(uploaded.original_name, name)
        with open(uploaded.storage_path, "rb") as f:
            self.assertEqual(f.read(), content)

    async def test_storage_error_message_does_not_expose_server_path(self):
        blocker = os.path.join(self.tmp_dir.name, "blocker")
        with open(blocker, "wb") as f:
            f.write(b"not a directory")
        ingestor = ImageIngestor(upload_dir=os.path.join(blocker, "images"))

        with self.assertRaises(StorageError) as ctx:
            await ingestor.ingest(make_upload(make_image("x"), "x.png"), "x.png")

        self.assertNotIn(self.tmp_dir.name, ctx.exception.message)
        self.assertTrue(ctx.exception.message.startswith("could not store upload "))
