from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.datastructures import UploadFile

from text_detection_service.dto.error_response import ErrorResponse
from text_detection_service.processor.dispatcher import Dispatcher
from text_detection_service.processor.shaper import Shaper, shape_full, shape_text_only

detect_api = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"description": "Missing, empty or unsupported image", "content": {"text/plain": {}}},
    500: {"model": ErrorResponse, "description": "Upload could not be stored"},
    502: {"model": ErrorResponse, "description": "Text detection provider failed"},
    504: {"model": ErrorResponse, "description": "Text detection provider timed out"},
}


async def get_uploaded_file(request: Request) -> UploadFile | None:
    """Return the first file part of a multipart body, whatever its field name."""
    form = await request.form()
    for _field_name, value in form.multi_items():
        if isinstance(value, UploadFile):
            return value
    return None


async def _dispatch(request: Request, shaper: Shaper) -> ORJSONResponse:
    dispatcher: Dispatcher = request.app.state.dispatcher
    upload = await get_uploaded_file(request)
    return ORJSONResponse(content=await dispatcher.dispatch(upload, shaper))


@detect_api.post("/detectText", response_class=ORJSONResponse, responses=ERROR_RESPONSES)
async def detect_text(request: Request) -> ORJSONResponse:
    """Return the provider's full text detection payload for the uploaded image."""
    return await _dispatch(request, shape_full)


@detect_api.post("/getOnlyText", response_class=ORJSONResponse, responses=ERROR_RESPONSES)
async def get_only_text(request: Request) -> ORJSONResponse:
    """Return the detected text of the uploaded image as one comma-joined string."""
    return await _dispatch(request, shape_text_only)
