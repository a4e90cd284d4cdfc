from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse, PlainTextResponse, Response

from text_detection_service.processor.errors import ServiceError, StorageError, ValidationError
from text_detection_service.utils.utils import build_error_response


async def validation_error_handler(request: Request, exc: ValidationError) -> Response:
    return PlainTextResponse(content=exc.message, status_code=400)


async def service_error_handler(request: Request, exc: ServiceError) -> Response:
    status_code = 504 if exc.code == "Timeout" else 502
    return ORJSONResponse(content=build_error_response(exc.code, exc.message), status_code=status_code)


async def storage_error_handler(request: Request, exc: StorageError) -> Response:
    return ORJSONResponse(content=build_error_response("StorageError", exc.message), status_code=500)


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    return PlainTextResponse(content="Internal Server Error", status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ServiceError, service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StorageError, storage_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
