from fastapi import APIRouter

from text_detection_service.api.detect import detect_api
from text_detection_service.api.health import health_api

api = APIRouter()

api.include_router(health_api)
api.include_router(detect_api)
