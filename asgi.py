"""
This file is used to create a FastAPI application that will be served by a ASGI server
"""
import uvicorn

from text_detection_service.app import create_app
from text_detection_service.settings import settings

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT, reload=False)
