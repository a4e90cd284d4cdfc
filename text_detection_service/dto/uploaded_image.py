from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UploadedImage(BaseModel):
    """An accepted upload persisted under the upload directory for one request."""

    model_config = ConfigDict(frozen=True)

    file_id: str = Field(..., description="Unique id generated for this upload.")
    storage_path: str = Field(..., description="Absolute path of the stored file.")
    original_name: str = Field(..., description="File name sent by the client.")
    extension: Literal[".png", ".jpg", ".jpeg"] = Field(..., description="Lower-cased file extension.")
    content_type: str = Field("application/octet-stream", description="Sniffed MIME type, informational only.")
    size: int = Field(0, ge=0, description="Number of bytes written.")
