from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class TextDetection(BaseModel):
    """A single LINE or WORD reported by the detection provider.

    Field aliases are the provider's wire names; fields the model does not
    know about are kept so the full response can be passed through as-is.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    text: str = Field("", alias="DetectedText")
    kind: Literal["LINE", "WORD"] = Field(..., alias="Type")
    confidence: float = Field(0.0, alias="Confidence")
    geometry: dict[str, Any] | None = Field(None, alias="Geometry")
    id: int | None = Field(None, alias="Id")
    parent_id: int | None = Field(None, alias="ParentId")


class DetectionResult(BaseModel):
    """Ordered detections for one image, in the order the provider returned them."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", protected_namespaces=())

    detections: list[TextDetection] = Field(default_factory=list, alias="TextDetections")
    model_version: str | None = Field(None, alias="TextModelVersion")


class DetectionRequest(BaseModel):
    """Bytes of one stored upload, handed to the provider."""

    image_bytes: bytes = Field(..., repr=False)
