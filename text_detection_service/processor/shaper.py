from typing import Any, Callable

from text_detection_service.dto.detection_result import DetectionResult

TEXT_SEPARATOR = ","

Shaper = Callable[[DetectionResult], Any]


def shape_full(result: DetectionResult) -> dict[str, Any]:
    """Serialize the result with the provider's field names, detections in provider order.

    Only fields the provider sent are echoed back, explicit nulls included.
    """
    shaped = result.model_dump(mode="json", by_alias=True, exclude_unset=True)
    shaped.setdefault("TextDetections", [])
    return shaped


def shape_text_only(result: DetectionResult) -> str:
    """Join every detected text, LINEs and WORDs alike, with commas and no escaping.

    An empty result yields an empty string.
    """
    return TEXT_SEPARATOR.join(detection.text for detection in result.detections)
