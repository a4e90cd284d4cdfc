import unittest

from text_detection_service.dto.detection_result import DetectionResult
from text_detection_service.processor.shaper import shape_full, shape_text_only

from ..tests.utils_helpers import make_detect_text_response


class TestResponseShaper(unittest.TestCase):

    def test_shape_full_keeps_provider_names_and_order(self):
        payload = make_detect_text_response(["IT'S", "MONDAY", "but keep", "Smiling"])
        shaped = shape_full(DetectionResult.model_validate(payload))

        self.assertEqual(shaped["TextModelVersion"], "3.0")
        self.assertEqual([d["DetectedText"] for d in shaped["TextDetections"]],
                         ["IT'S", "MONDAY", "but keep", "Smiling"])
        self.assertEqual(shaped["TextDetections"], payload["TextDetections"])

    def test_shape_full_keeps_unknown_detection_fields(self):
        payload = make_detect_text_response(["Smiling"], kind="WORD")
        payload["TextDetections"][0]["ParentId"] = 3
        payload["TextDetections"][0]["Extra"] = "kept"

        shaped = shape_full(DetectionResult.model_validate(payload))

        detection = shaped["TextDetections"][0]
        self.assertEqual(detection["Type"], "WORD")
        self.assertEqual(detection["ParentId"], 3)
        self.assertEqual(detection["Extra"], "kept")

    def test_shape_full_ignores_transport_metadata(self):
        payload = make_detect_text_response(["a"])
        payload["ResponseMetadata"] = {"RequestId": "abc", "HTTPStatusCode": 200}

        shaped = shape_full(DetectionResult.model_validate(payload))

        self.assertNotIn("ResponseMetadata", shaped)

    def test_shape_full_echoes_only_what_the_provider_sent(self):
        payload = {"TextDetections": [{"Type": "WORD", "Id": 1, "Hint": None}]}

        shaped = shape_full(DetectionResult.model_validate(payload))

        self.assertEqual(shaped, payload)

    def test_shape_full_of_empty_result_still_has_detections(self):
        self.assertEqual(shape_full(DetectionResult()), {"TextDetections": []})

    def test_shape_full_zero_detections(self):
        shaped = shape_full(DetectionResult.model_validate({"TextDetections": []}))
        self.assertEqual(shaped, {"TextDetections": []})

    def test_shape_text_only_joins_with_commas_in_order(self):
        result = DetectionResult.model_validate(make_detect_text_response(["IT'S", "MONDAY", "but keep"]))
        self.assertEqual(shape_text_only(result), "IT'S,MONDAY,but keep")

    def test_shape_text_only_does_not_escape(self):
        result = DetectionResult.model_validate(make_detect_text_response(['a,b', 'say "hi"']))
        self.assertEqual(shape_text_only(result), 'a,b,say "hi"')

    def test_shape_text_only_zero_detections(self):
        self.assertEqual(shape_text_only(DetectionResult()), "")
