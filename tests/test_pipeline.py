"""
Tests for the detection pipeline and its inference collaborators.
"""

import os
import tempfile
import unittest

import cv2
import numpy as np

from vision_ops.core.inference import DarknetEngine, build_input_tensor, load_class_names
from vision_ops.core.pipeline import annotate, run_detection
from vision_ops.errors import (
    ConfigurationError,
    ConsistencyError,
    ProcessingError,
    SourceUnavailable,
)
from vision_ops.models import Candidate, DetectionResult, Rect

CLASS_NAMES = ["person", "car"]


class FakeEngine:
    """Returns fixed tensors and records what it was given."""

    def __init__(self, tensors=None, error=None):
        self.tensors = tensors or []
        self.error = error
        self.inputs = []

    def forward(self, input_tensor):
        self.inputs.append(input_tensor)
        if self.error is not None:
            raise self.error
        return self.tensors


def blank_image(width=416, height=416):
    return np.zeros((height, width, 3), dtype=np.uint8)


class TestRunDetection(unittest.TestCase):
    """Test the end-to-end detection pipeline with a fake engine."""

    def test_single_detection(self):
        """Test one confident row becomes one labeled detection."""
        engine = FakeEngine([np.array([[208, 208, 50, 50, 0.9, 0.1, 0.8]], dtype=np.float32)])

        result, annotated = run_detection(blank_image(), engine, CLASS_NAMES, 0.5, 0.4, 416, 416)

        self.assertEqual(len(result), 1)
        self.assertEqual(result[0].class_id, 1)
        self.assertEqual(result[0].box, Rect(183, 183, 50, 50))
        self.assertEqual(annotated.shape, (416, 416, 3))

    def test_annotates_a_copy(self):
        """Test the input image is left untouched while the copy gets drawn on."""
        image = blank_image()
        engine = FakeEngine([np.array([[208, 208, 50, 50, 0.9, 0.1, 0.8]], dtype=np.float32)])

        _, annotated = run_detection(image, engine, CLASS_NAMES, 0.5, 0.4, 416, 416)

        self.assertEqual(int(image.sum()), 0)
        self.assertGreater(int(annotated.sum()), 0)
        self.assertIsNot(annotated, image)

    def test_nothing_detected_returns_plain_copy(self):
        """Test an empty result still yields an identical copy."""
        image = blank_image()
        image[10:20, 10:20] = 255
        engine = FakeEngine([np.zeros((0, 7), dtype=np.float32)])

        result, annotated = run_detection(image, engine, CLASS_NAMES, 0.5, 0.4, 416, 416)

        self.assertEqual(len(result), 0)
        np.testing.assert_array_equal(annotated, image)
        self.assertIsNot(annotated, image)

    def test_duplicates_are_suppressed(self):
        """Test near-identical proposals collapse into the most confident one."""
        tensor = np.array(
            [
                [208, 208, 50, 50, 0.9, 0.7, 0.0],
                [210, 208, 50, 50, 0.9, 0.9, 0.0],
                [100, 100, 20, 20, 0.9, 0.0, 0.6],
            ],
            dtype=np.float32,
        )

        result, _ = run_detection(blank_image(), FakeEngine([tensor]), CLASS_NAMES, 0.5, 0.4, 416, 416)

        self.assertEqual(len(result), 2)
        self.assertAlmostEqual(result[0].confidence, 0.9, places=5)
        self.assertEqual(result[0].box.left, 185)
        self.assertEqual(result[1].class_id, 1)

    def test_boxes_rescaled_to_image(self):
        """Test boxes come back in original-image pixels."""
        engine = FakeEngine([np.array([[208, 208, 100, 50, 1.0, 0.9, 0.0]], dtype=np.float32)])

        result, _ = run_detection(blank_image(832, 624), engine, CLASS_NAMES, 0.5, 0.4, 416, 416)

        self.assertEqual(result[0].box, Rect(316, 274, 200, 75))

    def test_engine_receives_network_sized_tensor(self):
        """Test the engine gets a 1x3xHxW blob at the network input size."""
        engine = FakeEngine()

        run_detection(blank_image(640, 480), engine, CLASS_NAMES, 0.5, 0.4, 320, 256)

        self.assertEqual(engine.inputs[0].shape, (1, 3, 256, 320))

    def test_custom_tensor_builder(self):
        """Test the tensor builder can be swapped out."""
        engine = FakeEngine()
        marker = np.ones((1, 3, 2, 2), dtype=np.float32)

        run_detection(
            blank_image(), engine, CLASS_NAMES, 0.5, 0.4, 416, 416,
            tensor_builder=lambda image, w, h: marker,
        )

        self.assertIs(engine.inputs[0], marker)

    def test_empty_image_rejected(self):
        """Test an empty image is a configuration error."""
        engine = FakeEngine()

        with self.assertRaises(ConfigurationError):
            run_detection(np.zeros((0, 0, 3), dtype=np.uint8), engine, CLASS_NAMES, 0.5, 0.4, 416, 416)
        self.assertEqual(engine.inputs, [])

    def test_empty_class_names_rejected(self):
        """Test an empty class list is a configuration error."""
        with self.assertRaises(ConfigurationError):
            run_detection(blank_image(), FakeEngine(), [], 0.5, 0.4, 416, 416)

    def test_unknown_class_id(self):
        """Test a class id beyond the names list is a consistency error."""
        tensor = np.array([[208, 208, 50, 50, 0.9, 0.0, 0.0, 0.95]], dtype=np.float32)

        with self.assertRaises(ConsistencyError):
            run_detection(blank_image(), FakeEngine([tensor]), CLASS_NAMES, 0.5, 0.4, 416, 416)

    def test_engine_failure(self):
        """Test an OpenCV error in the forward pass becomes a processing error."""
        engine = FakeEngine(error=cv2.error("forward failed"))

        with self.assertRaises(ProcessingError):
            run_detection(blank_image(), engine, CLASS_NAMES, 0.5, 0.4, 416, 416)

    def test_any_engine_failure_is_wrapped(self):
        """Test a non-OpenCV engine error also becomes a processing error."""
        engine = FakeEngine(error=RuntimeError("backend crashed"))

        with self.assertRaises(ProcessingError) as ctx:
            run_detection(blank_image(), engine, CLASS_NAMES, 0.5, 0.4, 416, 416)

        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)
        self.assertIn("backend crashed", str(ctx.exception))

    def test_engine_vision_ops_error_passes_through(self):
        """Test an engine raising our own errors is not re-wrapped."""
        engine = FakeEngine(error=SourceUnavailable("camera gone"))

        with self.assertRaises(SourceUnavailable):
            run_detection(blank_image(), engine, CLASS_NAMES, 0.5, 0.4, 416, 416)


class TestAnnotate(unittest.TestCase):
    """Test drawing detections."""

    def test_draws_box_outline(self):
        """Test the box edge is drawn in green."""
        result = DetectionResult((Candidate(Rect(100, 100, 50, 50), 0, 0.75),))

        annotated = annotate(blank_image(), result, CLASS_NAMES)

        self.assertEqual(tuple(annotated[125, 100]), (0, 255, 0))
        # interior stays untouched
        self.assertEqual(tuple(annotated[125, 125]), (0, 0, 0))


class TestInferenceHelpers(unittest.TestCase):
    """Test input tensor building, class names and model loading."""

    def test_build_input_tensor(self):
        """Test the blob is scaled to [0, 1] with channels swapped to RGB."""
        image = blank_image(64, 32)
        image[:, :, 0] = 255  # blue

        blob = build_input_tensor(image, 16, 16)

        self.assertEqual(blob.shape, (1, 3, 16, 16))
        self.assertAlmostEqual(float(blob[0, 2].max()), 1.0, places=5)
        self.assertEqual(float(blob[0, 0].max()), 0.0)

    def write_names(self, text):
        with tempfile.NamedTemporaryFile("w", suffix=".names", delete=False) as f:
            f.write(text)
        self.addCleanup(os.unlink, f.name)
        return f.name

    def test_load_class_names(self):
        """Test names are stripped and trailing blank lines dropped."""
        path = self.write_names("person\n  car \r\nbicycle\n\n\n")

        self.assertEqual(load_class_names(path), ["person", "car", "bicycle"])

    def test_blank_line_keeps_class_ids(self):
        """Test an interior blank line still occupies its class id."""
        path = self.write_names("person\n\ncar\n")

        names = load_class_names(path)

        self.assertEqual(names, ["person", "", "car"])
        self.assertEqual(names[2], "car")

    def test_blank_line_labels_detections_by_position(self):
        """Test a class-2 detection is labelled with line 3 of the names file."""
        names = load_class_names(self.write_names("person\n\ncar\n"))
        tensor = np.array([[208, 208, 50, 50, 0.9, 0.0, 0.0, 0.95]], dtype=np.float32)

        result, _ = run_detection(blank_image(), FakeEngine([tensor]), names, 0.5, 0.4, 416, 416)

        self.assertEqual(result.to_records(names)[0]["class_name"], "car")

    def test_load_class_names_empty_file(self):
        """Test a names file without names is rejected."""
        with self.assertRaises(ConfigurationError):
            load_class_names(self.write_names("\n\n"))

    def test_load_class_names_missing_file(self):
        """Test an unreadable names file is a processing error."""
        with self.assertRaises(ProcessingError):
            load_class_names("/nonexistent/coco.names")

    def test_darknet_engine_missing_files(self):
        """Test model files are checked before loading."""
        with self.assertRaises(ProcessingError):
            DarknetEngine("/nonexistent/yolov3.cfg", "/nonexistent/yolov3.weights")


class TestDetectionResult(unittest.TestCase):
    """Test the result model."""

    def test_to_records(self):
        """Test records carry class name, rounded confidence and box."""
        result = DetectionResult((Candidate(Rect(1, 2, 3, 4), 1, 0.123456),))

        records = result.to_records(CLASS_NAMES)

        self.assertEqual(
            records,
            [
                {
                    "class_id": 1,
                    "class_name": "car",
                    "confidence": 0.1235,
                    "box": {"left": 1, "top": 2, "width": 3, "height": 4},
                }
            ],
        )

    def test_rect_geometry(self):
        """Test derived edges and degenerate area."""
        box = Rect(10, 20, 30, 40)
        self.assertEqual((box.right, box.bottom, box.area), (40, 60, 1200))
        self.assertEqual(Rect(0, 0, 0, 5).area, 0)
        self.assertTrue(Rect(0, 0, 5, -1).is_degenerate)


if __name__ == "__main__":
    unittest.main()
