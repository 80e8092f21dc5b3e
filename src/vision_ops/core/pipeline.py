"""
Detection Pipeline - decode, filter, rescale, suppress, annotate.

Runs one image through an inference engine and turns the raw output
into a labeled, deduplicated set of boxes drawn on a copy of the image.
"""

import logging
from collections.abc import Callable, Sequence

import cv2
import numpy as np

from ..errors import (
    ConfigurationError,
    ConsistencyError,
    ProcessingError,
    VisionOpsError,
)
from ..models import DetectionResult
from ..utils.constants import (
    BOX_COLOR,
    BOX_THICKNESS,
    LABEL_FONT_SCALE,
    LABEL_FONT_THICKNESS,
    LABEL_TEXT_COLOR,
)
from .decoder import decode
from .inference import InferenceEngine, build_input_tensor
from .suppression import suppress

logger = logging.getLogger(__name__)

TensorBuilder = Callable[[np.ndarray, int, int], np.ndarray]


def run_detection(
    image: np.ndarray,
    engine: InferenceEngine,
    class_names: Sequence[str],
    confidence_threshold: float,
    overlap_threshold: float,
    input_width: int,
    input_height: int,
    tensor_builder: TensorBuilder = build_input_tensor,
) -> tuple[DetectionResult, np.ndarray]:
    """
    Detect objects in one image.

    Args:
        image: BGR image
        engine: Inference engine producing raw detection tensors
        class_names: Class names indexed by class id
        confidence_threshold: Minimum winning class score (exclusive)
        overlap_threshold: IoU above which overlapping boxes are suppressed
        input_width: Network input width
        input_height: Network input height
        tensor_builder: Builds the network input tensor from the image

    Returns:
        (DetectionResult, annotated copy of the image)

    Raises:
        ConfigurationError: Empty image or empty class names
        ProcessingError: The inference engine failed
        ConsistencyError: A kept class id has no class name
    """
    if image is None or image.size == 0:
        raise ConfigurationError("Input image for object detection is empty")
    if not class_names:
        raise ConfigurationError("Class names list is empty")

    image_height, image_width = image.shape[:2]

    try:
        tensors = engine.forward(tensor_builder(image, input_width, input_height))
    except VisionOpsError:
        raise
    except Exception as e:
        raise ProcessingError(f"Inference failed: {e}") from e

    candidates = decode(
        tensors,
        image_width,
        image_height,
        input_width,
        input_height,
        confidence_threshold,
    )
    logger.info(f"Initial detections: {len(candidates)}")

    kept = suppress(candidates, overlap_threshold)
    result = DetectionResult(tuple(candidates[i] for i in kept))
    logger.info(f"Final detections after NMS: {len(result)}")

    _check_class_ids(result, class_names)

    return result, annotate(image, result, class_names)


def annotate(
    image: np.ndarray, result: DetectionResult, class_names: Sequence[str]
) -> np.ndarray:
    """
    Draw boxes and "{class}: {confidence}" labels on a copy of the image.

    Args:
        image: Source image (not modified)
        result: Detections to draw
        class_names: Class names indexed by class id

    Returns:
        Annotated copy
    """
    output = image.copy()

    for candidate in result:
        box = candidate.box
        cv2.rectangle(
            output,
            (box.left, box.top),
            (box.right, box.bottom),
            BOX_COLOR,
            BOX_THICKNESS,
        )

        label = f"{class_names[candidate.class_id]}: {candidate.confidence:.2f}"
        (text_w, text_h), baseline = cv2.getTextSize(
            label, cv2.FONT_HERSHEY_SIMPLEX, LABEL_FONT_SCALE, LABEL_FONT_THICKNESS
        )

        # Filled label background sitting on the top edge of the box
        cv2.rectangle(
            output,
            (box.left, box.top - text_h - baseline),
            (box.left + text_w, box.top),
            BOX_COLOR,
            cv2.FILLED,
        )
        cv2.putText(
            output,
            label,
            (box.left, box.top - baseline),
            cv2.FONT_HERSHEY_SIMPLEX,
            LABEL_FONT_SCALE,
            LABEL_TEXT_COLOR,
            LABEL_FONT_THICKNESS,
        )

    return output


def _check_class_ids(result: DetectionResult, class_names: Sequence[str]) -> None:
    """Fail loudly if the model predicts a class the names file lacks."""
    for candidate in result:
        if not 0 <= candidate.class_id < len(class_names):
            raise ConsistencyError(
                f"Decoded class id {candidate.class_id} outside class names "
                f"(have {len(class_names)})"
            )
