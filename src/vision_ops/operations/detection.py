"""
Detector operations: detect-objects (Darknet YOLO), detect-faces (Haar cascade).
"""

import json
import logging
import os

import cv2

from ..config.schemas import FaceParams, ObjectDetectionParams
from ..core.faces import detect_faces, load_cascade
from ..core.image_io import read_image, write_image
from ..core.inference import DarknetEngine, load_class_names
from ..core.pipeline import run_detection
from ..errors import ProcessingError, SinkUnavailable
from ..models import DetectionResult
from .registry import OperationContext, register

logger = logging.getLogger(__name__)


@register("detect-objects", ObjectDetectionParams, description="YOLO object detection")
def run_detect_objects(ctx: OperationContext, params: ObjectDetectionParams) -> dict:
    image = read_image(ctx.inputs[0])
    class_names = load_class_names(params.yolo_names)
    engine = DarknetEngine(params.yolo_cfg, params.yolo_weights)

    result, annotated = run_detection(
        image,
        engine,
        class_names,
        confidence_threshold=params.conf,
        overlap_threshold=params.nms,
        input_width=params.input_width,
        input_height=params.input_height,
    )

    for record in result.to_records(class_names):
        logger.info(f"  {record['class_name']}: {record['confidence']:.2f} at {record['box']}")

    write_image(ctx.output, annotated)
    if params.report:
        write_report(params.report, ctx.inputs[0], result, class_names)

    return {"detections": len(result)}


@register("detect-faces", FaceParams, description="Haar cascade face detection")
def run_detect_faces(ctx: OperationContext, params: FaceParams) -> dict:
    image = read_image(ctx.inputs[0])
    cascade = load_cascade(params.cascade)

    try:
        faces, annotated = detect_faces(
            image,
            cascade,
            scale_factor=params.scale_factor,
            min_neighbors=params.min_neighbors,
            min_size=params.min_size,
        )
    except cv2.error as e:
        raise ProcessingError(f"Face detection failed: {e}") from e

    write_image(ctx.output, annotated)
    return {"faces": len(faces)}


def write_report(
    report_path: str, source: str, result: DetectionResult, class_names: list[str]
) -> None:
    """
    Write kept detections as a JSON document.

    Args:
        report_path: Destination JSON path
        source: Input image path recorded in the report
        result: Detections to write
        class_names: Class names indexed by class id
    """
    document = {
        "source": source,
        "count": len(result),
        "detections": result.to_records(class_names),
    }

    try:
        out_dir = os.path.dirname(report_path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(report_path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)
    except OSError as e:
        raise SinkUnavailable(f"Could not write report: {report_path}: {e}") from e

    logger.info(f"Report saved: {report_path}")
