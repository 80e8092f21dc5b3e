"""
Core processing components.

The detection postprocessing pipeline (decoder, suppression, pipeline) and
the streaming frame pipeline (transforms, video handles, controller) live
here, alongside the thin single-image OpenCV wrappers.
"""

from .decoder import decode
from .inference import DarknetEngine, InferenceEngine, build_input_tensor, load_class_names
from .pipeline import annotate, run_detection
from .stream import FrameStreamController
from .suppression import iou, suppress
from .transforms import BackgroundSubtractTransform, GrayscaleTransform

__all__ = [
    "BackgroundSubtractTransform",
    "DarknetEngine",
    "FrameStreamController",
    "GrayscaleTransform",
    "InferenceEngine",
    "annotate",
    "build_input_tensor",
    "decode",
    "iou",
    "load_class_names",
    "run_detection",
    "suppress",
]
