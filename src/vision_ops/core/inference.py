"""
Inference engine adapter for Darknet YOLO models via OpenCV DNN.
"""

import logging
from pathlib import Path
from typing import Protocol

import cv2
import numpy as np

from ..errors import ConfigurationError, ProcessingError

logger = logging.getLogger(__name__)


class InferenceEngine(Protocol):
    """
    Protocol for inference engines.

    Any model runner that turns one input tensor into raw detection
    tensors can drive the detection pipeline.
    """

    def forward(self, input_tensor: np.ndarray) -> list[np.ndarray]:
        """
        Run one forward pass.

        Args:
            input_tensor: NCHW float tensor built by build_input_tensor

        Returns:
            Raw detection tensors, one per output layer
        """
        ...


class DarknetEngine:
    """Darknet (.cfg + .weights) network loaded through cv2.dnn on CPU."""

    def __init__(self, config_path: str, weights_path: str):
        for label, path in (("config", config_path), ("weights", weights_path)):
            if not Path(path).is_file():
                raise ProcessingError(f"YOLO {label} file not found: {path}")

        try:
            self.net = cv2.dnn.readNetFromDarknet(config_path, weights_path)
        except cv2.error as e:
            raise ProcessingError(
                f"Failed to load YOLO model using config: {config_path} "
                f"and weights: {weights_path}: {e}"
            ) from e

        if self.net.empty():
            raise ProcessingError(
                f"Failed to load YOLO model using config: {config_path} "
                f"and weights: {weights_path}"
            )

        self.net.setPreferableBackend(cv2.dnn.DNN_BACKEND_OPENCV)
        self.net.setPreferableTarget(cv2.dnn.DNN_TARGET_CPU)
        self.output_names = list(self.net.getUnconnectedOutLayersNames())

        logger.info(f"Model initialized: {weights_path}")
        logger.info(f"Output layers: {', '.join(self.output_names)}")

    def forward(self, input_tensor: np.ndarray) -> list[np.ndarray]:
        self.net.setInput(input_tensor)
        outputs = self.net.forward(self.output_names)
        logger.debug(f"Forward pass completed. Output tensors: {len(outputs)}")
        return list(outputs)


def build_input_tensor(
    image: np.ndarray, input_width: int, input_height: int
) -> np.ndarray:
    """
    Resize to the network input size, scale pixels to [0, 1], swap BGR->RGB.

    Args:
        image: BGR image
        input_width: Network input width
        input_height: Network input height

    Returns:
        1x3xHxW float32 blob
    """
    return cv2.dnn.blobFromImage(
        image, 1.0 / 255.0, (input_width, input_height), swapRB=True, crop=False
    )


def load_class_names(names_path: str) -> list[str]:
    """
    Load class names, one per line. Blank lines inside the file keep their
    position as empty names.

    Args:
        names_path: Path to a Darknet .names file

    Returns:
        Class names indexed by class id

    Raises:
        ProcessingError: If the file cannot be read
        ConfigurationError: If the file holds no names
    """
    try:
        with open(names_path, encoding="utf-8") as f:
            class_names = [line.strip() for line in f]
    except OSError as e:
        raise ProcessingError(f"Error opening class names file: {names_path}: {e}") from e

    # Line i is class id i, so only trailing blank lines can go
    while class_names and not class_names[-1]:
        class_names.pop()

    if not class_names:
        raise ConfigurationError(f"Class names file is empty: {names_path}")

    logger.info(f"Loaded {len(class_names)} class names")
    return class_names
