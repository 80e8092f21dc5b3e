"""
Haar cascade face detection.
"""

import logging

import cv2
import numpy as np

from ..errors import ConfigurationError, ProcessingError
from ..utils.constants import BOX_COLOR, BOX_THICKNESS

logger = logging.getLogger(__name__)


def load_cascade(cascade_path: str) -> cv2.CascadeClassifier:
    """
    Load a cascade classifier.

    Raises:
        ProcessingError: If the XML file cannot be loaded
    """
    cascade = cv2.CascadeClassifier()
    if not cascade.load(cascade_path):
        raise ProcessingError(f"Error loading face cascade file: {cascade_path}")
    logger.info(f"Loaded face cascade: {cascade_path}")
    return cascade


def detect_faces(
    image: np.ndarray,
    cascade: cv2.CascadeClassifier,
    scale_factor: float = 1.1,
    min_neighbors: int = 3,
    min_size: tuple[int, int] = (30, 30),
) -> tuple[list[tuple[int, int, int, int]], np.ndarray]:
    """
    Detect faces and draw them on a copy of the image.

    Args:
        image: BGR or grayscale image
        cascade: Loaded cascade classifier
        scale_factor: Image pyramid step (> 1)
        min_neighbors: Neighbours required to keep a detection
        min_size: Smallest face (width, height)

    Returns:
        (face rectangles as (x, y, w, h), annotated copy)
    """
    if image is None or image.size == 0:
        raise ConfigurationError("Input image for face detection is empty")

    if image.ndim == 2:
        gray = image.copy()
    elif image.shape[2] == 3:
        gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    else:
        raise ProcessingError(
            f"Unsupported number of channels for face detection: {image.shape[2]}"
        )

    # Histogram equalization improves cascade contrast
    gray = cv2.equalizeHist(gray)

    faces = cascade.detectMultiScale(
        gray,
        scaleFactor=scale_factor,
        minNeighbors=min_neighbors,
        flags=cv2.CASCADE_SCALE_IMAGE,
        minSize=min_size,
    )
    rects = [tuple(int(v) for v in face) for face in faces]
    logger.info(f"Detected {len(rects)} faces")

    output = image.copy()
    for x, y, w, h in rects:
        cv2.rectangle(output, (x, y), (x + w, y + h), BOX_COLOR, BOX_THICKNESS)

    return rects, output
