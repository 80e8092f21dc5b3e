"""
Image loading and saving.
"""

import logging
import os

import cv2
import numpy as np

from ..errors import SinkUnavailable, SourceUnavailable

logger = logging.getLogger(__name__)


def read_image(image_path: str, flags: int = cv2.IMREAD_COLOR) -> np.ndarray:
    """
    Load an image from disk.

    Args:
        image_path: Path to the image
        flags: cv2.imread flags (color by default)

    Returns:
        Decoded image

    Raises:
        SourceUnavailable: If the file is missing or cannot be decoded
    """
    image = cv2.imread(image_path, flags)
    if image is None or image.size == 0:
        raise SourceUnavailable(f"Could not read image: {image_path}")

    logger.debug(f"Loaded {image_path}: {image.shape[1]}x{image.shape[0]}")
    return image


def write_image(image_path: str, image: np.ndarray) -> None:
    """
    Save an image, creating the parent directory if needed.

    Args:
        image_path: Destination path; the extension selects the codec
        image: Image to write

    Raises:
        SinkUnavailable: If the image cannot be encoded or written
    """
    out_dir = os.path.dirname(image_path)
    try:
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        ok = cv2.imwrite(image_path, image)
    except (OSError, cv2.error) as e:
        raise SinkUnavailable(f"Could not write image: {image_path}: {e}") from e

    if not ok:
        raise SinkUnavailable(f"Could not write image: {image_path}")

    logger.info(f"Saved: {image_path}")
