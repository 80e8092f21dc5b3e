"""
Panorama stitching.
"""

import logging
from collections.abc import Sequence

import cv2
import numpy as np

from ..errors import ConfigurationError, ProcessingError

logger = logging.getLogger(__name__)

STITCHER_STATUS = {
    cv2.Stitcher_OK: "OK (Success)",
    cv2.Stitcher_ERR_NEED_MORE_IMGS: "Need more images",
    cv2.Stitcher_ERR_HOMOGRAPHY_EST_FAIL: "Homography estimation failed",
    cv2.Stitcher_ERR_CAMERA_PARAMS_ADJUST_FAIL: "Camera parameter adjustment failed",
}


def describe_status(status: int) -> str:
    """Human-readable stitcher status."""
    return STITCHER_STATUS.get(status, f"Unknown stitching error ({status})")


def stitch(images: Sequence[np.ndarray]) -> np.ndarray:
    """
    Stitch overlapping images into one panorama.

    Args:
        images: Two or more BGR images

    Returns:
        Panorama image

    Raises:
        ConfigurationError: Fewer than two images
        ProcessingError: The stitcher did not return OK
    """
    if len(images) < 2:
        raise ConfigurationError("Stitching requires at least two input images")

    logger.info(f"Attempting to stitch {len(images)} images...")
    stitcher = cv2.Stitcher_create(cv2.Stitcher_PANORAMA)

    try:
        status, panorama = stitcher.stitch(list(images))
    except cv2.error as e:
        raise ProcessingError(f"Stitching failed: {e}") from e

    if status != cv2.Stitcher_OK:
        raise ProcessingError(f"Stitching failed: {describe_status(status)}")

    logger.info(f"Panorama: {panorama.shape[1]}x{panorama.shape[0]}")
    return panorama
