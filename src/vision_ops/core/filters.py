"""
Single-image filters - thin OpenCV calls with input validation.
"""

import logging

import cv2
import numpy as np

from ..errors import ConfigurationError, ProcessingError

logger = logging.getLogger(__name__)

INTERPOLATION_MODES = {
    "nearest": cv2.INTER_NEAREST,
    "linear": cv2.INTER_LINEAR,
    "cubic": cv2.INTER_CUBIC,
    "area": cv2.INTER_AREA,
    "lanczos": cv2.INTER_LANCZOS4,
}

INPAINT_METHODS = {
    "NS": cv2.INPAINT_NS,
    "TELEA": cv2.INPAINT_TELEA,
}


def dilate(image: np.ndarray, kernel_size: int) -> np.ndarray:
    """Dilate with a square kernel_size x kernel_size structuring element."""
    _require_image(image, "dilation")
    return cv2.dilate(image, _rect_kernel(kernel_size))


def erode(image: np.ndarray, kernel_size: int) -> np.ndarray:
    """Erode with a square kernel_size x kernel_size structuring element."""
    _require_image(image, "erosion")
    return cv2.erode(image, _rect_kernel(kernel_size))


def resize(image: np.ndarray, factor: float, interpolation: str = "linear") -> np.ndarray:
    """
    Scale both axes by the same factor.

    Args:
        image: Input image
        factor: Scale factor (> 0)
        interpolation: Key of INTERPOLATION_MODES

    Returns:
        Resized image
    """
    _require_image(image, "resize")
    if factor <= 0:
        raise ConfigurationError(f"Resize factor must be positive, received: {factor}")
    if interpolation not in INTERPOLATION_MODES:
        raise ConfigurationError(f"Unknown interpolation mode: {interpolation}")

    return cv2.resize(
        image,
        None,
        fx=factor,
        fy=factor,
        interpolation=INTERPOLATION_MODES[interpolation],
    )


def adjust_brightness(image: np.ndarray, value: int) -> np.ndarray:
    """Add value to every channel, saturating at the dtype limits."""
    _require_image(image, "brightness adjustment")
    return cv2.add(image, (value, value, value, value))


def canny(image: np.ndarray, threshold1: float, threshold2: float) -> np.ndarray:
    """
    Canny edge map of the grayscale image.

    Args:
        image: Input image (BGR or grayscale)
        threshold1: Lower hysteresis threshold
        threshold2: Upper hysteresis threshold

    Returns:
        Single-channel edge map
    """
    _require_image(image, "Canny edge detection")
    if threshold1 < 0 or threshold2 < 0:
        raise ConfigurationError("Canny thresholds must be non-negative")

    gray = image if image.ndim == 2 else cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return cv2.Canny(gray, threshold1, threshold2)


def inpaint(
    image: np.ndarray, mask: np.ndarray, radius: float, method: str = "NS"
) -> np.ndarray:
    """
    Fill masked pixels from their surroundings.

    Args:
        image: 8-bit 1- or 3-channel image
        mask: 8-bit single-channel mask, non-zero where pixels are restored
        radius: Neighbourhood radius (> 0)
        method: "NS" (Navier-Stokes) or "TELEA"

    Returns:
        Inpainted image
    """
    _require_image(image, "inpainting")
    if mask is None or mask.size == 0:
        raise ProcessingError("Mask image for inpainting is empty")
    if image.shape[:2] != mask.shape[:2]:
        raise ProcessingError("Input image and mask image must have the same dimensions")
    if mask.ndim != 2 or mask.dtype != np.uint8:
        raise ProcessingError("Mask image must be an 8-bit single-channel image")
    if image.dtype != np.uint8 or (image.ndim == 3 and image.shape[2] != 3):
        raise ProcessingError("Input image must be 8-bit single-channel or 3-channel")
    if radius <= 0:
        raise ConfigurationError("Inpaint radius must be positive")
    if method not in INPAINT_METHODS:
        raise ConfigurationError(f"Invalid inpainting method: {method}")

    logger.info(f"Inpainting: radius={radius}, method={method}")
    return cv2.inpaint(image, mask, radius, INPAINT_METHODS[method])


def _rect_kernel(kernel_size: int) -> np.ndarray:
    if kernel_size <= 0 or kernel_size % 2 == 0:
        raise ConfigurationError(
            f"Kernel size must be a positive odd integer, received: {kernel_size}"
        )
    return cv2.getStructuringElement(cv2.MORPH_RECT, (kernel_size, kernel_size))


def _require_image(image: np.ndarray, what: str) -> None:
    if image is None or image.size == 0:
        raise ConfigurationError(f"Input image for {what} is empty")
