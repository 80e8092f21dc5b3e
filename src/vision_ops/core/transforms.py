"""
Per-frame transforms for streaming operations.
"""

import logging

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class GrayscaleTransform:
    """Stateless BGR -> single-channel conversion."""

    name = "grayscale"
    output_channels = 1

    def apply(self, frame: np.ndarray) -> np.ndarray:
        if frame.ndim == 2:
            return frame.copy()
        return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)


class BackgroundSubtractTransform:
    """
    MOG2 background subtraction producing a foreground mask per frame.

    The subtractor keeps a running per-pixel Gaussian mixture model that is
    updated on every frame and never reset, so one instance must span
    exactly one stream.

    Mask values: 0 background, 255 foreground, 127 shadow (when enabled).
    """

    name = "bg-subtract"
    output_channels = 1

    def __init__(
        self,
        history: int = 500,
        var_threshold: float = 16.0,
        detect_shadows: bool = True,
        learning_rate: float = -1.0,
    ):
        """
        Args:
            history: Frames that shape the background model
            var_threshold: Squared Mahalanobis distance for foreground
            detect_shadows: Mark shadows as 127 in the mask
            learning_rate: Model update rate, -1 for automatic
        """
        self.learning_rate = learning_rate
        self.subtractor = cv2.createBackgroundSubtractorMOG2(
            history=history,
            varThreshold=var_threshold,
            detectShadows=detect_shadows,
        )
        logger.debug(
            f"MOG2 initialized: history={history}, var_threshold={var_threshold}, "
            f"shadows={detect_shadows}"
        )

    def apply(self, frame: np.ndarray) -> np.ndarray:
        return self.subtractor.apply(frame, learningRate=self.learning_rate)
