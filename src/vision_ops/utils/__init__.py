"""
Utility modules for constants.
"""

from .constants import (
    DEFAULT_FRAME_RATE,
    DEFAULT_VIDEO_CODEC,
    ENV_LOG_LEVEL,
    ENV_VIDEO_CODEC,
    PROGRESS_REPORT_INTERVAL,
)

__all__ = [
    "DEFAULT_FRAME_RATE",
    "DEFAULT_VIDEO_CODEC",
    "ENV_LOG_LEVEL",
    "ENV_VIDEO_CODEC",
    "PROGRESS_REPORT_INTERVAL",
]
