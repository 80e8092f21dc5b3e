"""
Video file handles - OpenCV capture and writer wrappers.
"""

import logging

import cv2
import numpy as np

from ..errors import SinkUnavailable, SourceUnavailable
from ..utils.constants import DEFAULT_VIDEO_CODEC

logger = logging.getLogger(__name__)


class VideoFileSource:
    """Frame source backed by cv2.VideoCapture."""

    def __init__(self, cap: cv2.VideoCapture):
        self._cap = cap
        self.width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.frame_rate = float(cap.get(cv2.CAP_PROP_FPS))

    def read(self) -> np.ndarray | None:
        ret, frame = self._cap.read()
        if not ret or frame is None or frame.size == 0:
            return None
        return frame

    def release(self) -> None:
        self._cap.release()


class VideoFileSink:
    """Frame sink backed by cv2.VideoWriter."""

    def __init__(self, writer: cv2.VideoWriter):
        self._writer = writer

    def write(self, frame: np.ndarray) -> None:
        self._writer.write(frame)

    def release(self) -> None:
        self._writer.release()


def open_video_source(video_path: str) -> VideoFileSource:
    """
    Open a video file for reading.

    Args:
        video_path: Path to the input video

    Returns:
        Open frame source

    Raises:
        SourceUnavailable: If the video cannot be opened
    """
    logger.info(f"Opening video: {video_path}")
    cap = cv2.VideoCapture(video_path)

    if not cap.isOpened():
        cap.release()
        raise SourceUnavailable(f"Could not open input video file: {video_path}")

    return VideoFileSource(cap)


def open_video_sink(
    video_path: str,
    width: int,
    height: int,
    frame_rate: float,
    is_color: bool,
    codec: str = DEFAULT_VIDEO_CODEC,
) -> VideoFileSink:
    """
    Create a video file for writing.

    Args:
        video_path: Path to the output video
        width: Frame width
        height: Frame height
        frame_rate: Frames per second
        is_color: False for single-channel frames
        codec: Four-character codec code

    Returns:
        Open frame sink

    Raises:
        SinkUnavailable: If the writer cannot be created
    """
    fourcc = cv2.VideoWriter_fourcc(*codec)
    writer = cv2.VideoWriter(video_path, fourcc, frame_rate, (width, height), is_color)

    if not writer.isOpened():
        writer.release()
        raise SinkUnavailable(f"Could not create output video file: {video_path}")

    logger.info(f"Writing {codec} video: {video_path} ({width}x{height} @ {frame_rate:g} fps)")
    return VideoFileSink(writer)
