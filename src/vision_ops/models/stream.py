"""
Stream data models - session state and the protocols a stream is built from.

Any frame source (video file, synthetic generator in tests) and any frame
sink can implement these protocols to be driven by FrameStreamController.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import numpy as np


class StreamState(Enum):
    """Lifecycle of one stream session."""

    OPENING = "opening"
    STREAMING = "streaming"
    DRAINING = "draining"
    CLOSED = "closed"
    FAILED = "failed"


class FrameSource(Protocol):
    """Protocol for frame producers."""

    width: int
    height: int
    frame_rate: float

    def read(self) -> np.ndarray | None:
        """
        Read the next frame.

        Returns:
            Decoded frame, or None at end of stream
        """
        ...

    def release(self) -> None: ...


class FrameSink(Protocol):
    """Protocol for frame consumers."""

    def write(self, frame: np.ndarray) -> None: ...

    def release(self) -> None: ...


class FrameTransform(Protocol):
    """
    Protocol for per-frame transforms.

    Implementations may carry state across frames (background models);
    one instance spans exactly one stream.
    """

    name: str
    output_channels: int  # 1 for masks/grayscale, 3 for color

    def apply(self, frame: np.ndarray) -> np.ndarray: ...


@dataclass
class StreamSession:
    """
    Live state of one video-in/video-out operation.

    Attributes:
        source: Open frame source
        sink: Open frame sink (None until acquired)
        width: Frame width in pixels
        height: Frame height in pixels
        frame_rate: Frames per second written to the sink
        frame_index: Number of frames written so far
    """

    source: FrameSource
    sink: FrameSink | None
    width: int
    height: int
    frame_rate: float
    frame_index: int = 0
