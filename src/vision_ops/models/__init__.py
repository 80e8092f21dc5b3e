"""
Consolidated data models for vision operations.

This package contains the detection and streaming data structures shared
by the core pipeline, the operation handlers, and the tests.
"""

from .detection import Candidate, DetectionResult, Rect
from .stream import FrameSink, FrameSource, FrameTransform, StreamSession, StreamState

__all__ = [
    # Detection models
    "Candidate",
    "DetectionResult",
    "Rect",
    # Stream protocols
    "FrameSink",
    "FrameSource",
    "FrameTransform",
    # Stream state
    "StreamSession",
    "StreamState",
]
