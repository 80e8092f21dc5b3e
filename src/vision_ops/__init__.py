"""
Vision Ops

A command-driven media-processing tool: image filters, detectors, panorama
stitching and video processing behind one operation dispatcher.

Package structure:
  core/        - Detection postprocessing, stream controller, OpenCV wrappers
  operations/  - Registered operation handlers
  config/      - Parameter schemas, tool config loading, plan display
  models/      - Detection and stream data models
  utils/       - Constants
"""

__version__ = "1.0.0"

from .dispatcher import OperationRequest, dispatch, validate_request
from .errors import (
    ConfigurationError,
    ConsistencyError,
    ProcessingError,
    SinkUnavailable,
    SourceUnavailable,
    UnsupportedOperation,
    VisionOpsError,
)

__all__ = [
    # Errors
    "ConfigurationError",
    "ConsistencyError",
    # Dispatcher
    "OperationRequest",
    "ProcessingError",
    "SinkUnavailable",
    "SourceUnavailable",
    "UnsupportedOperation",
    "VisionOpsError",
    "dispatch",
    "validate_request",
]
