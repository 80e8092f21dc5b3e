"""
Error taxonomy for vision operations.

Every failure is fatal to the current invocation. The CLI maps any
VisionOpsError to exit code 1.
"""


class VisionOpsError(Exception):
    """Base class for all operation failures."""


class ConfigurationError(VisionOpsError):
    """Bad or missing parameter, detected before any processing begins."""


class UnsupportedOperation(ConfigurationError):
    """Requested operation identifier is not registered."""


class SourceUnavailable(VisionOpsError):
    """Input image or video could not be opened."""


class SinkUnavailable(VisionOpsError):
    """Output image or video could not be created or written."""


class ProcessingError(VisionOpsError):
    """An underlying transform failed (OpenCV error, model load, stitch status)."""


class ConsistencyError(VisionOpsError):
    """Internal results disagree with their inputs (e.g. class id out of range)."""
