"""
Configuration loading, parameter schemas, and planning.

Provides:
- load_config: Find, load and validate the optional YAML tool config
- Parameter schemas: one pydantic model per operation
- print_plan: Show what a validated request would do (--validate)
"""

from .loader import apply_env_overrides, find_config_file, load_config
from .planner import print_operations, print_plan
from .schemas import (
    BgSubtractParams,
    BrightnessParams,
    CannyParams,
    FaceParams,
    InpaintParams,
    MorphologyParams,
    NoParams,
    ObjectDetectionParams,
    ResizeParams,
    StrictModel,
    ToolConfig,
    VideoSettings,
    format_validation_error,
)

__all__ = [
    # Parameter schemas
    "BgSubtractParams",
    "BrightnessParams",
    "CannyParams",
    "FaceParams",
    "InpaintParams",
    "MorphologyParams",
    "NoParams",
    "ObjectDetectionParams",
    "ResizeParams",
    "StrictModel",
    # Tool configuration
    "ToolConfig",
    "VideoSettings",
    "apply_env_overrides",
    "find_config_file",
    "format_validation_error",
    "load_config",
    # Display
    "print_operations",
    "print_plan",
]
