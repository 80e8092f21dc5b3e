"""
Pydantic schemas for operation parameters and tool configuration.

Provides type-safe, declarative validation with clear error messages.
Each operation has one parameter model; field names match the CLI flags.
"""

import logging
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..utils.constants import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_NETWORK_INPUT_SIZE,
    DEFAULT_NMS_THRESHOLD,
    DEFAULT_VIDEO_CODEC,
    PROGRESS_REPORT_INTERVAL,
)

logger = logging.getLogger(__name__)


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Operation parameters
# ---------------------------------------------------------------------------


class NoParams(StrictModel):
    """Operations without tunable parameters."""


class MorphologyParams(StrictModel):
    """dilate / erode."""

    kernel_size: int = Field(default=3, gt=0, description="Structuring element size")

    @field_validator("kernel_size")
    @classmethod
    def validate_odd(cls, v: int) -> int:
        if v % 2 == 0:
            raise ValueError("kernel_size must be a positive odd integer")
        return v


class ResizeParams(StrictModel):
    """resize."""

    factor: float = Field(..., gt=0, description="Scale factor for both axes")
    interpolation: Literal["nearest", "linear", "cubic", "area", "lanczos"] = "linear"


class BrightnessParams(StrictModel):
    """brightness."""

    value: int = Field(default=0, description="Added to every channel, saturating")


class CannyParams(StrictModel):
    """canny."""

    threshold1: float = Field(default=100.0, ge=0)
    threshold2: float = Field(default=200.0, ge=0)

    @model_validator(mode="after")
    def warn_on_order(self):
        if self.threshold1 > self.threshold2:
            logger.warning(
                f"threshold1 ({self.threshold1:g}) is greater than "
                f"threshold2 ({self.threshold2:g}) for Canny detector"
            )
        return self


class BgSubtractParams(StrictModel):
    """bg-subtract (MOG2)."""

    history: int = Field(default=500, gt=0)
    var_threshold: float = Field(default=16.0, ge=0)
    detect_shadows: bool = True


class FaceParams(StrictModel):
    """detect-faces."""

    cascade: str = Field(..., min_length=1, description="Haar cascade XML path")
    scale_factor: float = Field(default=1.1, gt=1.0)
    min_neighbors: int = Field(default=3, ge=0)
    min_size: tuple[int, int] = (30, 30)

    @field_validator("min_size")
    @classmethod
    def validate_min_size(cls, v: tuple[int, int]) -> tuple[int, int]:
        if v[0] < 0 or v[1] < 0:
            raise ValueError("min_size must be non-negative")
        return v


class ObjectDetectionParams(StrictModel):
    """detect-objects (Darknet YOLO)."""

    yolo_cfg: str = Field(..., min_length=1, description="Darknet .cfg path")
    yolo_weights: str = Field(..., min_length=1, description="Darknet .weights path")
    yolo_names: str = Field(..., min_length=1, description="Class names path")
    conf: float = Field(default=DEFAULT_CONFIDENCE_THRESHOLD, gt=0.0, le=1.0)
    nms: float = Field(default=DEFAULT_NMS_THRESHOLD, gt=0.0, le=1.0)
    input_width: int = Field(default=DEFAULT_NETWORK_INPUT_SIZE, gt=0)
    input_height: int = Field(default=DEFAULT_NETWORK_INPUT_SIZE, gt=0)
    report: str | None = Field(default=None, description="Optional JSON report path")


class InpaintParams(StrictModel):
    """inpaint."""

    mask: str = Field(..., min_length=1, description="Mask image path")
    radius: float = Field(default=3.0, gt=0)
    inpaint_method: Literal["NS", "TELEA"] = "NS"

    @field_validator("inpaint_method", mode="before")
    @classmethod
    def normalize_method(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Tool configuration file
# ---------------------------------------------------------------------------


class VideoSettings(StrictModel):
    """Streaming output settings."""

    codec: str = Field(default=DEFAULT_VIDEO_CODEC, min_length=4, max_length=4)
    progress_interval: int = Field(default=PROGRESS_REPORT_INTERVAL, ge=1)


class ToolConfig(StrictModel):
    """Complete tool configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    video: VideoSettings = Field(default_factory=VideoSettings)
    operations: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Per-operation parameter defaults"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


def format_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into "field: message" lines."""
    lines = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "parameters"
        lines.append(f"{loc}: {err['msg']}")
    return "; ".join(lines)
