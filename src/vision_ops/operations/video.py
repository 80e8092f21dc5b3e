"""
Streaming operations: video-gray, bg-subtract.
"""

import logging

from ..config.schemas import BgSubtractParams, NoParams
from ..core.stream import FrameStreamController
from ..core.transforms import BackgroundSubtractTransform, GrayscaleTransform
from ..models import FrameTransform
from .registry import OperationContext, register

logger = logging.getLogger(__name__)


def _run_stream(ctx: OperationContext, transform: FrameTransform) -> dict:
    controller = FrameStreamController(
        transform,
        cancel_event=ctx.cancel_event,
        progress_interval=ctx.settings.video.progress_interval,
        codec=ctx.settings.video.codec,
    )
    session = controller.run(ctx.inputs[0], ctx.output)
    return {
        "frames": session.frame_index,
        "width": session.width,
        "height": session.height,
        "frame_rate": session.frame_rate,
    }


@register("video-gray", NoParams, description="Grayscale video", streaming=True)
def run_video_gray(ctx: OperationContext, params: NoParams) -> dict:
    return _run_stream(ctx, GrayscaleTransform())


@register(
    "bg-subtract",
    BgSubtractParams,
    description="MOG2 foreground mask video",
    streaming=True,
)
def run_bg_subtract(ctx: OperationContext, params: BgSubtractParams) -> dict:
    transform = BackgroundSubtractTransform(
        history=params.history,
        var_threshold=params.var_threshold,
        detect_shadows=params.detect_shadows,
    )
    return _run_stream(ctx, transform)
