"""
Single-image operations: morphology, resize, brightness, edges, stitch, inpaint.

Each handler loads its input(s), makes one OpenCV call through core, and
writes the result.
"""

import logging

import cv2

from ..config.schemas import (
    BrightnessParams,
    CannyParams,
    InpaintParams,
    MorphologyParams,
    NoParams,
    ResizeParams,
)
from ..core import filters
from ..core.image_io import read_image, write_image
from ..core.stitching import stitch as stitch_images
from ..errors import ProcessingError
from .registry import OperationContext, register

logger = logging.getLogger(__name__)


def _shape_summary(image) -> dict:
    return {"width": int(image.shape[1]), "height": int(image.shape[0])}


def _guarded(what: str, func, *args, **kwargs):
    """Run an OpenCV call, reporting cv2 failures as ProcessingError."""
    try:
        return func(*args, **kwargs)
    except cv2.error as e:
        raise ProcessingError(f"{what} failed: {e}") from e


@register("dilate", MorphologyParams, description="Morphological dilation")
def run_dilate(ctx: OperationContext, params: MorphologyParams) -> dict:
    image = read_image(ctx.inputs[0])
    result = _guarded("Dilation", filters.dilate, image, params.kernel_size)
    write_image(ctx.output, result)
    return _shape_summary(result)


@register("erode", MorphologyParams, description="Morphological erosion")
def run_erode(ctx: OperationContext, params: MorphologyParams) -> dict:
    image = read_image(ctx.inputs[0])
    result = _guarded("Erosion", filters.erode, image, params.kernel_size)
    write_image(ctx.output, result)
    return _shape_summary(result)


@register("resize", ResizeParams, description="Scale by a factor")
def run_resize(ctx: OperationContext, params: ResizeParams) -> dict:
    image = read_image(ctx.inputs[0])
    result = _guarded(
        "Resize", filters.resize, image, params.factor, params.interpolation
    )
    logger.info(
        f"Resized {image.shape[1]}x{image.shape[0]} -> {result.shape[1]}x{result.shape[0]}"
    )
    write_image(ctx.output, result)
    return _shape_summary(result)


@register("brightness", BrightnessParams, description="Add a value to every channel")
def run_brightness(ctx: OperationContext, params: BrightnessParams) -> dict:
    image = read_image(ctx.inputs[0])
    result = _guarded("Brightness", filters.adjust_brightness, image, params.value)
    write_image(ctx.output, result)
    return _shape_summary(result)


@register("canny", CannyParams, description="Canny edge detection")
def run_canny(ctx: OperationContext, params: CannyParams) -> dict:
    image = read_image(ctx.inputs[0])
    result = _guarded(
        "Canny", filters.canny, image, params.threshold1, params.threshold2
    )
    write_image(ctx.output, result)
    return {**_shape_summary(result), "edge_pixels": int(cv2.countNonZero(result))}


@register(
    "stitch",
    NoParams,
    min_inputs=2,
    max_inputs=None,
    description="Panorama from overlapping images",
)
def run_stitch(ctx: OperationContext, params: NoParams) -> dict:
    logger.info("Loading images for stitching...")
    images = [read_image(path) for path in ctx.inputs]
    panorama = stitch_images(images)
    write_image(ctx.output, panorama)
    return {**_shape_summary(panorama), "images": len(images)}


@register("inpaint", InpaintParams, description="Restore masked regions")
def run_inpaint(ctx: OperationContext, params: InpaintParams) -> dict:
    image = read_image(ctx.inputs[0])
    mask = read_image(params.mask, cv2.IMREAD_GRAYSCALE)
    result = _guarded(
        "Inpainting",
        filters.inpaint,
        image,
        mask,
        params.radius,
        params.inpaint_method,
    )
    write_image(ctx.output, result)
    return {**_shape_summary(result), "masked_pixels": int(cv2.countNonZero(mask))}
