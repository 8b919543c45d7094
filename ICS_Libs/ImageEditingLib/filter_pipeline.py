"""
Photo filter pipeline for ID Card Studio.

Runs the editor stages in a fixed order. Each stage sees the output of the
one before it:

1. Geometric: rotate and zoom about the image centre, clip to the crop
   rectangle (with the tone adjustment applied to the drawn pixels)
2. Sharpen: 3x3 Laplacian-sharpen convolution blended with the original
3. Vignette: radial black overlay composited source-over

Example:
    >>> source = RasterBuffer.from_image(Image.open("photo.jpg"))
    >>> plan = compute_crop_plan(source.size, None, CropRegion.full_frame())
    >>> params = EditParameters(rotation_degrees=15, sharpen_pct=40)
    >>> result = apply_filters(source, plan, params)
"""

import logging
from typing import Any

import numpy as np
from PIL import Image
from scipy import ndimage

from ICS_Libs.constants import (
    MAX_OUTPUT_DIMENSION,
    MAX_OUTPUT_PIXELS,
    SHARPEN_KERNEL,
    TONE_MIDPOINT,
    TRANSPARENT,
)
from ICS_Libs.ImageEditingLib.crop_transformer import CropPlan
from ICS_Libs.ImageEditingLib.errors import RenderTargetUnavailable, UnsupportedBufferSize
from ICS_Libs.ImageEditingLib.image_models import EditParameters, RasterBuffer

logger = logging.getLogger(__name__)

_KERNEL = np.array(SHARPEN_KERNEL, dtype=np.float64)


def _to_bytes(values: np.ndarray) -> np.ndarray:
    # Clamp then round half to even, like a clamped byte array assignment
    return np.rint(np.clip(values, 0, 255)).astype(np.uint8)


# ============================================================================
# Geometric Stage
# ============================================================================

def check_output_size(width: int, height: int) -> None:
    """
    Reject output sizes above the safety ceiling.

    Raises:
        UnsupportedBufferSize: If either side exceeds MAX_OUTPUT_DIMENSION or
                               the area exceeds MAX_OUTPUT_PIXELS
    """
    if width > MAX_OUTPUT_DIMENSION or height > MAX_OUTPUT_DIMENSION:
        raise UnsupportedBufferSize(
            f"Output {width}x{height} exceeds the {MAX_OUTPUT_DIMENSION}px side limit"
        )
    if width * height > MAX_OUTPUT_PIXELS:
        raise UnsupportedBufferSize(
            f"Output {width}x{height} exceeds the {MAX_OUTPUT_PIXELS} pixel limit"
        )


def draw_geometry(source: Any, plan: CropPlan, rotation_degrees: float, zoom: float) -> Any:
    """
    Draw the rotated, zoomed source into a surface clipped to the crop.

    Args:
        source: RGBA PIL Image in natural coordinates
        plan: Crop plan from compute_crop_plan()
        rotation_degrees: Clockwise rotation about the image centre
        zoom: Scale about the image centre

    Returns:
        RGBA PIL Image of plan.output_size; uncovered area is transparent

    Raises:
        UnsupportedBufferSize: If the output is above the safety ceiling
        RenderTargetUnavailable: If the output surface cannot be allocated
    """
    check_output_size(plan.output_width, plan.output_height)

    if plan.is_grid_aligned(rotation_degrees, zoom):
        resample = Image.Resampling.NEAREST
    else:
        resample = Image.Resampling.BICUBIC

    try:
        return source.transform(
            plan.output_size,
            Image.Transform.AFFINE,
            plan.inverse_affine(rotation_degrees, zoom),
            resample=resample,
            fillcolor=TRANSPARENT,
        )
    except MemoryError as exc:
        raise RenderTargetUnavailable(
            f"Could not allocate a {plan.output_width}x{plan.output_height} surface"
        ) from exc


# ============================================================================
# Tone Stage
# ============================================================================

def apply_tone_array(pixels: np.ndarray, brightness_pct: float, contrast_pct: float) -> np.ndarray:
    """
    Brightness then contrast about mid-gray, on RGB only.

    Fully transparent pixels are left untouched since nothing was drawn there.
    """
    rgb = pixels[:, :, :3].astype(np.float64)
    rgb = rgb * (brightness_pct / 100.0)
    rgb = (rgb - TONE_MIDPOINT) * (contrast_pct / 100.0) + TONE_MIDPOINT

    result = pixels.copy()
    drawn = pixels[:, :, 3] > 0
    result[:, :, :3][drawn] = _to_bytes(rgb)[drawn]
    return result


# ============================================================================
# Sharpen Stage
# ============================================================================

def sharpen_array(pixels: np.ndarray, amount: float) -> np.ndarray:
    """
    Blend a 3x3 sharpen convolution with the original pixels.

    Taps falling outside the buffer contribute zero rather than an edge
    sample, which brightens a one-pixel border with this kernel.

    TODO: confirm with design whether the border halo is wanted; mode="nearest"
    would clamp to the edge pixel instead.

    Args:
        pixels: H x W x 4 uint8 array (not modified)
        amount: Blend factor in 0-1

    Returns:
        New H x W x 4 uint8 array; alpha copied from the input
    """
    original = pixels[:, :, :3].astype(np.float64)
    result = np.empty_like(pixels)

    for channel in range(3):
        convolved = ndimage.convolve(original[:, :, channel], _KERNEL, mode="constant", cval=0.0)
        blended = convolved * amount + original[:, :, channel] * (1.0 - amount)
        result[:, :, channel] = _to_bytes(blended)

    result[:, :, 3] = pixels[:, :, 3]
    return result


# ============================================================================
# Vignette Stage
# ============================================================================

def vignette_alpha_map(width: int, height: int, vignette_pct: float) -> np.ndarray:
    """
    Overlay alpha (0-1) for each pixel of a width x height buffer.

    Alpha is 0 inside min(w, h)/4 of the centre, ramps linearly to
    vignette_pct/100 at min(w, h)/2 and stays there beyond it.
    Distances are measured to pixel centres.
    """
    inner = min(width, height) / 4.0
    outer = min(width, height) / 2.0

    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    distance = np.hypot(xs + 0.5 - width / 2.0, ys + 0.5 - height / 2.0)
    ramp = np.clip((distance - inner) / (outer - inner), 0.0, 1.0)
    return ramp * (vignette_pct / 100.0)


def apply_vignette_array(pixels: np.ndarray, vignette_pct: float) -> np.ndarray:
    """Composite a black radial overlay over the pixels (source-over)."""
    height, width = pixels.shape[:2]
    overlay = vignette_alpha_map(width, height, vignette_pct)

    base_alpha = pixels[:, :, 3].astype(np.float64) / 255.0
    remaining = base_alpha * (1.0 - overlay)
    out_alpha = overlay + remaining

    safe_alpha = np.where(out_alpha > 0, out_alpha, 1.0)
    factor = np.where(out_alpha > 0, remaining / safe_alpha, 0.0)

    result = np.empty_like(pixels)
    result[:, :, :3] = _to_bytes(pixels[:, :, :3].astype(np.float64) * factor[:, :, np.newaxis])
    result[:, :, 3] = _to_bytes(out_alpha * 255.0)
    return result


# ============================================================================
# Pipeline
# ============================================================================

def apply_filters(source: RasterBuffer, plan: CropPlan, params: EditParameters) -> RasterBuffer:
    """
    Run the geometric, tone, sharpen and vignette stages in order.

    Sharpen and vignette are skipped entirely (not run at zero strength)
    when their percentages are 0.

    Args:
        source: Source buffer in natural coordinates
        plan: Crop plan from compute_crop_plan() for this source
        params: Edit parameters

    Returns:
        New RasterBuffer of plan.output_size

    Raises:
        UnsupportedBufferSize: If the output is above the safety ceiling
        RenderTargetUnavailable: If the output surface cannot be allocated
    """
    if source.size != (plan.natural_width, plan.natural_height):
        raise ValueError(
            f"Plan was computed for {plan.natural_width}x{plan.natural_height}, "
            f"source is {source.width}x{source.height}"
        )

    drawn = draw_geometry(source.to_image(), plan, params.rotation_degrees, params.zoom)
    pixels = np.array(drawn, dtype=np.uint8)

    if params.brightness_pct != 100.0 or params.contrast_pct != 100.0:
        pixels = apply_tone_array(pixels, params.brightness_pct, params.contrast_pct)

    if params.sharpen_pct > 0:
        pixels = sharpen_array(pixels, params.sharpen_pct / 100.0)

    if params.vignette_pct > 0:
        pixels = apply_vignette_array(pixels, params.vignette_pct)

    logger.debug(
        f"Filtered {source.width}x{source.height} -> {plan.output_width}x{plan.output_height} "
        f"with {params}"
    )
    return RasterBuffer.from_array(pixels)
