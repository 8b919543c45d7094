"""
Crop coordinate mapping for the photo editor.

Maps a crop region expressed in displayed-image fractions onto the natural
(source pixel) coordinate space and derives the output buffer size and the
inverse draw transform used by the geometric stage.

Functions:
    compute_crop_plan: Resolve a CropRegion into natural-space coordinates
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from ICS_Libs.ImageEditingLib.errors import InvalidRegion
from ICS_Libs.ImageEditingLib.image_models import CropRegion

logger = logging.getLogger(__name__)

Size = Tuple[float, float]
AffineCoefficients = Tuple[float, float, float, float, float, float]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _rotation_terms(rotation_degrees: float) -> Tuple[float, float]:
    # Exact values for quarter turns keep grid-aligned draws lossless
    quarter, remainder = divmod(rotation_degrees % 360.0, 90.0)
    if remainder == 0.0:
        return ((1.0, 0.0), (0.0, 1.0), (-1.0, 0.0), (0.0, -1.0))[int(quarter)]
    radians = math.radians(rotation_degrees)
    return math.cos(radians), math.sin(radians)


@dataclass(frozen=True)
class CropPlan:
    """Crop rectangle in natural pixels plus the output raster size.

    Attributes:
        natural_width: Source image width in pixels
        natural_height: Source image height in pixels
        crop_x: Left edge of the clip rectangle (natural pixels)
        crop_y: Top edge of the clip rectangle (natural pixels)
        crop_width: Clip width (natural pixels)
        crop_height: Clip height (natural pixels)
        output_scale: Output density multiplier
        output_width: Output buffer width in pixels
        output_height: Output buffer height in pixels
    """
    natural_width: int
    natural_height: int
    crop_x: float
    crop_y: float
    crop_width: float
    crop_height: float
    output_scale: float
    output_width: int
    output_height: int

    @property
    def output_size(self) -> Tuple[int, int]:
        return self.output_width, self.output_height

    def inverse_affine(self, rotation_degrees: float = 0.0, zoom: float = 1.0) -> AffineCoefficients:
        """
        Coefficients mapping an output pixel back to a source pixel.

        The forward draw rotates the source by `rotation_degrees` and scales it
        by `zoom`, both about the natural-image centre, then clips the canvas to
        the crop rectangle and scales it by `output_scale`. The clip rectangle
        itself never rotates.

        Returns:
            (a, b, c, d, e, f) such that source = (a*u + b*v + c, d*u + e*v + f)
            for output coordinates (u, v), as expected by PIL's AFFINE transform
        """
        if zoom <= 0:
            raise ValueError(f"zoom must be positive, got {zoom}")

        cos_t, sin_t = _rotation_terms(rotation_degrees)
        center_x = self.natural_width / 2.0
        center_y = self.natural_height / 2.0
        step = 1.0 / (zoom * self.output_scale)
        offset_x = self.crop_x - center_x
        offset_y = self.crop_y - center_y

        a = cos_t * step
        b = sin_t * step
        c = center_x + (cos_t * offset_x + sin_t * offset_y) / zoom
        d = -sin_t * step
        e = cos_t * step
        f = center_y + (-sin_t * offset_x + cos_t * offset_y) / zoom
        return a, b, c, d, e, f

    def is_grid_aligned(self, rotation_degrees: float = 0.0, zoom: float = 1.0) -> bool:
        """True when output pixels map exactly onto source pixel centres.

        A 90 or 270 degree turn swaps the axes about the image centre, which
        only lands on pixel centres when width and height share parity.
        """
        quarter, remainder = divmod(rotation_degrees % 360.0, 90.0)
        if remainder != 0.0:
            return False
        if quarter % 2 == 1 and (self.natural_width - self.natural_height) % 2 != 0:
            return False
        return (
            zoom == 1.0
            and self.output_scale == 1.0
            and self.crop_x == round(self.crop_x)
            and self.crop_y == round(self.crop_y)
        )


def compute_crop_plan(
    natural_size: Tuple[int, int],
    displayed_size: Optional[Size],
    region: CropRegion,
    output_scale: float = 1.0,
) -> CropPlan:
    """
    Resolve a displayed-space crop region into natural-space coordinates.

    Args:
        natural_size: (width, height) of the source image in pixels
        displayed_size: (width, height) the image is shown at, or None to use
                        the natural size
        region: Crop region as fractions of the displayed size
        output_scale: Output density multiplier (preview vs. export)

    Returns:
        CropPlan with the clip rectangle and the output buffer size

    Raises:
        InvalidRegion: If sizes or scale are not positive, or the output
                       resolves to zero pixels in either dimension
    """
    natural_width, natural_height = natural_size
    if natural_width <= 0 or natural_height <= 0:
        raise InvalidRegion(f"Natural size must be positive, got {natural_width}x{natural_height}")

    if displayed_size is None:
        displayed_size = (natural_width, natural_height)
    displayed_width, displayed_height = displayed_size
    if displayed_width <= 0 or displayed_height <= 0:
        raise InvalidRegion(
            f"Displayed size must be positive, got {displayed_width}x{displayed_height}"
        )

    if not math.isfinite(output_scale) or output_scale <= 0:
        raise InvalidRegion(f"output_scale must be positive, got {output_scale}")

    scale_x = natural_width / displayed_width
    scale_y = natural_height / displayed_height

    crop_x = region.x * displayed_width * scale_x
    crop_y = region.y * displayed_height * scale_y
    crop_width = region.width * displayed_width * scale_x
    crop_height = region.height * displayed_height * scale_y

    output_width = _round_half_up(crop_width * output_scale)
    output_height = _round_half_up(crop_height * output_scale)

    if output_width <= 0 or output_height <= 0:
        raise InvalidRegion(
            f"Crop resolves to {output_width}x{output_height} pixels "
            f"(region {region}, scale {output_scale})"
        )

    plan = CropPlan(
        natural_width=int(natural_width),
        natural_height=int(natural_height),
        crop_x=crop_x,
        crop_y=crop_y,
        crop_width=crop_width,
        crop_height=crop_height,
        output_scale=float(output_scale),
        output_width=output_width,
        output_height=output_height,
    )
    logger.debug(f"Crop plan: {plan}")
    return plan
