"""
Image editing data models for ID Card Studio.

This module defines core data structures used throughout the photo editor.

Classes:
    RasterBuffer: Immutable width x height RGBA pixel buffer
    CropRegion: Crop rectangle expressed as fractions of the displayed image
    EditParameters: Rotation, zoom and filter settings for one edit session

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

import io
import math
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from ICS_Libs.constants import (
    DEFAULT_BRIGHTNESS_PCT,
    DEFAULT_CONTRAST_PCT,
    DEFAULT_ROTATION_DEGREES,
    DEFAULT_SHARPEN_PCT,
    DEFAULT_VIGNETTE_PCT,
    DEFAULT_ZOOM,
    INITIAL_CROP_PERCENT,
    REGION_EPSILON,
)

RgbaColor = Tuple[int, int, int, int]

CHANNELS = 4


@dataclass(frozen=True)
class RasterBuffer:
    """Owned RGBA pixel buffer, row-major, 4 bytes per pixel.

    The buffer is immutable, so handing it to another component never
    exposes it to mutation; every filter stage produces a new instance.
    """
    width: int
    height: int
    pixels: bytes

    def __post_init__(self):
        if not isinstance(self.width, int) or not isinstance(self.height, int):
            raise TypeError(
                f"width and height must be int, got {type(self.width)} and {type(self.height)}"
            )
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Buffer dimensions must be positive, got {self.width}x{self.height}")
        if isinstance(self.pixels, (bytearray, memoryview)):
            object.__setattr__(self, "pixels", bytes(self.pixels))
        if not isinstance(self.pixels, bytes):
            raise TypeError(f"pixels must be bytes, got {type(self.pixels)}")

        expected = self.width * self.height * CHANNELS
        if len(self.pixels) != expected:
            raise ValueError(
                f"Expected {expected} bytes for {self.width}x{self.height} RGBA, "
                f"got {len(self.pixels)}"
            )

    def __repr__(self) -> str:
        return f"RasterBuffer(width={self.width}, height={self.height})"

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def pixel(self, x: int, y: int) -> RgbaColor:
        """Return the RGBA tuple at column x, row y."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        offset = (y * self.width + x) * CHANNELS
        r, g, b, a = self.pixels[offset:offset + CHANNELS]
        return r, g, b, a

    @classmethod
    def solid(cls, width: int, height: int, color: RgbaColor) -> "RasterBuffer":
        """Create a buffer filled with a single color."""
        if len(color) != CHANNELS or not all(0 <= int(c) <= 255 for c in color):
            raise ValueError(f"color must be 4 values in 0-255, got {color}")
        return cls(width, height, bytes(int(c) for c in color) * (width * height))

    @classmethod
    def from_image(cls, image: Any) -> "RasterBuffer":
        """Create a buffer from a PIL Image (converted to RGBA)."""
        if not hasattr(image, "convert"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        width, height = rgba.size
        return cls(width, height, rgba.tobytes())

    def to_image(self) -> Any:
        """Return a new RGBA PIL Image holding a copy of the pixels."""
        return Image.frombytes("RGBA", self.size, self.pixels)

    @classmethod
    def from_array(cls, array: Any) -> "RasterBuffer":
        """Create a buffer from an H x W x 4 array (values clipped to 0-255)."""
        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] != CHANNELS:
            raise ValueError(f"Expected array of shape (H, W, 4), got {arr.shape}")
        if arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255).astype(np.uint8)
        height, width = int(arr.shape[0]), int(arr.shape[1])
        return cls(width, height, np.ascontiguousarray(arr).tobytes())

    def to_array(self) -> np.ndarray:
        """Return a writable H x W x 4 uint8 copy of the pixels."""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(
            self.height, self.width, CHANNELS
        ).copy()

    @classmethod
    def decode(cls, data: bytes) -> "RasterBuffer":
        """
        Decode encoded image bytes (PNG, JPEG, ...) into a buffer.

        Raises:
            ValueError: If the bytes are not a decodable image
        """
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                return cls.from_image(image)
        except (UnidentifiedImageError, OSError) as exc:
            raise ValueError(f"Could not decode image data: {exc}") from exc


def _check_fraction(name: str, value: float) -> None:
    if not math.isfinite(value) or value < -REGION_EPSILON or value > 1 + REGION_EPSILON:
        raise ValueError(f"{name} must be a fraction in [0, 1], got {value}")


@dataclass(frozen=True)
class CropRegion:
    """Crop rectangle as fractions of the displayed image dimensions.

    Attributes:
        x: Left edge (0-1)
        y: Top edge (0-1)
        width: Width (0-1), with x + width <= 1
        height: Height (0-1), with y + height <= 1
    """
    x: float = 0.0
    y: float = 0.0
    width: float = 1.0
    height: float = 1.0

    def __post_init__(self):
        for name in ("x", "y", "width", "height"):
            _check_fraction(name, float(getattr(self, name)))
        if self.x + self.width > 1 + REGION_EPSILON:
            raise ValueError(f"x + width must be <= 1, got {self.x + self.width}")
        if self.y + self.height > 1 + REGION_EPSILON:
            raise ValueError(f"y + height must be <= 1, got {self.y + self.height}")

    @classmethod
    def full_frame(cls) -> "CropRegion":
        return cls(0.0, 0.0, 1.0, 1.0)

    @classmethod
    def centered_square(
        cls,
        displayed_width: float,
        displayed_height: float,
        percent: float = INITIAL_CROP_PERCENT,
    ) -> "CropRegion":
        """
        Build a centred aspect-1 crop covering `percent` of the displayed width.

        When the square would be taller than the displayed image it is shrunk
        to the full height instead.

        Args:
            displayed_width: Displayed image width in pixels
            displayed_height: Displayed image height in pixels
            percent: Crop width as a percentage of the displayed width

        Returns:
            CropRegion centred on the displayed image
        """
        if displayed_width <= 0 or displayed_height <= 0:
            raise ValueError(
                f"Displayed size must be positive, got {displayed_width}x{displayed_height}"
            )
        if not (0 < percent <= 100):
            raise ValueError(f"percent must be 0 < p <= 100, got {percent}")

        width = percent / 100.0
        height = width * displayed_width / displayed_height
        if height > 1.0:
            height = 1.0
            width = displayed_height / displayed_width

        return cls(
            x=(1.0 - width) / 2.0,
            y=(1.0 - height) / 2.0,
            width=width,
            height=height,
        )


@dataclass(frozen=True)
class EditParameters:
    """Rotation, zoom and filter settings, all defaulting to identity.

    Attributes:
        rotation_degrees: Clockwise rotation (normalised into 0-360)
        zoom: Scale about the image centre (>= 1.0)
        brightness_pct: Brightness percentage (>= 0, 100 = unchanged)
        contrast_pct: Contrast percentage (>= 0, 100 = unchanged)
        sharpen_pct: Sharpen blend amount (0-100)
        vignette_pct: Vignette strength at the outer radius (0-100)
    """
    rotation_degrees: float = DEFAULT_ROTATION_DEGREES
    zoom: float = DEFAULT_ZOOM
    brightness_pct: float = DEFAULT_BRIGHTNESS_PCT
    contrast_pct: float = DEFAULT_CONTRAST_PCT
    sharpen_pct: float = DEFAULT_SHARPEN_PCT
    vignette_pct: float = DEFAULT_VIGNETTE_PCT

    def __post_init__(self):
        for name in self.__dataclass_fields__:
            value = float(getattr(self, name))
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
            object.__setattr__(self, name, value)

        object.__setattr__(self, "rotation_degrees", self.rotation_degrees % 360.0)

        if self.zoom < 1.0:
            raise ValueError(f"zoom must be >= 1.0, got {self.zoom}")
        if self.brightness_pct < 0:
            raise ValueError(f"brightness_pct must be >= 0, got {self.brightness_pct}")
        if self.contrast_pct < 0:
            raise ValueError(f"contrast_pct must be >= 0, got {self.contrast_pct}")
        if not (0 <= self.sharpen_pct <= 100):
            raise ValueError(f"sharpen_pct must be 0-100, got {self.sharpen_pct}")
        if not (0 <= self.vignette_pct <= 100):
            raise ValueError(f"vignette_pct must be 0-100, got {self.vignette_pct}")

    def is_identity(self) -> bool:
        return self == EditParameters()

    def with_changes(self, **changes: float) -> "EditParameters":
        """Return a copy with the given fields replaced (validated again)."""
        unknown = set(changes) - set(self.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown edit parameters: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditParameters":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)
