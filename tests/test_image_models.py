"""
Unit tests for image_models module.

Tests the RasterBuffer container, CropRegion validation and factories,
and EditParameters defaults and validation.
"""

import io

import numpy as np
import pytest
from PIL import Image

from ICS_Libs.ImageEditingLib.image_models import CropRegion, EditParameters, RasterBuffer


class TestRasterBuffer:
    """Tests for RasterBuffer."""

    def test_rejects_wrong_pixel_length(self):
        """Should require exactly width*height*4 bytes."""
        with pytest.raises(ValueError):
            RasterBuffer(2, 2, bytes(15))

    def test_rejects_non_positive_dimensions(self):
        with pytest.raises(ValueError):
            RasterBuffer(0, 3, b"")

    def test_accepts_bytearray(self):
        """Should copy mutable input into immutable bytes."""
        data = bytearray(4)
        buffer = RasterBuffer(1, 1, data)
        data[0] = 255

        assert isinstance(buffer.pixels, bytes)
        assert buffer.pixel(0, 0) == (0, 0, 0, 0)

    def test_solid_fills_every_pixel(self):
        buffer = RasterBuffer.solid(3, 2, (10, 20, 30, 40))

        assert buffer.size == (3, 2)
        assert buffer.pixel(2, 1) == (10, 20, 30, 40)

    def test_pixel_is_row_major(self):
        """Should address pixels as (column, row)."""
        pixels = np.zeros((2, 3, 4), dtype=np.uint8)
        pixels[1, 2] = (1, 2, 3, 4)
        buffer = RasterBuffer.from_array(pixels)

        assert buffer.width == 3
        assert buffer.height == 2
        assert buffer.pixel(2, 1) == (1, 2, 3, 4)

    def test_pixel_out_of_bounds(self):
        with pytest.raises(IndexError):
            RasterBuffer.solid(2, 2, (0, 0, 0, 0)).pixel(2, 0)

    def test_from_image_converts_to_rgba(self):
        """Should convert RGB images to RGBA with opaque alpha."""
        image = Image.new("RGB", (4, 3), (200, 100, 50))

        buffer = RasterBuffer.from_image(image)

        assert buffer.size == (4, 3)
        assert buffer.pixel(0, 0) == (200, 100, 50, 255)

    def test_to_image_matches_pixels(self, patterned_source):
        image = patterned_source.to_image()

        assert image.mode == "RGBA"
        assert image.size == patterned_source.size
        assert image.getpixel((3, 4)) == patterned_source.pixel(3, 4)

    def test_to_array_is_writable_copy(self, patterned_source):
        """Should return a copy that does not alias the buffer."""
        array = patterned_source.to_array()
        array[0, 0] = (0, 0, 0, 0)

        assert array.shape == (8, 5, 4)
        assert RasterBuffer.from_array(patterned_source.to_array()) == patterned_source

    def test_from_array_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            RasterBuffer.from_array(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_equality_is_by_value(self):
        assert RasterBuffer.solid(2, 2, (1, 2, 3, 4)) == RasterBuffer.solid(2, 2, (1, 2, 3, 4))
        assert RasterBuffer.solid(2, 2, (1, 2, 3, 4)) != RasterBuffer.solid(2, 2, (1, 2, 3, 5))

    def test_decode_png(self):
        """Should decode encoded image bytes."""
        stream = io.BytesIO()
        Image.new("RGBA", (3, 3), (9, 8, 7, 255)).save(stream, format="PNG")

        buffer = RasterBuffer.decode(stream.getvalue())

        assert buffer.size == (3, 3)
        assert buffer.pixel(1, 1) == (9, 8, 7, 255)

    def test_decode_rejects_garbage(self):
        with pytest.raises(ValueError):
            RasterBuffer.decode(b"not an image")


class TestCropRegion:
    """Tests for CropRegion."""

    def test_full_frame(self):
        assert CropRegion.full_frame() == CropRegion(0.0, 0.0, 1.0, 1.0)

    def test_rejects_overflowing_region(self):
        with pytest.raises(ValueError):
            CropRegion(x=0.6, y=0.0, width=0.5, height=1.0)

    def test_rejects_negative_fraction(self):
        with pytest.raises(ValueError):
            CropRegion(x=-0.1, y=0.0, width=0.5, height=0.5)

    def test_centered_square_landscape(self):
        """Should shrink the square to the full height on wide images."""
        region = CropRegion.centered_square(200, 100)

        assert region.height == pytest.approx(1.0)
        assert region.width == pytest.approx(0.5)
        assert region.x == pytest.approx(0.25)
        assert region.y == pytest.approx(0.0)

    def test_centered_square_portrait(self):
        """Should use 90% of the width on tall images."""
        region = CropRegion.centered_square(100, 200)

        assert region.width == pytest.approx(0.9)
        assert region.height == pytest.approx(0.45)
        assert region.x == pytest.approx(0.05)
        assert region.y == pytest.approx(0.275)

    def test_centered_square_is_square_in_pixels(self):
        region = CropRegion.centered_square(300, 240)

        assert region.width * 300 == pytest.approx(region.height * 240)


class TestEditParameters:
    """Tests for EditParameters."""

    def test_defaults_are_identity(self):
        params = EditParameters()

        assert params.is_identity()
        assert params.rotation_degrees == 0.0
        assert params.zoom == 1.0
        assert params.brightness_pct == 100.0
        assert params.contrast_pct == 100.0
        assert params.sharpen_pct == 0.0
        assert params.vignette_pct == 0.0

    def test_rotation_is_normalised(self):
        assert EditParameters(rotation_degrees=370).rotation_degrees == pytest.approx(10.0)
        assert EditParameters(rotation_degrees=360).rotation_degrees == 0.0
        assert EditParameters(rotation_degrees=-90).rotation_degrees == pytest.approx(270.0)

    @pytest.mark.parametrize("field_name, value", [
        ("zoom", 0.5),
        ("brightness_pct", -1),
        ("contrast_pct", -5),
        ("sharpen_pct", 101),
        ("vignette_pct", -0.1),
        ("rotation_degrees", float("nan")),
    ])
    def test_rejects_invalid_values(self, field_name, value):
        with pytest.raises(ValueError):
            EditParameters(**{field_name: value})

    def test_with_changes(self):
        params = EditParameters().with_changes(sharpen_pct=40)

        assert params.sharpen_pct == 40.0
        assert not params.is_identity()

    def test_with_changes_rejects_unknown(self):
        with pytest.raises(ValueError):
            EditParameters().with_changes(saturation=10)

    def test_dict_round_trip_ignores_unknown_keys(self):
        data = EditParameters(zoom=2, vignette_pct=30).to_dict()
        data["legacy_field"] = 1

        assert EditParameters.from_dict(data) == EditParameters(zoom=2, vignette_pct=30)
