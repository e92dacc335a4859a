"""
Tests for the pixel difference highlighter.
"""

import numpy as np
import pytest
from PIL import Image

from imagecompare.engine import (
    PixelBuffer,
    InputMissingError,
    PreconditionError,
    highlight_diff,
    highlight_differences,
    parse_color,
)


class TestParseColor:
    """Test color normalization."""

    def test_rgb_tuple(self):
        assert parse_color((1, 2, 3)) == (1, 2, 3, 255)

    def test_rgba_list(self):
        assert parse_color([1, 2, 3, 4]) == (1, 2, 3, 4)

    def test_name(self):
        assert parse_color("blue") == (0, 0, 255, 255)

    def test_hex_with_alpha(self):
        assert parse_color("#ff000080") == (255, 0, 0, 128)

    def test_unknown_name(self):
        with pytest.raises(PreconditionError):
            parse_color("not-a-color")

    def test_out_of_range(self):
        with pytest.raises(PreconditionError):
            parse_color((300, 0, 0))


class TestHighlightDiff:
    """Test highlight_diff on in-memory buffers."""

    def test_identical_images(self, noise_buffer):
        result = highlight_diff(noise_buffer, noise_buffer)
        assert np.array_equal(result.pixels, noise_buffer.pixels)

    def test_marks_changed_pixels(self):
        first = PixelBuffer.solid(8, 6, (200, 200, 200))
        pixels = first.pixels.copy()
        pixels[4, 3] = (0, 0, 0, 255)
        pixels[0, 7] = (200, 200, 201, 255)
        second = PixelBuffer(pixels)

        result = highlight_diff(first, second, highlight_color=(0, 255, 0), workers=3)
        assert result.get_pixel(3, 4) == (0, 255, 0, 255)
        assert result.get_pixel(7, 0) == (0, 255, 0, 255)
        assert result.get_pixel(0, 0) == (200, 200, 200, 255)
        changed = np.any(result.pixels != first.pixels, axis=2)
        assert int(changed.sum()) == 2

    def test_alpha_difference_marked(self):
        first = PixelBuffer.solid(2, 2, (5, 5, 5, 255))
        second = PixelBuffer.solid(2, 2, (5, 5, 5, 0))
        result = highlight_diff(first, second, highlight_color="red")
        assert result.get_pixel(1, 1) == (255, 0, 0, 255)

    def test_cropped_to_common_area(self, noise_buffer):
        wide = noise_buffer.crop(0, 0, 100, 40)
        tall = noise_buffer.crop(0, 0, 30, 100)
        result = highlight_diff(wide, tall)
        assert result.size == (30, 40)
        assert np.array_equal(result.pixels, noise_buffer.crop(0, 0, 30, 40).pixels)

    def test_inputs_untouched(self, red_buffer, blue_buffer):
        before = red_buffer.pixels.copy()
        highlight_diff(red_buffer, blue_buffer)
        assert np.array_equal(red_buffer.pixels, before)

    def test_more_workers_than_rows(self):
        first = PixelBuffer.solid(4, 2, (0, 0, 0))
        second = PixelBuffer.solid(4, 2, (1, 0, 0))
        result = highlight_diff(first, second, workers=16)
        assert result.get_pixel(3, 1) == (255, 0, 0, 255)

    def test_none_input(self, red_buffer):
        with pytest.raises(PreconditionError):
            highlight_diff(red_buffer, None)


class TestHighlightDifferences:
    """Test the file-based wrapper."""

    def test_files(self, temp_dir):
        Image.new('RGB', (10, 10), color='white').save(temp_dir / "a.png", 'PNG')
        img = Image.new('RGB', (10, 10), color='white')
        img.putpixel((2, 3), (0, 0, 0))
        img.save(temp_dir / "b.png", 'PNG')

        result = highlight_differences(temp_dir / "a.png", temp_dir / "b.png", "blue")
        assert result.get_pixel(2, 3) == (0, 0, 255, 255)
        assert result.get_pixel(0, 0) == (255, 255, 255, 255)

    def test_missing_second(self, sample_images, temp_dir):
        with pytest.raises(InputMissingError) as exc_info:
            highlight_differences(sample_images['unique'], temp_dir / "gone.png")
        assert exc_info.value.role == "second"
