"""Tests for the procedural diagnostic texture."""
import base64
import typing

import numpy as np
import pytest
from PIL import ImageFont

import diagnostic_texture as dt

TEAL = (77, 128, 118)
YELLOW = (252, 238, 167)
RED = (217, 93, 93)
LABEL = (31, 41, 55)
CELL = dt.TEXTURE_SIZE // dt.GRID_SIZE


class TestLayout:

    def test_labels(self):
        assert dt.cell_label(0, 0) == "A1"
        assert dt.cell_label(2, 4) == "C5"
        assert dt.cell_label(7, 7) == "H8"

    def test_label_outside_grid(self):
        with pytest.raises(ValueError):
            dt.cell_label(8, 0)

    def test_pattern_is_not_a_checkerboard(self):
        assert dt.pattern_index(0, 0) == 0
        assert dt.pattern_index(1, 0) == 1
        assert dt.pattern_index(0, 1) == 2
        assert dt.pattern_index(1, 1) == 3
        assert dt.pattern_index(2, 0) == 1
        assert dt.pattern_index(2, 2) == 2

    def test_every_colour_used(self):
        used = {
            dt.pattern_index(col, row)
            for row in range(dt.GRID_SIZE)
            for col in range(dt.GRID_SIZE)
        }
        assert used == set(range(len(dt.CELL_COLORS)))


class TestImage:

    def test_size_and_mode(self):
        img = dt.generate_diagnostic_texture()
        assert img.size == (1024, 1024)
        assert img.mode == "RGB"

    def test_cell_corner_colours(self):
        pixels = dt.diagnostic_texture_array()
        assert tuple(pixels[4, 4]) == TEAL             # A1, top-left
        assert tuple(pixels[4, CELL + 4]) == YELLOW    # A2
        assert tuple(pixels[CELL + 4, 4]) == RED       # B1

    def test_labels_are_drawn(self):
        pixels = dt.diagnostic_texture_array()
        cell = pixels[:CELL, :CELL].reshape(-1, 3)
        assert np.any(np.all(cell == LABEL, axis=1))

    def test_array_is_read_only(self):
        with pytest.raises(ValueError):
            dt.diagnostic_texture_array()[0, 0, 0] = 0

    def test_shared_instance(self):
        assert dt.generate_diagnostic_texture() is dt.generate_diagnostic_texture()

    def test_deterministic_across_rebuilds(self):
        first = np.asarray(dt.generate_diagnostic_texture()).copy()
        dt.generate_diagnostic_texture.cache_clear()
        dt.diagnostic_texture_array.cache_clear()
        dt.texture_png_bytes.cache_clear()
        second = np.asarray(dt.generate_diagnostic_texture())
        assert np.array_equal(first, second)


class TestEncoding:

    def test_png_bytes(self):
        assert dt.texture_png_bytes().startswith(b"\x89PNG\r\n\x1a\n")

    def test_data_url(self):
        url = dt.texture_data_url()
        prefix = "data:image/png;base64,"
        assert url.startswith(prefix)
        assert base64.b64decode(url[len(prefix):]) == dt.texture_png_bytes()


def test_label_font_matches_annotation():
    font = dt._label_font(dt.LABEL_FONT_SIZE)
    assert isinstance(font, (ImageFont.FreeTypeFont, ImageFont.ImageFont))
    assert typing.get_type_hints(dt._label_font)["return"] == typing.Union[
        ImageFont.FreeTypeFont, ImageFont.ImageFont
    ]
