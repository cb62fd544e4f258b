"""
Procedural diagnostic texture: an 8 x 8 grid of labelled colour cells.

Rows are lettered A-H top to bottom and columns numbered 1-8 left to right,
so ``A1`` sits in the top-left corner of the image. The four cell colours
follow a pattern that is deliberately not a plain checkerboard, which makes
mirrored or rotated mappings easy to spot.

The image depends on nothing but the constants below; it is built once per
process and shared read-only.
"""

from functools import lru_cache
from io import BytesIO
from typing import Tuple, Union

import base64
import logging
import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

TEXTURE_SIZE = 1024
GRID_SIZE = 8
ROW_LETTERS = "ABCDEFGH"

CELL_COLORS: Tuple[str, ...] = (
    "#4d8076",  # teal
    "#fceea7",  # yellow
    "#d95d5d",  # red
    "#e8ac65",  # tan
)
LABEL_COLOR = "#1f2937"
LABEL_FONT_SIZE = 60

_BOLD_FONT_CANDIDATES = (
    "DejaVuSans-Bold.ttf",
    "LiberationSans-Bold.ttf",
    "Arial Bold.ttf",
    "arialbd.ttf",
)


def pattern_index(col: int, row: int) -> int:
    """Colour index of the cell at (*col*, *row*)."""
    return ((col % 2) + (row % 2) * 2 + col // 2 + row // 2) % len(CELL_COLORS)


def cell_label(row: int, col: int) -> str:
    """Row letter followed by 1-based column number, e.g. ``"C5"``."""
    if not (0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE):
        raise ValueError(f"cell ({row}, {col}) outside the {GRID_SIZE}x{GRID_SIZE} grid")
    return f"{ROW_LETTERS[row]}{col + 1}"


def _label_font(size: int) -> Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]:
    for name in _BOLD_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.warning("No bold TrueType font found; using Pillow's default font")
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=1)
def generate_diagnostic_texture() -> Image.Image:
    """Build the labelled grid image.

    Cached: every caller receives the same Image object and must not draw
    on it. Use ``.copy()`` for a private, mutable version.
    """
    img = Image.new("RGB", (TEXTURE_SIZE, TEXTURE_SIZE), color="white")
    draw = ImageDraw.Draw(img)
    font = _label_font(LABEL_FONT_SIZE)

    cell_w = TEXTURE_SIZE // GRID_SIZE
    cell_h = TEXTURE_SIZE // GRID_SIZE
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            x0, y0 = col * cell_w, row * cell_h
            draw.rectangle(
                [x0, y0, x0 + cell_w - 1, y0 + cell_h - 1],
                fill=CELL_COLORS[pattern_index(col, row)],
            )
            draw.text(
                (x0 + cell_w / 2, y0 + cell_h / 2),
                cell_label(row, col),
                fill=LABEL_COLOR,
                font=font,
                anchor="mm",
            )

    logger.debug("Generated %dx%d diagnostic texture", TEXTURE_SIZE, TEXTURE_SIZE)
    return img


@lru_cache(maxsize=1)
def diagnostic_texture_array() -> np.ndarray:
    """(H, W, 3) uint8 pixels of the texture, read-only."""
    pixels = np.asarray(generate_diagnostic_texture(), dtype=np.uint8).copy()
    pixels.flags.writeable = False
    return pixels


@lru_cache(maxsize=1)
def texture_png_bytes() -> bytes:
    buf = BytesIO()
    generate_diagnostic_texture().save(buf, format="PNG")
    return buf.getvalue()


def texture_data_url() -> str:
    """``data:image/png;base64,...`` URL for direct use by a web renderer."""
    encoded = base64.b64encode(texture_png_bytes()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
