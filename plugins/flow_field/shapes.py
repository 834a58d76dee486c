"""
Shape Rasterizer

Draws an image file onto a black grid-sized canvas so the distance field
can threshold it. Bright pixels mean inside, dark pixels mean outside.
Any format Pillow can decode is accepted.
"""

import numpy as np
from PIL import Image


def rasterize(path, grid_width, grid_height):
    """Load an image, flatten it onto black and scale it to the grid.

    Args:
        path: Image file path (or file object)
        grid_width, grid_height: Target grid dimensions in cells

    Returns:
        (grid_height, grid_width, 4) uint8 RGBA array

    Raises:
        OSError: file missing or not decodable
        ValueError: non-positive grid dimensions
    """
    if grid_width <= 0 or grid_height <= 0:
        raise ValueError(f"grid must be non-empty, got {grid_width}x{grid_height}")

    with Image.open(path) as img:
        img = img.convert("RGBA")
        # Transparent areas count as background (outside)
        background = Image.new("RGBA", img.size, (0, 0, 0, 255))
        flat = Image.alpha_composite(background, img)
        flat = flat.resize((grid_width, grid_height), Image.Resampling.BILINEAR)
        return np.asarray(flat, dtype=np.uint8).copy()
