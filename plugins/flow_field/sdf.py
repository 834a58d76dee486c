"""
Signed Distance Field from a Binary Mask

Builds a grid of signed distances (negative inside the shape, positive
outside) plus its X/Y derivatives, and samples both bilinearly in world
coordinates.

The distance transform is deliberately two-stage:
  1. chamfer propagation along each row (forward then backward scan)
  2. Felzenszwalb-Huttenlocher lower envelope down each column, using the
     squared row distances as base costs
This approximates the Euclidean transform. The flow deflection falloff is
tuned against its error profile, so do not replace it with an exact EDT.
"""

import math
import numpy as np

from .shapes import rasterize


# Channel-sum threshold on RGB (384 / 765 ~= 50% brightness)
BRIGHTNESS_THRESHOLD = 384

# Gradients shorter than this normalize to (0, 0)
MIN_GRADIENT = 1e-4


def mask_from_rgba(pixels):
    """Classify pixels as inside (True) when R + G + B > 384.

    Args:
        pixels: (H, W, 3) or (H, W, 4) uint8 array
    """
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] < 3:
        raise ValueError(f"expected (H, W, 3|4) pixels, got shape {pixels.shape}")
    brightness = pixels[:, :, :3].astype(np.int32).sum(axis=2)
    return brightness > BRIGHTNESS_THRESHOLD


def _chamfer_rows(dist):
    """Relax each cell to min(self, neighbour + 1) along rows, in place."""
    w = dist.shape[1]
    for x in range(1, w):
        np.minimum(dist[:, x], dist[:, x - 1] + 1.0, out=dist[:, x])
    for x in range(w - 2, -1, -1):
        np.minimum(dist[:, x], dist[:, x + 1] + 1.0, out=dist[:, x])


def _lower_envelope(f, inf):
    """1-D squared distance transform of sampled function f.

    Returns a list where out[y] = min_q (f[q] + (y - q)^2).
    """
    n = len(f)
    v = [0] * n
    z = [0.0] * (n + 1)
    k = 0
    z[0] = -inf
    z[1] = inf

    for q in range(1, n):
        vk = v[k]
        s = ((f[q] + q * q) - (f[vk] + vk * vk)) / (2 * q - 2 * vk)
        while s <= z[k]:
            k -= 1
            vk = v[k]
            s = ((f[q] + q * q) - (f[vk] + vk * vk)) / (2 * q - 2 * vk)
        k += 1
        v[k] = q
        z[k] = s
        z[k + 1] = inf

    out = [0.0] * n
    k = 0
    for y in range(n):
        while z[k + 1] < y:
            k += 1
        dy = y - v[k]
        out[y] = f[v[k]] + dy * dy
    return out


def distance_transform(dist):
    """Two-stage squared distance transform, in place.

    Args:
        dist: (H, W) float array, 0 at feature cells and large elsewhere

    Returns:
        dist, now holding squared distances to the nearest feature cell
    """
    h, w = dist.shape
    inf = float((w + h) * (w + h))

    _chamfer_rows(dist)

    squared = dist * dist
    for x in range(w):
        dist[:, x] = _lower_envelope(squared[:, x].tolist(), inf)
    return dist


def signed_distance(inside, resolution):
    """Signed distance grid in world units from a boolean mask."""
    h, w = inside.shape
    far = float(w + h)

    to_inside = np.where(inside, 0.0, far)
    to_outside = np.where(inside, far, 0.0)
    distance_transform(to_inside)
    distance_transform(to_outside)

    return np.where(
        inside,
        -np.sqrt(to_outside) * resolution,
        np.sqrt(to_inside) * resolution,
    )


def gradients(sdf, resolution):
    """Central differences (one-sided at borders) in distance per pixel."""
    h, w = sdf.shape
    if w > 1:
        grad_x = np.gradient(sdf, axis=1) / resolution
    else:
        grad_x = np.zeros_like(sdf)
    if h > 1:
        grad_y = np.gradient(sdf, axis=0) / resolution
    else:
        grad_y = np.zeros_like(sdf)
    return grad_x, grad_y


def _sample_bilinear(grid, gx, gy):
    """Bilinear sample of grid at fractional cell coords.

    Returns (values, in_bounds). Values where the base cell lies outside
    the grid are meaningless and must be masked by the caller.
    """
    h, w = grid.shape
    x0 = np.floor(gx)
    y0 = np.floor(gy)
    in_bounds = (x0 >= 0) & (x0 < w) & (y0 >= 0) & (y0 < h)

    xi = np.clip(x0, 0, w - 1).astype(np.int64)
    yi = np.clip(y0, 0, h - 1).astype(np.int64)
    x1 = np.minimum(xi + 1, w - 1)
    y1 = np.minimum(yi + 1, h - 1)
    fx = np.where(in_bounds, gx - x0, 0.0)
    fy = np.where(in_bounds, gy - y0, 0.0)

    top = grid[yi, xi] * (1.0 - fx) + grid[yi, x1] * fx
    bottom = grid[y1, xi] * (1.0 - fx) + grid[y1, x1] * fx
    return top * (1.0 - fy) + bottom * fy, in_bounds


class DistanceField:
    """Signed distance + gradient grids for flow deflection.

    The three grids are built together and swapped in as one snapshot, so
    a sampler never sees a mix of old and new data. Until build() succeeds
    the field reports +inf distance and zero gradient everywhere.

    Args:
        resolution: Canvas pixels per grid cell
    """

    def __init__(self, resolution=4):
        self.resolution = resolution
        self.grid_width = 0
        self.grid_height = 0
        self._grids = None  # (sdf, grad_x, grad_y)

    def build(self, mask):
        """Build from a boolean (H, W) inside/outside mask."""
        inside = np.asarray(mask, dtype=bool)
        if inside.ndim != 2 or inside.size == 0:
            self.clear()
            raise ValueError(f"mask must be a non-empty 2D grid, got shape {inside.shape}")

        sdf = signed_distance(inside, self.resolution)
        grad_x, grad_y = gradients(sdf, self.resolution)

        self.grid_height, self.grid_width = inside.shape
        self._grids = (sdf, grad_x, grad_y)
        return self

    def grid_size(self, canvas_width, canvas_height):
        """Grid dimensions covering a canvas at this resolution."""
        return (math.ceil(canvas_width / self.resolution),
                math.ceil(canvas_height / self.resolution))

    def load_shape(self, path, canvas_width, canvas_height):
        """Rasterize an image file to the grid and build from it.

        Any failure leaves the field cleared and re-raises.
        """
        grid_w, grid_h = self.grid_size(canvas_width, canvas_height)
        try:
            pixels = rasterize(path, grid_w, grid_h)
            return self.build(mask_from_rgba(pixels))
        except (OSError, ValueError):
            self.clear()
            raise

    def get_distance(self, x, y):
        """Signed distance at world (x, y); +inf off-grid or unloaded."""
        grids = self._grids
        if grids is None:
            return _like(x, y, math.inf)
        gx = np.asarray(x, dtype=np.float64) / self.resolution
        gy = np.asarray(y, dtype=np.float64) / self.resolution
        value, in_bounds = _sample_bilinear(grids[0], gx, gy)
        result = np.where(in_bounds, value, np.inf)
        if result.ndim == 0:
            return float(result)
        return result

    def get_gradient(self, x, y):
        """Unit gradient at world (x, y); (0, 0) off-grid, unloaded or flat."""
        grids = self._grids
        if grids is None:
            return _like(x, y, 0.0), _like(x, y, 0.0)
        gx = np.asarray(x, dtype=np.float64) / self.resolution
        gy = np.asarray(y, dtype=np.float64) / self.resolution
        dx, in_bounds = _sample_bilinear(grids[1], gx, gy)
        dy, _ = _sample_bilinear(grids[2], gx, gy)

        length = np.hypot(dx, dy)
        valid = in_bounds & (length >= MIN_GRADIENT)
        safe = np.where(valid, length, 1.0)
        ux = np.where(valid, dx / safe, 0.0)
        uy = np.where(valid, dy / safe, 0.0)
        if ux.ndim == 0:
            return float(ux), float(uy)
        return ux, uy

    def is_loaded(self):
        return self._grids is not None

    def clear(self):
        self._grids = None

    @property
    def distance(self):
        """Signed distance grid, or None when unloaded."""
        return None if self._grids is None else self._grids[0]


def _like(x, y, fill):
    """Constant result shaped like the (broadcast) sample coordinates."""
    shape = np.broadcast(np.asarray(x), np.asarray(y)).shape
    if shape == ():
        return fill
    return np.full(shape, fill)
