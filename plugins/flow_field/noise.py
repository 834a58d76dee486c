"""
Seeded Simplex Noise

2D simplex noise (Gustavson's formulation) over a permutation table that is
shuffled deterministically from an integer seed. Sampling is vectorized:
pass scalars for a single value or numpy arrays to sample a whole batch of
particles in one call.

The 3D variant is an approximation built from three 2D samples. It exists
only to give the flow field a smooth time axis and is not true 3D noise.
"""

import math
import numpy as np


F2 = 0.5 * (math.sqrt(3.0) - 1.0)
G2 = (3.0 - math.sqrt(3.0)) / 6.0

# Park-Miller minimal standard generator
LCG_MULTIPLIER = 16807
LCG_MODULUS = 2147483647

GRAD3 = np.array([
    [1, 1, 0], [-1, 1, 0], [1, -1, 0], [-1, -1, 0],
    [1, 0, 1], [-1, 0, 1], [1, 0, -1], [-1, 0, -1],
    [0, 1, 1], [0, -1, 1], [0, 1, -1], [0, -1, -1],
], dtype=np.float64)
GRAD3.setflags(write=False)


def build_permutation(seed):
    """Shuffle 0..255 with a seeded LCG and return (perm, perm_mod12).

    Both tables have 512 entries (the shuffle is repeated) so corner
    hashing never has to mask an index twice.
    """
    p = list(range(256))
    n = int(seed)
    for i in range(255, 0, -1):
        n = (n * LCG_MULTIPLIER) % LCG_MODULUS
        j = n % (i + 1)
        p[i], p[j] = p[j], p[i]

    perm = np.array([p[k & 255] for k in range(512)], dtype=np.int64)
    perm_mod12 = perm % 12
    perm.setflags(write=False)
    perm_mod12.setflags(write=False)
    return perm, perm_mod12


def random_seed(rng):
    """Draw a noise seed from a numpy Generator."""
    return int(rng.integers(1, LCG_MODULUS))


def _corner(x, y, gi):
    """Contribution of one simplex corner (zero outside its radius)."""
    t = 0.5 - x * x - y * y
    g = GRAD3[gi]
    t2 = t * t
    return np.where(t >= 0, t2 * t2 * (g[..., 0] * x + g[..., 1] * y), 0.0)


class SimplexNoise:
    """Immutable seeded noise sampler.

    Regenerating a field means building a new instance; tables are
    read-only once constructed.
    """

    def __init__(self, seed):
        self.seed = int(seed)
        self.perm, self.perm_mod12 = build_permutation(self.seed)

    def noise2d(self, x, y):
        """Sample 2D simplex noise, roughly in [-1, 1]."""
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        perm = self.perm
        perm_mod12 = self.perm_mod12

        # Skew to find the simplex cell
        s = (x + y) * F2
        i = np.floor(x + s)
        j = np.floor(y + s)

        # Unskew cell origin back to (x, y) space
        t = (i + j) * G2
        x0 = x - (i - t)
        y0 = y - (j - t)

        # Lower or upper triangle of the cell
        i1 = (x0 > y0).astype(np.int64)
        j1 = 1 - i1

        x1 = x0 - i1 + G2
        y1 = y0 - j1 + G2
        x2 = x0 - 1.0 + 2.0 * G2
        y2 = y0 - 1.0 + 2.0 * G2

        ii = i.astype(np.int64) & 255
        jj = j.astype(np.int64) & 255
        gi0 = perm_mod12[ii + perm[jj]]
        gi1 = perm_mod12[ii + i1 + perm[jj + j1]]
        gi2 = perm_mod12[ii + 1 + perm[jj + 1]]

        n = _corner(x0, y0, gi0) + _corner(x1, y1, gi1) + _corner(x2, y2, gi2)
        result = 70.0 * n
        if result.ndim == 0:
            return float(result)
        return result

    def noise3d(self, x, y, z):
        """Pseudo-3D noise: mean of three decorrelated 2D samples.

        Offsets of 1000 and 2000 pull the z-dependent samples from
        distant, unrelated parts of the 2D plane.
        """
        xy = self.noise2d(x, y)
        xz = self.noise2d(np.add(x, 1000.0), z)
        yz = self.noise2d(np.add(y, 2000.0), z)
        return (xy + xz + yz) / 3.0
