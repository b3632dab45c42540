"""Octahedral mapping between unit directions and a square texture.

The sphere is projected onto the octahedron |x| + |y| + |z| = 1 and unfolded
into the square [-1, 1]^2.  The inner diamond |u| + |v| <= 1 holds the upper
hemisphere (z >= 0); the four corner triangles hold the lower hemisphere,
folded back over the diamond's edges so that neighbouring faces meet without
seams.  The square's centre is the zenith (0, 0, 1) and its four corners
are the nadir (0, 0, -1).
"""

import numpy as np

from ._common import InvalidDimensionsError
from .samplers import DirectionSampler


def _sign(a):
    # signbit semantics: -0.0 counts as negative
    return np.where(np.signbit(a), -1.0, 1.0)


def _fold(a, s):
    """Mirror a coordinate across the diamond edge (lower hemisphere only)."""
    return (1.0 - a) * s


def normalize(vectors):
    """Scale (..., 3) vectors to unit length."""
    return vectors / np.sqrt(np.sum(vectors**2, axis=-1, keepdims=True))


def octahedral_unfold(u, v):
    """Convert octahedral square coordinates in [-1, 1] to unit directions.

    ``u`` and ``v`` may be scalars or arrays of matching shape; the result
    has shape ``(..., 3)``.
    """
    u = np.asarray(u, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)

    au = np.abs(u)
    av = np.abs(v)
    su = _sign(u)
    sv = _sign(v)

    # Height above the equator on the octahedron; negative in the folded corners
    h = 1.0 - au - av
    lower = h < 0

    x = np.where(lower, -su * sv * _fold(av, sv), -u)
    y = np.where(lower, su * sv * _fold(au, su), v)

    # The construction is linear, not spherical: normalization is required
    return normalize(np.stack([x, y, h], axis=-1))


def octahedral_fold(directions):
    """Convert directions (..., 3) to octahedral square coordinates (u, v).

    Inverse of :func:`octahedral_unfold`.  Directions need not be unit length.
    """
    d = np.asarray(directions, dtype=np.float64)
    n = d / np.sum(np.abs(d), axis=-1, keepdims=True)
    nx, ny, nz = n[..., 0], n[..., 1], n[..., 2]

    lower = nz < 0
    u = np.where(lower, (1.0 - np.abs(ny)) * _sign(-nx), -nx)
    v = np.where(lower, (1.0 - np.abs(nx)) * _sign(ny), ny)
    return u, v


def pixel_to_octahedral(x, y, size):
    """Map integer pixel coordinates to the signed square, u = 2x/S - 1."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    return 2.0 * x / size - 1.0, 2.0 * y / size - 1.0


def octahedral_directions(size):
    """Compute (size x size x 3) unit directions, indexed [y, x]."""
    if size <= 0:
        raise InvalidDimensionsError(f"Octahedral map size must be positive, got {size}")
    xs, ys = np.meshgrid(np.arange(size), np.arange(size))
    u, v = pixel_to_octahedral(xs, ys, size)
    return octahedral_unfold(u, v)


def project(sampler: DirectionSampler, size: int) -> np.ndarray:
    """Render a size x size octahedral map by sampling every pixel's direction.

    Returns a freshly allocated (size, size, C) uint8 array.
    """
    if size <= 0:
        raise InvalidDimensionsError(f"Octahedral map size must be positive, got {size}")

    dirs = octahedral_directions(size)
    colors = sampler.sample(dirs)

    out = np.empty((size, size, colors.shape[-1]), dtype=np.uint8)
    out[...] = colors
    return out
