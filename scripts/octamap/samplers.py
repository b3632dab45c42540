"""Direction samplers: look up the colour an environment has in a direction.

Directions use a Z-up frame: +Z is the zenith, and azimuth is measured in the
XY plane from +X toward +Y.  Every sampler takes an (..., 3) array of unit
vectors and returns an (..., C) uint8 array of texels.
"""

import os
from typing import Protocol

import numpy as np

from ._common import (
    InvalidDimensionsError,
    SourceNotFoundError,
    check_dimensions,
    load_image,
)

FILTERS = ("nearest", "bilinear")

# Face order matching SDL_GPUCubeMapFace enum
FACES = ["px", "nx", "py", "ny", "pz", "nz"]


class DirectionSampler(Protocol):
    """Anything that can return the colour found in a direction."""

    width: int
    height: int

    def sample(self, directions: np.ndarray) -> np.ndarray: ...


# ---------------------------------------------------------------------------
# Equirectangular (lat/long) source
# ---------------------------------------------------------------------------


def equirect_coordinates(directions, width, height):
    """Map unit directions to fractional (px, py) in an equirectangular image.

    Azimuth atan2(y, x) spans the full width, so -pi lands on column 0 and
    +pi on column ``width``.  Elevation spans ``height - 1`` rows: +pi/2 is
    row 0 and -pi/2 the last row.  Note the two axes scale differently
    (``width`` against ``height - 1``).
    """
    x = directions[..., 0]
    y = directions[..., 1]
    z = directions[..., 2]

    elevation = np.arctan2(z, np.sqrt(x * x + y * y))
    azimuth = np.arctan2(y, x)

    px = (azimuth / np.pi + 1.0) * width / 2
    py = (-elevation / np.pi + 0.5) * (height - 1)
    return px, py


class EquirectangularSampler:
    """Samples an (H, W, C) equirectangular panorama.

    ``nearest`` truncates to the containing texel; ``bilinear`` blends the
    four surrounding texels.  Both wrap horizontally (longitude is periodic)
    and clamp vertically (poles).
    """

    def __init__(self, image, filter="nearest"):
        check_dimensions(image, "equirectangular source")
        if filter not in FILTERS:
            raise ValueError(f"Unknown filter {filter!r}, expected one of {FILTERS}")
        self.image = image
        self.filter = filter
        self.height, self.width = image.shape[:2]

    def sample(self, directions):
        directions = np.asarray(directions, dtype=np.float64)
        px, py = equirect_coordinates(directions.reshape(-1, 3), self.width, self.height)
        if self.filter == "bilinear":
            colors = self._sample_bilinear(px, py)
        else:
            colors = self._sample_nearest(px, py)
        return colors.reshape(directions.shape[:-1] + colors.shape[-1:])

    def _sample_nearest(self, px, py):
        x = np.floor(px).astype(np.int64) % self.width
        y = np.clip(np.floor(py).astype(np.int64), 0, self.height - 1)
        return self.image[y, x]

    def _sample_bilinear(self, px, py):
        h, w = self.height, self.width

        # Texel k covers [k, k + 1), so its centre sits at k + 0.5
        px = px - 0.5
        py = py - 0.5

        # Integer coordinates for the 4 surrounding pixels
        x0 = np.floor(px).astype(np.int64)
        y0 = np.floor(py).astype(np.int64)
        x1 = x0 + 1
        y1 = y0 + 1

        # Fractional part for interpolation weights
        fx = (px - x0).astype(np.float32)[..., np.newaxis]
        fy = (py - y0).astype(np.float32)[..., np.newaxis]

        # Wrap horizontally (longitude wraps), clamp vertically (poles)
        x0 = x0 % w
        x1 = x1 % w
        y0 = np.clip(y0, 0, h - 1)
        y1 = np.clip(y1, 0, h - 1)

        p00 = self.image[y0, x0].astype(np.float32)
        p10 = self.image[y0, x1].astype(np.float32)
        p01 = self.image[y1, x0].astype(np.float32)
        p11 = self.image[y1, x1].astype(np.float32)

        result = (
            p00 * (1 - fx) * (1 - fy)
            + p10 * fx * (1 - fy)
            + p01 * (1 - fx) * fy
            + p11 * fx * fy
        )
        return np.clip(np.rint(result), 0, 255).astype(np.uint8)


# ---------------------------------------------------------------------------
# Skybox (cube map) source
# ---------------------------------------------------------------------------


def cube_face_directions(face, size):
    """Compute (size x size x 3) unit directions for a cube face.

    Directions are in the cube's Y-up frame.  Normalized pixel coordinates
    span [-1, 1] inclusive so edge pixels of adjacent faces share the exact
    same direction.
    """
    coords = np.linspace(-1.0, 1.0, size)
    # u varies across columns, v varies down rows
    u, v = np.meshgrid(coords, -coords)

    dirs = np.zeros((size, size, 3), dtype=np.float64)

    if face == "px":  # +X: look right
        dirs[..., 0] = 1.0
        dirs[..., 1] = v
        dirs[..., 2] = -u
    elif face == "nx":  # -X: look left
        dirs[..., 0] = -1.0
        dirs[..., 1] = v
        dirs[..., 2] = u
    elif face == "py":  # +Y: look up
        dirs[..., 0] = u
        dirs[..., 1] = 1.0
        dirs[..., 2] = -v
    elif face == "ny":  # -Y: look down
        dirs[..., 0] = u
        dirs[..., 1] = -1.0
        dirs[..., 2] = v
    elif face == "pz":  # +Z: look forward
        dirs[..., 0] = u
        dirs[..., 1] = v
        dirs[..., 2] = 1.0
    elif face == "nz":  # -Z: look backward
        dirs[..., 0] = -u
        dirs[..., 1] = v
        dirs[..., 2] = -1.0
    else:
        raise ValueError(f"Unknown cube face {face!r}, expected one of {FACES}")

    dirs /= np.sqrt(np.sum(dirs**2, axis=-1, keepdims=True))
    return dirs


def to_cube_frame(directions):
    """Z-up sampler frame -> Y-up cube frame: (x, y, z) -> (y, z, x)."""
    return np.stack(
        [directions[..., 1], directions[..., 2], directions[..., 0]], axis=-1
    )


def from_cube_frame(directions):
    """Y-up cube frame -> Z-up sampler frame: (x, y, z) -> (z, x, y)."""
    return np.stack(
        [directions[..., 2], directions[..., 0], directions[..., 1]], axis=-1
    )


class SkyboxSampler:
    """Samples six square cube-map faces named px/nx/py/ny/pz/nz.

    Lookups are nearest-texel.  The cube frame is the one the faces were
    rendered in, so a skybox baked from an equirectangular panorama agrees
    with sampling that panorama directly.
    """

    def __init__(self, faces):
        missing = [name for name in FACES if name not in faces]
        if missing:
            raise InvalidDimensionsError(f"Skybox is missing faces: {', '.join(missing)}")

        shape = None
        for name in FACES:
            face = faces[name]
            check_dimensions(face, f"skybox face {name}")
            if face.shape[0] != face.shape[1]:
                raise InvalidDimensionsError(
                    f"Skybox face {name} is {face.shape[1]}x{face.shape[0]}, faces must be square"
                )
            if shape is None:
                shape = face.shape
            elif face.shape != shape:
                raise InvalidDimensionsError(
                    f"Skybox face {name} has shape {face.shape}, expected {shape} like the others"
                )

        # (6, N, N, C) so a face index selects the face image
        self.faces = np.stack([faces[name] for name in FACES])
        self.face_size = shape[0]
        # Unfolded sphere extent at face resolution
        self.width = self.height = 2 * self.face_size

    @classmethod
    def from_directory(cls, path):
        """Load ``<face>.png`` for every face in ``path``."""
        faces = {}
        for name in FACES:
            face_path = os.path.join(path, f"{name}.png")
            if not os.path.isfile(face_path):
                raise SourceNotFoundError(f"Skybox face not found: {face_path}")
            faces[name] = load_image(face_path)
        return cls(faces)

    @classmethod
    def bake(cls, sampler, size):
        """Render a skybox of ``size`` px faces from any other sampler."""
        if size <= 0:
            raise InvalidDimensionsError(f"Skybox face size must be positive, got {size}")
        faces = {}
        for name in FACES:
            dirs = from_cube_frame(cube_face_directions(name, size))
            faces[name] = sampler.sample(dirs)
        return cls(faces)

    def texel_coordinates(self, directions):
        """Return (face, row, col) integer arrays for (..., 3) directions."""
        directions = np.asarray(directions, dtype=np.float64)
        c = to_cube_frame(directions.reshape(-1, 3))
        cx, cy, cz = c[..., 0], c[..., 1], c[..., 2]

        # Dominant axis picks the face pair; ties resolve x, then y, then z
        axis = np.argmax(np.abs(c), axis=-1)
        major = np.take_along_axis(c, axis[..., np.newaxis], axis=-1)[..., 0]
        positive = major >= 0
        a = np.abs(major)

        face = np.empty(axis.shape, dtype=np.int64)
        fu = np.empty(axis.shape, dtype=np.float64)
        fv = np.empty(axis.shape, dtype=np.float64)

        # Inverse of cube_face_directions, one case per face
        cases = [
            (0, (axis == 0) & positive, -cz, cy),  # px: (1, v, -u)
            (1, (axis == 0) & ~positive, cz, cy),  # nx: (-1, v, u)
            (2, (axis == 1) & positive, cx, -cz),  # py: (u, 1, -v)
            (3, (axis == 1) & ~positive, cx, cz),  # ny: (u, -1, v)
            (4, (axis == 2) & positive, cx, cy),  # pz: (u, v, 1)
            (5, (axis == 2) & ~positive, -cx, cy),  # nz: (-u, v, -1)
        ]
        for index, mask, u, v in cases:
            face[mask] = index
            fu[mask] = u[mask] / a[mask]
            fv[mask] = v[mask] / a[mask]

        last = self.face_size - 1
        col = np.clip(np.rint((fu + 1.0) * 0.5 * last), 0, last).astype(np.int64)
        row = np.clip(np.rint((1.0 - fv) * 0.5 * last), 0, last).astype(np.int64)
        shape = directions.shape[:-1]
        return face.reshape(shape), row.reshape(shape), col.reshape(shape)

    def sample(self, directions):
        face, row, col = self.texel_coordinates(directions)
        return self.faces[face, row, col]
