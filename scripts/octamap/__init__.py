"""octamap: remap an equirectangular panorama into an octahedral environment map.

The output is a square texture whose side is the larger of the source's width
and height.  The source can also be a skybox: a directory holding the six cube
faces px/nx/py/ny/pz/nz.png.

Usage:
    python scripts/octamap --in panorama.png --out octahedral.png
    python scripts/octamap --in skybox/ --out octahedral.png --diagram layout.png

Requires: pip install numpy Pillow matplotlib
"""

from ._common import (
    DestinationWriteError,
    InvalidDimensionsError,
    InvalidOptionError,
    OctamapError,
    SourceNotFoundError,
    UnreadableSourceError,
)
from .projection import (
    octahedral_directions,
    octahedral_fold,
    octahedral_unfold,
    pixel_to_octahedral,
    project,
)
from .samplers import (
    DirectionSampler,
    EquirectangularSampler,
    SkyboxSampler,
    equirect_coordinates,
)

__all__ = [
    "DestinationWriteError",
    "DirectionSampler",
    "EquirectangularSampler",
    "InvalidDimensionsError",
    "InvalidOptionError",
    "OctamapError",
    "SkyboxSampler",
    "SourceNotFoundError",
    "UnreadableSourceError",
    "equirect_coordinates",
    "octahedral_directions",
    "octahedral_fold",
    "octahedral_unfold",
    "pixel_to_octahedral",
    "project",
]
