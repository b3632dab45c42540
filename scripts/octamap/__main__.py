"""CLI entry point for the octamap package.

Invoke as:  python scripts/octamap --in panorama.png --out octahedral.png
"""

# Bootstrap: when run as `python scripts/octamap` (directory path),
# re-execute through runpy so the package machinery resolves relative imports
# correctly and without DeprecationWarning.
if __name__ == "__main__" and not __package__:
    import os
    import runpy
    import sys

    _scripts_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    if _scripts_dir not in sys.path:
        sys.path.insert(0, _scripts_dir)
    runpy.run_module("octamap", run_name="__main__", alter_sys=True)
    raise SystemExit(0)  # unreachable: run_module already calls sys.exit()

import argparse
import os
import sys
from dataclasses import dataclass
from typing import Optional

from ._common import InvalidOptionError, OctamapError, load_image, save_image
from .diagrams import write_diagram
from .projection import project
from .samplers import FILTERS, EquirectangularSampler, SkyboxSampler


@dataclass(frozen=True)
class ConvertOptions:
    """Everything one conversion run needs; built from the command line."""

    input_path: str
    output_path: str
    filter: str = "nearest"
    diagram_path: Optional[str] = None


def load_sampler(path, filter="nearest"):
    """Open ``path`` as a skybox directory or an equirectangular image."""
    if os.path.isdir(path):
        if filter != "nearest":
            raise InvalidOptionError(
                f"--filter {filter} needs an equirectangular image; skybox lookups are nearest only"
            )
        return SkyboxSampler.from_directory(path)
    return EquirectangularSampler(load_image(path), filter=filter)


def convert(options):
    """Load the source, project it to an octahedral square, and save it."""
    print(f"Loading: {options.input_path}")
    sampler = load_sampler(options.input_path, options.filter)
    print(f"  Source size: {sampler.width}x{sampler.height}")

    side = max(sampler.width, sampler.height)
    print(f"  Projecting octahedral map ({side}x{side})...", end="", flush=True)
    pixels = project(sampler, side)
    print(" done")

    save_image(pixels, options.output_path)
    print(f"Wrote {options.output_path}")

    if options.diagram_path:
        write_diagram(options.diagram_path, sampler, side)
        print(f"Wrote {options.diagram_path}")

    return pixels


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Convert an equirectangular panorama (or skybox) to an octahedral map."
    )
    parser.add_argument(
        "--in",
        dest="input",
        required=True,
        help="Input file (equirectangular image) or directory of px/nx/py/ny/pz/nz.png faces",
    )
    parser.add_argument(
        "--out", dest="output", required=True, help="Output file (octahedral map)"
    )
    parser.add_argument(
        "--filter",
        choices=FILTERS,
        default="nearest",
        help="Equirectangular lookup (default: nearest); skybox input only supports nearest",
    )
    parser.add_argument(
        "--diagram", help="Also write a layout/coverage diagram PNG to this path"
    )
    args = parser.parse_args(argv)

    options = ConvertOptions(
        input_path=args.input,
        output_path=args.output,
        filter=args.filter,
        diagram_path=args.diagram,
    )

    try:
        convert(options)
    except OctamapError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
