"""Shared errors, image I/O, and plot style for octamap."""

import os

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from matplotlib.colors import LinearSegmentedColormap  # noqa: E402
from PIL import Image  # noqa: E402

DPI = 200

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class OctamapError(Exception):
    """Base class for every error reported by octamap."""


class SourceNotFoundError(OctamapError):
    """The input image (or cube face) does not exist."""


class UnreadableSourceError(OctamapError):
    """The input exists but could not be decoded as an image."""


class DestinationWriteError(OctamapError):
    """The output image could not be encoded or written."""


class InvalidDimensionsError(OctamapError, ValueError):
    """An image has zero size or a shape the samplers cannot use."""


class InvalidOptionError(OctamapError, ValueError):
    """An option does not apply to the chosen input."""


# ---------------------------------------------------------------------------
# Image I/O
# ---------------------------------------------------------------------------


def load_image(path):
    """Decode an image file into an (H, W, C) uint8 array.

    Images with an alpha channel (or palette transparency) keep it as RGBA;
    everything else is converted to RGB.
    """
    if not os.path.isfile(path):
        raise SourceNotFoundError(f"Input file not found: {path}")

    try:
        with Image.open(path) as img:
            has_alpha = img.mode in ("RGBA", "LA", "PA") or "transparency" in img.info
            pixels = np.array(img.convert("RGBA" if has_alpha else "RGB"))
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise UnreadableSourceError(f"Cannot decode image {path}: {exc}") from exc

    check_dimensions(pixels, path)
    return pixels


def save_image(pixels, path):
    """Encode an (H, W, C) uint8 array; the format follows the extension."""
    try:
        Image.fromarray(pixels).save(path)
    except (OSError, ValueError) as exc:
        raise DestinationWriteError(f"Cannot write image {path}: {exc}") from exc


def check_dimensions(pixels, name="image"):
    """Reject arrays that are not (H, W, C) with H, W > 0."""
    if pixels.ndim != 3 or pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise InvalidDimensionsError(
            f"{name} has unusable shape {pixels.shape}, expected (H, W, C) with H, W > 0"
        )


# ---------------------------------------------------------------------------
# Dark theme style (matching forge-gpu visual identity)
# ---------------------------------------------------------------------------

STYLE = {
    "bg": "#1a1a2e",  # Dark blue-gray background
    "grid": "#2a2a4a",  # Subtle grid lines
    "axis": "#8888aa",  # Axis lines and labels
    "text": "#e0e0f0",  # Primary text
    "text_dim": "#8888aa",  # Secondary/dim text
    "accent1": "#4fc3f7",  # Cyan: upper hemisphere
    "accent2": "#ff7043",  # Orange: folded lower hemisphere
    "warn": "#ffd54f",  # Yellow: h == 0 boundary
    "surface": "#252545",  # Slightly lighter surface for fills
}

# Colormap for the z (height) component of the octahedral layout
FORGE_CMAP = LinearSegmentedColormap.from_list(
    "forge",
    [STYLE["bg"], STYLE["accent1"], STYLE["accent2"], STYLE["warn"]],
)


def setup_axes(ax, xlim=None, ylim=None, grid=True, aspect="equal"):
    """Apply consistent dark styling to axes."""
    ax.set_facecolor(STYLE["bg"])
    if xlim:
        ax.set_xlim(xlim)
    if ylim:
        ax.set_ylim(ylim)
    if aspect:
        ax.set_aspect(aspect)
    ax.tick_params(colors=STYLE["axis"], labelsize=9)
    for spine in ax.spines.values():
        spine.set_color(STYLE["grid"])
        spine.set_linewidth(0.5)
    if grid:
        ax.grid(True, color=STYLE["grid"], linewidth=0.5, alpha=0.5)
    ax.set_axisbelow(True)


def save(fig, path):
    """Save a figure to ``path`` and close it."""
    try:
        fig.savefig(
            path,
            dpi=DPI,
            bbox_inches="tight",
            facecolor=STYLE["bg"],
            pad_inches=0.2,
        )
    except (OSError, ValueError) as exc:
        raise DestinationWriteError(f"Cannot write diagram {path}: {exc}") from exc
    finally:
        plt.close(fig)
