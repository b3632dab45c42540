"""Diagrams of the octahedral layout and where it samples its source."""

import matplotlib.patheffects as pe
import matplotlib.pyplot as plt

from ._common import FORGE_CMAP, STYLE, save, setup_axes
from .projection import octahedral_directions
from .samplers import FACES, SkyboxSampler, equirect_coordinates

# Coverage scatter is subsampled to at most this many pixels per side
COVERAGE_SIDE = 64

# Where each octahedron vertex lands in the unfolded square (u, v)
VERTEX_LABELS = [
    ((0.0, 0.0), "+Z"),
    ((-1.0, 0.0), "+X"),
    ((1.0, 0.0), "-X"),
    ((0.0, 1.0), "+Y"),
    ((0.0, -1.0), "-Y"),
    ((-1.0, -1.0), "-Z"),
    ((1.0, -1.0), "-Z"),
    ((-1.0, 1.0), "-Z"),
    ((1.0, 1.0), "-Z"),
]


def _label(ax, x, y, text, color, **kwargs):
    ax.text(
        x,
        y,
        text,
        color=color,
        fontsize=10,
        fontweight="bold",
        ha="center",
        va="center",
        path_effects=[pe.withStroke(linewidth=3, foreground=STYLE["bg"])],
        **kwargs,
    )


def diagram_octahedral_layout(ax, size=256):
    """Height (z) of every octahedral texel, with the fold boundary."""
    z = octahedral_directions(size)[..., 2]
    # Rows grow with v, so v = -1 is drawn at the top like the texture
    ax.imshow(z, cmap=FORGE_CMAP, extent=(-1, 1, 1, -1), vmin=-1.0, vmax=1.0)
    setup_axes(ax, xlim=(-1.05, 1.05), ylim=(1.05, -1.05), grid=False)

    diamond_u = [0.0, 1.0, 0.0, -1.0, 0.0]
    diamond_v = [-1.0, 0.0, 1.0, 0.0, -1.0]
    ax.plot(diamond_u, diamond_v, "--", color=STYLE["warn"], lw=1.5)

    for (u, v), name in VERTEX_LABELS:
        # Pull corner labels inward so they stay on the texture
        _label(ax, u * 0.9, v * 0.9, name, STYLE["text"])

    ax.set_title("octahedral layout (z)", color=STYLE["text"], fontsize=11)
    ax.set_xlabel("u", color=STYLE["axis"])
    ax.set_ylabel("v", color=STYLE["axis"])


def _source_positions(sampler, dirs):
    """Where each direction lands in the sampler's source, as plot (x, y)."""
    if isinstance(sampler, SkyboxSampler):
        # Faces laid out left to right in FACES order, texel centres
        face, row, col = sampler.texel_coordinates(dirs)
        return face * sampler.face_size + col + 0.5, row + 0.5
    return equirect_coordinates(dirs, sampler.width, sampler.height)


def diagram_source_coverage(ax, sampler, size):
    """Source positions sampled by the octahedral map, split by hemisphere."""
    if isinstance(sampler, SkyboxSampler):
        n = sampler.face_size
        setup_axes(ax, xlim=(0, len(FACES) * n), ylim=(n, 0), aspect="equal")
        for i, name in enumerate(FACES):
            if i:
                ax.axvline(i * n, color=STYLE["grid"], lw=1.0)
            _label(ax, (i + 0.5) * n, -0.08 * n, name, STYLE["text_dim"], clip_on=False)
        title = f"skybox coverage (6 x {n}x{n} -> {size}x{size})"
        xlabel, ylabel = "face / col", "row"
    else:
        width, height = sampler.width, sampler.height
        setup_axes(ax, xlim=(0, width), ylim=(height, 0), aspect=None)
        title = f"source coverage ({width}x{height} -> {size}x{size})"
        xlabel, ylabel = "px", "py"

    step = max(1, -(-size // COVERAGE_SIDE))
    dirs = octahedral_directions(size)[::step, ::step]
    px, py = _source_positions(sampler, dirs)
    upper = dirs[..., 2] >= 0

    ax.scatter(px[upper], py[upper], s=2, color=STYLE["accent1"], label="upper (z >= 0)")
    ax.scatter(px[~upper], py[~upper], s=2, color=STYLE["accent2"], label="folded (z < 0)")

    legend = ax.legend(loc="lower right", fontsize=8, facecolor=STYLE["surface"])
    for text in legend.get_texts():
        text.set_color(STYLE["text"])

    ax.set_title(title, color=STYLE["text"], fontsize=11)
    ax.set_xlabel(xlabel, color=STYLE["axis"])
    ax.set_ylabel(ylabel, color=STYLE["axis"])


def write_diagram(path, sampler, size):
    """Write the layout and coverage diagrams side by side to ``path``."""
    fig = plt.figure(figsize=(12, 5), facecolor=STYLE["bg"])
    diagram_octahedral_layout(fig.add_subplot(121))
    diagram_source_coverage(fig.add_subplot(122), sampler, size)
    save(fig, path)
