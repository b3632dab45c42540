"""
Sampler tests: equirectangular lookup and the cube-map skybox.

Run with: python -m pytest tests/test_samplers.py
"""

import numpy as np
import pytest
from PIL import Image

from octamap import (
    EquirectangularSampler,
    InvalidDimensionsError,
    SkyboxSampler,
    SourceNotFoundError,
    equirect_coordinates,
)
from octamap.samplers import FACES, cube_face_directions, from_cube_frame, to_cube_frame


def direction(azimuth, elevation):
    """Unit vector for (azimuth, elevation) in the Z-up frame."""
    return np.array(
        [
            np.cos(elevation) * np.cos(azimuth),
            np.cos(elevation) * np.sin(azimuth),
            np.sin(elevation),
        ]
    )


# ---------------------------------------------------------------------------
# Equirectangular
# ---------------------------------------------------------------------------


def test_coordinates_follow_angle_formula(coordinate_image):
    """Known (azimuth, elevation) pairs recover the texel that encodes them."""
    height, width = coordinate_image.shape[:2]
    sampler = EquirectangularSampler(coordinate_image)

    for k in range(width):
        for j in range(height - 1):
            # Aim at the centre of texel (k, j)
            azimuth = ((k + 0.5) / (width / 2) - 1.0) * np.pi
            elevation = (0.5 - (j + 0.5) / (height - 1)) * np.pi
            d = direction(azimuth, elevation)

            px, py = equirect_coordinates(d, width, height)
            assert px == pytest.approx(k + 0.5, abs=1e-9)
            assert py == pytest.approx(j + 0.5, abs=1e-9)

            color = sampler.sample(d)
            assert (color[0], color[1]) == (k, j)


def test_vertical_axis_spans_height_minus_one():
    """Zenith maps to row 0 and nadir to row H - 1 (not H)."""
    _, py_top = equirect_coordinates(np.array([0.0, 0.0, 1.0]), 16, 9)
    _, py_bottom = equirect_coordinates(np.array([0.0, 0.0, -1.0]), 16, 9)
    assert py_top == pytest.approx(0.0)
    assert py_bottom == pytest.approx(8.0)


def test_poles_sample_first_and_last_rows(coordinate_image):
    sampler = EquirectangularSampler(coordinate_image)
    top = sampler.sample(np.array([0.0, 0.0, 1.0]))
    bottom = sampler.sample(np.array([0.0, 0.0, -1.0]))
    assert (top[0], top[1]) == (8, 0)
    assert (bottom[0], bottom[1]) == (8, 8)


def test_azimuth_pi_wraps_to_first_column(coordinate_image):
    """atan2 returns +pi behind the viewer, which is column W; it wraps to 0."""
    sampler = EquirectangularSampler(coordinate_image)
    behind = sampler.sample(np.array([-1.0, 0.0, 0.0]))
    just_below = sampler.sample(np.array([-1.0, -1e-12, 0.0]))
    assert (behind[0], behind[1]) == (0, 4)
    assert (just_below[0], just_below[1]) == (0, 4)


def test_sample_keeps_leading_shape(coordinate_image):
    sampler = EquirectangularSampler(coordinate_image)
    dirs = np.tile(np.array([0.0, 0.0, 1.0]), (5, 7, 1))
    assert sampler.sample(dirs).shape == (5, 7, 3)


def test_bilinear_constant_image_is_constant():
    image = np.full((6, 12, 4), (12, 34, 56, 255), dtype=np.uint8)
    sampler = EquirectangularSampler(image, filter="bilinear")

    rng = np.random.default_rng(3)
    dirs = rng.normal(size=(200, 3))
    dirs /= np.linalg.norm(dirs, axis=-1, keepdims=True)

    colors = sampler.sample(dirs)
    assert colors.shape == (200, 4)
    assert np.all(colors == (12, 34, 56, 255))


def test_bilinear_texel_centre_matches_nearest():
    """At a texel centre (px = k + 0.5) bilinear returns that texel unblended."""
    image = np.zeros((3, 4, 3), dtype=np.uint8)
    image[..., 0] = np.array([0, 60, 120, 180])

    d = direction(-0.25 * np.pi, 0.0)  # px = 1.5, centre of column 1
    nearest = EquirectangularSampler(image).sample(d)
    bilinear = EquirectangularSampler(image, filter="bilinear").sample(d)
    assert bilinear[0] == 60
    np.testing.assert_array_equal(bilinear, nearest)


def test_bilinear_blends_neighbours_and_wraps():
    image = np.zeros((3, 4, 3), dtype=np.uint8)
    image[..., 0] = np.array([0, 60, 120, 180])

    sampler = EquirectangularSampler(image, filter="bilinear")

    # px = 2.0: the edge between columns 1 and 2
    between = sampler.sample(direction(0.0, 0.0))
    assert between[0] == 90

    # px = 4.0: the edge between the last column and column 0
    wrapped = sampler.sample(direction(np.pi, 0.0))
    assert wrapped[0] == 90


def test_nearest_is_default():
    image = np.zeros((3, 4, 3), dtype=np.uint8)
    image[..., 0] = np.array([0, 60, 120, 180])

    sampler = EquirectangularSampler(image)
    assert sampler.filter == "nearest"
    assert sampler.sample(direction(-0.25 * np.pi, 0.0))[0] == 60


def test_empty_source_is_rejected():
    with pytest.raises(InvalidDimensionsError):
        EquirectangularSampler(np.zeros((0, 4, 3), dtype=np.uint8))


def test_unknown_filter_is_rejected(coordinate_image):
    with pytest.raises(ValueError):
        EquirectangularSampler(coordinate_image, filter="cubic")


# ---------------------------------------------------------------------------
# Skybox
# ---------------------------------------------------------------------------


def solid_faces(size=4):
    """Six faces, each a distinct solid colour."""
    return {
        name: np.full((size, size, 3), (40 * i, 255 - 40 * i, 7), dtype=np.uint8)
        for i, name in enumerate(FACES)
    }


def test_cube_frame_round_trip():
    d = np.array([0.1, 0.2, 0.3])
    np.testing.assert_allclose(to_cube_frame(d), (0.2, 0.3, 0.1))
    np.testing.assert_allclose(from_cube_frame(to_cube_frame(d)), d)


@pytest.mark.parametrize(
    "d, face",
    [
        ((1.0, 0.0, 0.0), "pz"),
        ((-1.0, 0.0, 0.0), "nz"),
        ((0.0, 1.0, 0.0), "px"),
        ((0.0, -1.0, 0.0), "nx"),
        ((0.0, 0.0, 1.0), "py"),
        ((0.0, 0.0, -1.0), "ny"),
    ],
)
def test_skybox_picks_face_by_dominant_axis(d, face):
    faces = solid_faces()
    sampler = SkyboxSampler(faces)
    np.testing.assert_array_equal(sampler.sample(np.array(d)), faces[face][0, 0])


def test_skybox_reports_unfolded_extent():
    sampler = SkyboxSampler(solid_faces(size=6))
    assert sampler.face_size == 6
    assert (sampler.width, sampler.height) == (12, 12)


@pytest.mark.parametrize("name", FACES)
def test_skybox_lookup_inverts_face_directions(coordinate_image, name):
    """Interior texels of a baked skybox are found again from their directions."""
    size = 5
    skybox = SkyboxSampler.bake(EquirectangularSampler(coordinate_image), size)
    dirs = from_cube_frame(cube_face_directions(name, size))

    found = skybox.sample(dirs)[1:-1, 1:-1]
    baked = skybox.faces[FACES.index(name)][1:-1, 1:-1]
    np.testing.assert_array_equal(found, baked)


def test_baked_skybox_agrees_with_source_at_face_centres(coordinate_image):
    source = EquirectangularSampler(coordinate_image)
    skybox = SkyboxSampler.bake(source, 5)

    equator = np.array(
        [
            (1.0, 0.0, 0.0),
            (-1.0, 0.0, 0.0),
            (0.0, 1.0, 0.0),
            (0.0, -1.0, 0.0),
        ]
    )
    np.testing.assert_array_equal(skybox.sample(equator), source.sample(equator))

    # Azimuth is undefined at the poles; only the row is meaningful
    poles = np.array([(0.0, 0.0, 1.0), (0.0, 0.0, -1.0)])
    np.testing.assert_array_equal(skybox.sample(poles)[:, 1], source.sample(poles)[:, 1])


def test_skybox_missing_face_is_rejected():
    faces = solid_faces()
    del faces["ny"]
    with pytest.raises(InvalidDimensionsError, match="ny"):
        SkyboxSampler(faces)


def test_skybox_non_square_face_is_rejected():
    faces = solid_faces()
    faces["px"] = np.zeros((4, 5, 3), dtype=np.uint8)
    with pytest.raises(InvalidDimensionsError):
        SkyboxSampler(faces)


def test_skybox_mismatched_faces_are_rejected():
    faces = solid_faces()
    faces["nz"] = np.zeros((8, 8, 3), dtype=np.uint8)
    with pytest.raises(InvalidDimensionsError):
        SkyboxSampler(faces)


def test_skybox_from_directory(tmp_path):
    faces = solid_faces(size=3)
    for name, pixels in faces.items():
        Image.fromarray(pixels).save(tmp_path / f"{name}.png")

    sampler = SkyboxSampler.from_directory(str(tmp_path))
    assert sampler.face_size == 3
    np.testing.assert_array_equal(sampler.sample(np.array([0.0, 0.0, 1.0])), faces["py"][0, 0])


def test_skybox_from_directory_missing_face(tmp_path):
    Image.fromarray(np.zeros((3, 3, 3), dtype=np.uint8)).save(tmp_path / "px.png")
    with pytest.raises(SourceNotFoundError):
        SkyboxSampler.from_directory(str(tmp_path))


def test_skybox_mixed_channels_are_rejected():
    faces = solid_faces()
    faces["py"] = np.zeros((4, 4, 4), dtype=np.uint8)
    with pytest.raises(InvalidDimensionsError):
        SkyboxSampler(faces)
