from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from wingloft.errors import DegenerateMesh
from wingloft.profile import load_profile, parse_profile
from wingloft.triangulate import signed_area, triangle_areas, triangulate_polygon

ARROW = np.array([(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (1.0, 0.5), (0.0, 2.0)])


def _covers_every_vertex(faces: np.ndarray, count: int) -> bool:
    return set(np.unique(faces).tolist()) == set(range(count))


def test_signed_area_orientation():
    square = np.array([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)])
    assert signed_area(square) == pytest.approx(1.0)
    assert signed_area(square[::-1]) == pytest.approx(-1.0)


@pytest.mark.parametrize("method", ["earcut", "earclip"])
def test_concave_polygon_is_tiled_exactly(method: str):
    faces = triangulate_polygon(ARROW, method=method)
    areas = triangle_areas(ARROW, faces)
    assert faces.shape == (3, 3)
    assert np.all(areas > 0)
    assert areas.sum() == pytest.approx(signed_area(ARROW))


def test_fan_inverts_triangle_on_concave_polygon():
    faces = triangulate_polygon(ARROW, method="fan")
    areas = triangle_areas(ARROW, faces)
    assert faces.shape == (3, 3)
    assert np.any(areas < 0)
    assert np.abs(areas).sum() > signed_area(ARROW)


@pytest.mark.parametrize("method", ["earcut", "earclip"])
def test_reflexed_airfoil_capped_without_inversion(data_dir: Path, method: str):
    profile = load_profile(data_dir / "reflexed.dat")
    faces = triangulate_polygon(profile.points, method=method)
    areas = triangle_areas(profile.points, faces)
    assert faces.shape[0] == profile.n_points - 2
    assert np.all(areas > 0)
    assert areas.sum() == pytest.approx(profile.signed_area)


def test_fan_fails_on_reflexed_airfoil(data_dir: Path):
    profile = load_profile(data_dir / "reflexed.dat")
    areas = triangle_areas(profile.points, triangulate_polygon(profile.points, method="fan"))
    assert np.any(areas < 0)


def test_clockwise_input_returns_counterclockwise_triangles():
    faces = triangulate_polygon(ARROW[::-1].copy(), method="earclip")
    assert np.all(triangle_areas(ARROW[::-1], faces) > 0)


def test_collinear_run_keeps_every_vertex(data_dir: Path):
    profile = load_profile(data_dir / "flatbottom.dat")
    faces = triangulate_polygon(profile.points, method="earcut")
    areas = triangle_areas(profile.points, faces)
    assert faces.shape[0] == profile.n_points - 2
    assert _covers_every_vertex(faces, profile.n_points)
    assert np.all(areas > 0)
    assert areas.sum() == pytest.approx(profile.signed_area)


def test_earclip_on_naca_section(naca2412_text: str):
    profile = parse_profile(naca2412_text)
    faces = triangulate_polygon(profile.points, method="earclip")
    assert faces.shape[0] == profile.n_points - 2
    assert np.all(triangle_areas(profile.points, faces) > 0)


def test_single_triangle():
    tri = np.array([(0.0, 0.0), (1.0, 0.1), (1.0, -0.1)])
    for method in ("earcut", "earclip", "fan"):
        faces = triangulate_polygon(tri, method=method)
        assert faces.shape == (1, 3)
        assert triangle_areas(tri, faces)[0] > 0


def test_zero_area_polygon_is_reported():
    line = np.array([(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0)])
    with pytest.raises(DegenerateMesh):
        triangulate_polygon(line, method="earclip")


def test_too_few_points():
    with pytest.raises(DegenerateMesh):
        triangulate_polygon(np.array([(0.0, 0.0), (1.0, 0.0)]))


def test_unknown_method():
    with pytest.raises(ValueError):
        triangulate_polygon(ARROW, method="delaunay")
