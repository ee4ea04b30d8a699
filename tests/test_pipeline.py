from __future__ import annotations

from pathlib import Path

import pytest

from wingloft.errors import EmptyProfile, ParseError
from wingloft.pipeline import generate_wing, generate_wing_file
from wingloft.placement import WingParameters
from tests.conftest import TRIANGLE_AIRFOIL
from tests.helpers import read_binary_stl

PARAMS = WingParameters(semi_wingspan=1.0, sweep=0.0, root_chord=1.0, tip_chord=1.0)


def test_triangle_pipeline_bytes():
    data = generate_wing(TRIANGLE_AIRFOIL, PARAMS)
    _, normals, _ = read_binary_stl(data)
    assert normals.shape == (8, 3)
    assert len(data) == 84 + 8 * 50


def test_pipeline_is_byte_identical(naca2412_text: str):
    params = WingParameters(semi_wingspan=5.0, sweep=2.0, root_chord=1.0, tip_chord=0.5)
    assert generate_wing(naca2412_text, params) == generate_wing(naca2412_text, params)
    assert generate_wing(naca2412_text, params, ascii=True) == generate_wing(naca2412_text, params, ascii=True)


def test_pipeline_name_override():
    data = generate_wing(TRIANGLE_AIRFOIL, PARAMS, ascii=True, name="fin")
    assert data.startswith(b"solid fin\n")


def test_generate_wing_file(tmp_path: Path, naca2412_file: Path):
    out = tmp_path / "wing.stl"
    mesh = generate_wing_file(naca2412_file, out, PARAMS, cap_method="earclip")
    assert out.stat().st_size == 84 + 50 * mesh.n_faces
    assert set(mesh.metadata) == {"name", "cap_method", "face_groups", "parameters"}
    assert mesh.metadata["cap_method"] == "earclip"


def test_parse_failure_writes_nothing(tmp_path: Path, data_dir: Path):
    out = tmp_path / "wing.stl"
    with pytest.raises(ParseError) as excinfo:
        generate_wing_file(data_dir / "bad_token.dat", out, PARAMS)
    assert excinfo.value.line_number == 4
    assert not out.exists()


def test_parse_failure_leaves_existing_output(tmp_path: Path):
    source = tmp_path / "short.dat"
    source.write_text("SHORT\n1 0\n0 0\n")
    out = tmp_path / "wing.stl"
    out.write_bytes(b"keep")
    with pytest.raises(EmptyProfile):
        generate_wing_file(source, out, PARAMS)
    assert out.read_bytes() == b"keep"


def test_parse_failure_creates_no_directories(tmp_path: Path, data_dir: Path):
    out = tmp_path / "out" / "wing.stl"
    with pytest.raises(ParseError):
        generate_wing_file(data_dir / "bad_token.dat", out, PARAMS)
    assert not (tmp_path / "out").exists()


def test_generate_wing_file_creates_parent(tmp_path: Path, naca2412_file: Path):
    out = tmp_path / "out" / "wings" / "wing.stl"
    generate_wing_file(naca2412_file, out, PARAMS)
    assert out.exists()
