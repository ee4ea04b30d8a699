from __future__ import annotations

from pathlib import Path

from .errors import WriteError
from .io.stl import encode_stl, write_stl
from .loft import build_wing
from .mesh import Mesh
from .placement import WingParameters
from .profile import load_profile, parse_profile
from .triangulate import CapMethod


def generate_wing(
    text: str,
    params: WingParameters,
    ascii: bool = False,
    cap_method: CapMethod = "earcut",
    name: str | None = None,
) -> bytes:
    """Turn Selig airfoil text and a planform into STL bytes."""

    profile = parse_profile(text, name=name)
    mesh = build_wing(profile, params, cap_method=cap_method)
    return encode_stl(mesh, ascii=ascii)


def generate_wing_file(
    airfoil: Path | str,
    outfile: Path | str,
    params: WingParameters,
    ascii: bool = False,
    cap_method: CapMethod = "earcut",
) -> Mesh:
    """Read ``airfoil``, build the wing and write it to ``outfile``.

    Nothing is written, and no missing parent directory is created, unless
    parsing and lofting both succeed.
    """

    profile = load_profile(airfoil)
    mesh = build_wing(profile, params, cap_method=cap_method)
    outfile = Path(outfile)
    try:
        outfile.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(outfile, exc.strerror or str(exc)) from exc
    write_stl(mesh, outfile, ascii=ascii)
    return mesh


__all__ = ["generate_wing", "generate_wing_file"]
