from __future__ import annotations

import contextlib
import logging
import os
import struct
import tempfile
from pathlib import Path

from wingloft.errors import WriteError
from wingloft.mesh import Mesh

logger = logging.getLogger(__name__)

HEADER_SIZE = 80
RECORD = struct.Struct("<12fH")


def _solid_name(name: str | None, mesh: Mesh) -> str:
    raw = name if name is not None else mesh.name
    token = "_".join(str(raw).split())
    return token.encode("ascii", errors="replace").decode("ascii") or "wing"


def _encode_ascii(mesh: Mesh, solid: str) -> bytes:
    lines = [f"solid {solid}"]
    for idx, tri in enumerate(mesh.faces):
        nx, ny, nz = mesh.normals[idx]
        lines.append(f"  facet normal {nx:.6e} {ny:.6e} {nz:.6e}")
        lines.append("    outer loop")
        for vidx in tri:
            vx, vy, vz = mesh.vertices[vidx]
            lines.append(f"      vertex {vx:.6e} {vy:.6e} {vz:.6e}")
        lines.append("    endloop")
        lines.append("  endfacet")
    lines.append(f"endsolid {solid}")
    return ("\n".join(lines) + "\n").encode("ascii")


def _encode_binary(mesh: Mesh, solid: str) -> bytes:
    # Binary readers sniff for a leading "solid", so the header must not start with it.
    header = f"wingloft {solid}".encode("ascii")[:HEADER_SIZE].ljust(HEADER_SIZE, b"\0")
    out = bytearray(header)
    out += struct.pack("<I", mesh.n_faces)
    vertices = mesh.vertices
    for idx, tri in enumerate(mesh.faces):
        nx, ny, nz = mesh.normals[idx]
        v0 = vertices[tri[0]]
        v1 = vertices[tri[1]]
        v2 = vertices[tri[2]]
        out += RECORD.pack(
            float(nx),
            float(ny),
            float(nz),
            float(v0[0]),
            float(v0[1]),
            float(v0[2]),
            float(v1[0]),
            float(v1[1]),
            float(v1[2]),
            float(v2[0]),
            float(v2[1]),
            float(v2[2]),
            0,
        )
    return bytes(out)


def encode_stl(mesh: Mesh, ascii: bool = False, name: str | None = None) -> bytes:
    """Encode ``mesh`` as STL using its stored face normals.

    Binary output is ``84 + 50 * n_faces`` bytes. ``name`` overrides the
    solid name taken from the mesh metadata.
    """

    solid = _solid_name(name, mesh)
    if ascii:
        return _encode_ascii(mesh, solid)
    return _encode_binary(mesh, solid)


def write_stl(mesh: Mesh, path: Path | str, ascii: bool = False, name: str | None = None) -> int:
    """Write ``mesh`` to ``path`` and return the number of bytes written.

    The bytes go to a temporary file beside ``path`` that replaces it only
    once complete, so a failed write leaves any existing file untouched.
    """

    path = Path(path)
    data = encode_stl(mesh, ascii=ascii, name=name)
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "wb", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as handle:
            tmp_path = Path(handle.name)
            handle.write(data)
        os.replace(tmp_path, path)
    except OSError as exc:
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                tmp_path.unlink()
        raise WriteError(path, exc.strerror or str(exc)) from exc
    logger.debug("Wrote %d bytes of %s STL to %s.", len(data), "ASCII" if ascii else "binary", path)
    return len(data)
