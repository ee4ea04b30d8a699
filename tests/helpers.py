from __future__ import annotations

import struct

import numpy as np
import pyvista as pv

from wingloft.mesh import Mesh


def is_watertight(mesh: pv.DataSet) -> tuple[bool, int]:
    edges = mesh.extract_feature_edges(boundary_edges=True, feature_edges=False, non_manifold_edges=True, manifold_edges=False)
    open_edges = edges.n_cells
    return open_edges == 0, open_edges


def mesh_volume(mesh: pv.DataSet) -> float | None:
    vol = getattr(mesh, 'volume', None)
    try:
        return float(vol) if vol is not None else None
    except Exception:
        return None


def read_binary_stl(data: bytes) -> tuple[bytes, np.ndarray, np.ndarray]:
    """Return header, normals (M, 3) and triangles (M, 3, 3) from binary STL bytes."""
    (count,) = struct.unpack_from("<I", data, 80)
    record = np.dtype([("normal", "<f4", (3,)), ("vertices", "<f4", (3, 3)), ("attr", "<u2")])
    records = np.frombuffer(data, dtype=record, count=count, offset=84)
    return data[:80], records["normal"].astype(float), records["vertices"].astype(float)


def section_reference(mesh: Mesh, points: np.ndarray) -> np.ndarray:
    """Centroid of the cross-section through each point, interpolated between root and tip."""
    count = mesh.n_vertices // 2
    root = mesh.vertices[:count]
    tip = mesh.vertices[count:]
    root_c = root.mean(axis=0)
    tip_c = tip.mean(axis=0)
    t = (points[:, 2] - root_c[2]) / (tip_c[2] - root_c[2])
    return root_c + t[:, np.newaxis] * (tip_c - root_c)


def frustum_volume(section_area: float, span: float, root_chord: float, tip_chord: float) -> float:
    return section_area * span * (root_chord**2 + root_chord * tip_chord + tip_chord**2) / 3.0
