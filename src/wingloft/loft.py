from __future__ import annotations

import logging
from typing import Mapping

import numpy as np

from .errors import DegenerateMesh
from .mesh import Mesh, area_tolerance, face_areas, face_normals
from .placement import CrossSection, WingParameters, root_section, tip_section
from .profile import AirfoilProfile
from .triangulate import CapMethod, is_counterclockwise, triangle_areas, triangulate_polygon

logger = logging.getLogger(__name__)

SPAN_AXIS = np.array([0.0, 0.0, 1.0], dtype=float)


def _side_faces(count: int, tip_offset: int, outward_ccw: bool) -> np.ndarray:
    """Two triangles per quad, split on the root[i] -> tip[i + 1] diagonal."""
    faces = []
    for i in range(count):
        j = (i + 1) % count
        r0 = i
        r1 = j
        t0 = tip_offset + i
        t1 = tip_offset + j
        if outward_ccw:
            faces.append([r0, r1, t1])
            faces.append([r0, t1, t0])
        else:
            faces.append([r0, t1, r1])
            faces.append([r0, t0, t1])
    return np.asarray(faces, dtype=int)


def _cap_faces(
    vertices: np.ndarray,
    faces: np.ndarray,
    expected_normal: np.ndarray,
) -> np.ndarray:
    if faces.size == 0:
        return faces
    tri = faces.copy()
    v1 = vertices[tri[:, 1]] - vertices[tri[:, 0]]
    v2 = vertices[tri[:, 2]] - vertices[tri[:, 0]]
    normals = np.cross(v1, v2)
    dots = np.einsum("ij,j->i", normals, expected_normal)
    flip = dots < 0
    if np.any(flip):
        tri[flip] = tri[flip][:, [0, 2, 1]]
    return tri


def _check_cap(section: CrossSection, triangles: np.ndarray, first_face: int, label: str) -> None:
    """Every cap triangle must run counter-clockwise in xy with non-zero area.

    ``_cap_faces`` flips triangles to face the cap axis, which would hide
    a triangle that overlaps its neighbours, so inverted ones are rejected here.
    """

    areas = triangle_areas(section.points[:, :2], triangles)
    bad = np.flatnonzero(areas <= area_tolerance(section.points[:, :2]))
    if bad.size:
        raise DegenerateMesh(
            f"{bad.size} inverted or zero-area triangle(s) in the {label} cap (first: {first_face + int(bad[0])}).",
            faces=bad + first_face,
        )


def loft_sections(
    root: CrossSection,
    tip: CrossSection,
    cap_method: CapMethod = "earcut",
    name: str = "wing",
    metadata: Mapping[str, object] | None = None,
) -> Mesh:
    """Connect two cross-sections into a closed solid with flat end caps.

    Faces are ordered side wall first (two per profile edge, in profile
    order), then the root cap, then the tip cap. Every face normal is
    computed from its own vertices and points out of the solid. Extra
    ``metadata`` entries are stored on the mesh alongside the face groups.
    """

    if root.n_points != tip.n_points:
        raise DegenerateMesh(
            f"Root and tip sections must have the same point count, got {root.n_points} and {tip.n_points}."
        )
    count = root.n_points
    if count < 3:
        raise DegenerateMesh(f"Cross-sections need at least 3 points, got {count}.")
    span = tip.z - root.z
    if span == 0:
        raise DegenerateMesh("Root and tip sections lie in the same plane.")

    direction = SPAN_AXIS if span > 0 else -SPAN_AXIS
    vertices = np.vstack([root.points, tip.points])

    # Side faces wind outward when the loop runs counter-clockwise seen from the tip.
    counterclockwise = is_counterclockwise(root.points[:, :2])
    outward_ccw = counterclockwise == (span > 0)
    logger.debug(
        "Root loop is %s; using %s side winding.",
        "counter-clockwise" if counterclockwise else "clockwise",
        "forward" if outward_ccw else "reflected",
    )
    side = _side_faces(count, tip_offset=count, outward_ccw=outward_ccw)
    side_end = side.shape[0]

    # Both caps share the root triangulation; the tip is checked against it.
    cap_tri = triangulate_polygon(root.points[:, :2], method=cap_method)
    root_end = side_end + cap_tri.shape[0]
    _check_cap(root, cap_tri, side_end, "root")
    _check_cap(tip, cap_tri, root_end, "tip")
    root_cap = _cap_faces(vertices, cap_tri, expected_normal=-direction)
    tip_cap = _cap_faces(vertices, cap_tri + count, expected_normal=direction)

    faces = np.vstack([side, root_cap, tip_cap])
    areas = face_areas(vertices, faces)
    degenerate = np.flatnonzero(areas <= area_tolerance(vertices))
    if degenerate.size:
        raise DegenerateMesh(
            f"{degenerate.size} zero-area face(s) in the lofted mesh (first: {int(degenerate[0])}).",
            faces=degenerate,
        )
    normals = face_normals(vertices, faces)

    mesh_metadata: dict[str, object] = dict(metadata or {})
    mesh_metadata.update(
        {
            "name": name,
            "cap_method": cap_method,
            "face_groups": {
                "side": (0, side_end),
                "root_cap": (side_end, root_end),
                "tip_cap": (root_end, root_end + tip_cap.shape[0]),
            },
        }
    )
    return Mesh(vertices, faces, normals=normals, metadata=mesh_metadata)


def build_wing(
    profile: AirfoilProfile,
    params: WingParameters,
    cap_method: CapMethod = "earcut",
) -> Mesh:
    """Place ``profile`` at the root and tip stations and loft the wing between them."""

    root = root_section(profile, params)
    tip = tip_section(profile, params)
    mesh = loft_sections(root, tip, cap_method=cap_method, name=profile.name, metadata={"parameters": params})
    logger.debug("Lofted %r into %d faces over %d vertices.", profile.name, mesh.n_faces, mesh.n_vertices)
    return mesh


__all__ = ["loft_sections", "build_wing"]
