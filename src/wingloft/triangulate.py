from __future__ import annotations

import logging
from typing import Literal

import numpy as np

from .errors import DegenerateMesh
from .mesh import area_tolerance

logger = logging.getLogger(__name__)

CapMethod = Literal["earcut", "earclip", "fan"]
CAP_METHODS: tuple[str, ...] = ("earcut", "earclip", "fan")


def signed_area(points: np.ndarray) -> float:
    """Shoelace area of a closed 2D loop; positive when counter-clockwise."""
    pts = np.asarray(points, dtype=float)
    if pts.shape[0] < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def is_counterclockwise(points: np.ndarray) -> bool:
    return signed_area(points) > 0


def triangle_areas(points: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """Signed areas of index triangles over a 2D point array."""
    pts = np.asarray(points, dtype=float)
    tri = np.asarray(triangles, dtype=int).reshape(-1, 3)
    if tri.size == 0:
        return np.zeros(0, dtype=float)
    a = pts[tri[:, 0]]
    b = pts[tri[:, 1]]
    c = pts[tri[:, 2]]
    return 0.5 * ((b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0]))


def _triangulate_earcut(points: np.ndarray) -> np.ndarray:
    import mapbox_earcut as earcut

    vertices = np.ascontiguousarray(points, dtype=np.float64)
    ring_end_indices = np.asarray([vertices.shape[0]], dtype=np.uint32)
    indices = earcut.triangulate_float64(vertices, ring_end_indices)
    faces = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    flip = triangle_areas(points, faces) < 0
    if np.any(flip):
        faces[flip] = faces[flip][:, [0, 2, 1]]
    return faces


def _triangulate_fan(points: np.ndarray) -> np.ndarray:
    count = points.shape[0]
    faces = np.asarray([[0, i, i + 1] for i in range(1, count - 1)], dtype=np.int64)
    if not is_counterclockwise(points):
        faces = faces[:, [0, 2, 1]]
    return faces


def _ear_clip(points: np.ndarray) -> np.ndarray:
    """Ear clipping that keeps every vertex and never clips a zero-area ear."""
    count = points.shape[0]
    eps = area_tolerance(points)
    remaining = list(range(count))
    if not is_counterclockwise(points):
        remaining.reverse()

    triangles: list[tuple[int, int, int]] = []
    k = 0
    misses = 0
    while len(remaining) > 3:
        m = len(remaining)
        if misses >= m:
            raise DegenerateMesh(
                f"Polygon cannot be triangulated; {m} vertices left without an ear "
                "(self-intersecting or zero-area outline)."
            )
        k %= m
        a, b, c = remaining[k - 1], remaining[k], remaining[(k + 1) % m]
        if _is_ear(points, a, b, c, remaining, eps):
            triangles.append((a, b, c))
            del remaining[k]
            k = (k - 1) % (m - 1)
            misses = 0
        else:
            k += 1
            misses += 1

    a, b, c = remaining
    if _cross(points, a, b, c) <= eps:
        raise DegenerateMesh("Polygon cannot be triangulated; the last triangle has zero area.")
    triangles.append((a, b, c))
    return np.asarray(triangles, dtype=np.int64)


def _cross(points: np.ndarray, a: int, b: int, c: int) -> float:
    pa, pb, pc = points[a], points[b], points[c]
    return float((pb[0] - pa[0]) * (pc[1] - pa[1]) - (pb[1] - pa[1]) * (pc[0] - pa[0]))


def _is_ear(points: np.ndarray, a: int, b: int, c: int, remaining: list[int], eps: float) -> bool:
    if _cross(points, a, b, c) <= eps:
        return False
    others = [idx for idx in remaining if idx not in (a, b, c)]
    if not others:
        return True
    p = points[others]
    pa, pb, pc = points[a], points[b], points[c]
    d1 = (pb[0] - pa[0]) * (p[:, 1] - pa[1]) - (pb[1] - pa[1]) * (p[:, 0] - pa[0])
    d2 = (pc[0] - pb[0]) * (p[:, 1] - pb[1]) - (pc[1] - pb[1]) * (p[:, 0] - pb[0])
    d3 = (pa[0] - pc[0]) * (p[:, 1] - pc[1]) - (pa[1] - pc[1]) * (p[:, 0] - pc[0])
    inside = (d1 >= -eps) & (d2 >= -eps) & (d3 >= -eps)
    return not bool(np.any(inside))


def triangulate_polygon(points: np.ndarray, method: CapMethod = "earcut") -> np.ndarray:
    """Triangulate a simple closed 2D polygon into counter-clockwise index triangles.

    ``earcut`` uses mapbox_earcut and falls back to ``earclip`` when earcut
    drops collinear vertices or leaves a zero-area triangle, so the result
    always has ``n - 2`` triangles touching every vertex. ``fan`` connects vertex 0 to every edge and is only
    correct for outlines that are star-shaped around vertex 0.
    """

    pts = np.asarray(points, dtype=float)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError("Polygon points must be Nx2.")
    if pts.shape[0] < 3:
        raise DegenerateMesh(f"Polygon needs at least 3 points, got {pts.shape[0]}.")
    if method not in CAP_METHODS:
        raise ValueError(f"method must be one of {list(CAP_METHODS)}.")

    count = pts.shape[0]
    if method == "fan":
        return _triangulate_fan(pts)
    if method == "earcut":
        faces = _triangulate_earcut(pts)
        if faces.shape[0] == count - 2 and np.all(triangle_areas(pts, faces) > area_tolerance(pts)):
            return faces
        logger.debug(
            "earcut returned %d triangles for %d vertices; re-triangulating with ear clipping.",
            faces.shape[0],
            count,
        )
    return _ear_clip(pts)


__all__ = [
    "CAP_METHODS",
    "CapMethod",
    "signed_area",
    "is_counterclockwise",
    "triangle_areas",
    "triangulate_polygon",
]
