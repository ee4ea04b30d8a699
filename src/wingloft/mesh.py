from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


def area_tolerance(points: np.ndarray) -> float:
    """Zero-area threshold scaled to the largest bounding-box side of ``points``."""
    extent = float(np.ptp(points, axis=0).max()) if points.shape[0] else 0.0
    return 1e-12 * max(extent, 1e-12) ** 2


@dataclass(frozen=True)
class MeshAnalysis:
    """Closure report for a lofted wing."""

    n_vertices: int
    n_faces: int
    degenerate_faces: int
    boundary_edges: int
    nonmanifold_edges: int
    misoriented_edges: int
    volume: float

    @property
    def is_manifold(self) -> bool:
        return self.nonmanifold_edges == 0

    @property
    def is_watertight(self) -> bool:
        return self.boundary_edges == 0 and self.is_manifold and self.misoriented_edges == 0

    @property
    def is_outward(self) -> bool:
        return self.volume > 0

    @property
    def has_degenerate_faces(self) -> bool:
        return self.degenerate_faces > 0

    def issues(self) -> list[str]:
        issues: list[str] = []
        if self.has_degenerate_faces:
            issues.append(f"{self.degenerate_faces} zero-area faces")
        if self.boundary_edges > 0:
            issues.append(f"{self.boundary_edges} boundary edges (not watertight)")
        if self.nonmanifold_edges > 0:
            issues.append(f"{self.nonmanifold_edges} non-manifold edges")
        if self.misoriented_edges > 0:
            issues.append(f"{self.misoriented_edges} edges shared by faces wound the same way")
        if not self.is_outward:
            issues.append(f"faces wind inward (volume {self.volume:.6g})")
        return issues


def face_normals(vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    """Unit normals from the edge cross product; zero rows for zero-area faces."""
    faces = np.asarray(faces, dtype=int).reshape(-1, 3)
    if faces.shape[0] == 0:
        return np.zeros((0, 3), dtype=float)
    v0 = vertices[faces[:, 0]]
    v1 = vertices[faces[:, 1]]
    v2 = vertices[faces[:, 2]]
    normals = np.cross(v1 - v0, v2 - v0)
    lengths = np.linalg.norm(normals, axis=1)
    out = np.zeros_like(normals)
    np.divide(normals, lengths[:, np.newaxis], out=out, where=lengths[:, np.newaxis] > 0)
    out[~np.isfinite(out)] = 0.0
    return out


def face_areas(vertices: np.ndarray, faces: np.ndarray) -> np.ndarray:
    faces = np.asarray(faces, dtype=int).reshape(-1, 3)
    if faces.shape[0] == 0:
        return np.zeros(0, dtype=float)
    v0 = vertices[faces[:, 0]]
    v1 = vertices[faces[:, 1]]
    v2 = vertices[faces[:, 2]]
    return 0.5 * np.linalg.norm(np.cross(v1 - v0, v2 - v0), axis=1)


@dataclass
class Mesh:
    """Indexed triangle mesh with one stored outward normal per face."""

    vertices: np.ndarray
    faces: np.ndarray
    normals: np.ndarray | None = None
    metadata: dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=float).reshape(-1, 3).copy()
        self.faces = np.asarray(self.faces, dtype=int).reshape(-1, 3).copy()
        if self.normals is None:
            self.normals = face_normals(self.vertices, self.faces)
        else:
            self.normals = np.asarray(self.normals, dtype=float).reshape(-1, 3).copy()
        if self.normals.shape[0] != self.faces.shape[0]:
            raise ValueError("Mesh needs exactly one normal per face.")

    @property
    def n_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def n_faces(self) -> int:
        return int(self.faces.shape[0])

    @property
    def name(self) -> str:
        return str(self.metadata.get("name", "wing"))

    @property
    def bounds(self) -> tuple[float, float, float, float, float, float]:
        if self.n_vertices == 0:
            return (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        mins = self.vertices.min(axis=0)
        maxs = self.vertices.max(axis=0)
        return (float(mins[0]), float(maxs[0]), float(mins[1]), float(maxs[1]), float(mins[2]), float(maxs[2]))

    @property
    def triangles(self) -> np.ndarray:
        """Face vertex coordinates, shape ``(n_faces, 3, 3)``."""
        return self.vertices[self.faces]

    @property
    def centroid(self) -> np.ndarray:
        if self.n_vertices == 0:
            return np.zeros(3, dtype=float)
        return self.vertices.mean(axis=0)

    @property
    def signed_volume(self) -> float:
        """Enclosed volume; positive when the faces wind outward."""
        if self.n_faces == 0:
            return 0.0
        tri = self.triangles
        return float(np.einsum("ij,ij->i", tri[:, 0], np.cross(tri[:, 1], tri[:, 2])).sum() / 6.0)

    def face_group(self, name: str) -> slice:
        """Face index range recorded by the builder for ``side``, ``root_cap`` or ``tip_cap``."""
        groups = self.metadata.get("face_groups", {})
        if name not in groups:
            raise KeyError(f"Mesh has no face group {name!r}.")
        start, stop = groups[name]
        return slice(start, stop)


def analyze_mesh(mesh: Mesh, area_epsilon: float | None = None) -> MeshAnalysis:
    """Count the defects that would keep ``mesh`` from being a closed outward solid.

    ``area_epsilon`` defaults to a tolerance scaled to the mesh extent. Each
    undirected edge of a closed surface is used by exactly two faces, once in
    each direction; edges used twice in the same direction are counted as
    misoriented.
    """

    verts = mesh.vertices
    faces = mesh.faces
    if area_epsilon is None:
        area_epsilon = area_tolerance(verts)

    degenerate_faces = int(np.count_nonzero(face_areas(verts, faces) <= area_epsilon))

    edge_counts = directed_counts = np.zeros(0, dtype=int)
    if faces.size:
        directed = faces[:, [0, 1, 1, 2, 2, 0]].reshape(-1, 2)
        _, edge_counts = np.unique(np.sort(directed, axis=1), axis=0, return_counts=True)
        _, directed_counts = np.unique(directed, axis=0, return_counts=True)

    return MeshAnalysis(
        n_vertices=mesh.n_vertices,
        n_faces=mesh.n_faces,
        degenerate_faces=degenerate_faces,
        boundary_edges=int(np.count_nonzero(edge_counts == 1)),
        nonmanifold_edges=int(np.count_nonzero(edge_counts > 2)),
        misoriented_edges=int(np.count_nonzero(directed_counts > 1)),
        volume=mesh.signed_volume,
    )
