"""Face and vertex normals.

Face normals follow the counter-clockwise convention
``normalize(cross(p1 - p0, p2 - p0))``: the unit quad
(0,0,0) → (1,0,0) → (1,1,0) → (0,1,0) faces +Z.

When the first two edges are unusable (an edge shorter than
:attr:`NormalSettings.edge_epsilon`, or the edges nearly parallel) and
the face is a quad, the fourth vertex stands in for the offending edge.
Triangles have no such fallback; their degenerate normal is returned
as-is (the zero vector when the cross product vanishes).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional, Sequence, Tuple

import numpy as np

from .models import Face, MeshConsistencyError
from .vertex import Vec3

if TYPE_CHECKING:
    from .mesh import MeshGeometry

_ZERO_LENGTH = 1e-12


@dataclass(frozen=True)
class NormalSettings:
    """Thresholds of the degenerate-face test.

    Attributes
    ----------
    edge_epsilon : float
        Edges shorter than this count as collapsed.
    parallel_cosine : float
        Edges whose ``|cos(angle)|`` exceeds this count as collinear.
    """

    edge_epsilon: float = 1e-4
    parallel_cosine: float = 0.9999


DEFAULT_NORMAL_SETTINGS = NormalSettings()


def normalize_or_zero(vec: Sequence[float]) -> np.ndarray:
    v = np.asarray(vec, dtype=np.float64)
    length = float(np.linalg.norm(v))
    if not np.isfinite(length) or length < _ZERO_LENGTH:
        return np.zeros(3)
    return v / length


def _degeneracy(
    a: np.ndarray, b: np.ndarray, settings: NormalSettings,
) -> Tuple[bool, bool, bool]:
    len_a = float(np.linalg.norm(a))
    len_b = float(np.linalg.norm(b))
    short_a = len_a < settings.edge_epsilon
    short_b = len_b < settings.edge_epsilon
    parallel = False
    if len_a > 0.0 and len_b > 0.0:
        cos = float(np.dot(a, b)) / (len_a * len_b)
        parallel = abs(cos) > settings.parallel_cosine
    return short_a, short_b, parallel


def is_degenerate(
    p0: Sequence[float],
    p1: Sequence[float],
    p2: Sequence[float],
    settings: NormalSettings = DEFAULT_NORMAL_SETTINGS,
) -> bool:
    """True if the edges ``p1 - p0`` and ``p2 - p0`` cannot define a normal."""
    o = np.asarray(p0, dtype=np.float64)
    a = np.asarray(p1, dtype=np.float64) - o
    b = np.asarray(p2, dtype=np.float64) - o
    return any(_degeneracy(a, b, settings))


def face_normal(
    p0: Sequence[float],
    p1: Sequence[float],
    p2: Sequence[float],
    p3: Optional[Sequence[float]] = None,
    settings: NormalSettings = DEFAULT_NORMAL_SETTINGS,
) -> Vec3:
    """Unit normal of the face ``p0, p1, p2[, p3]``.

    Never raises on degenerate input; see the module docstring for the
    quad fallback.
    """
    o = np.asarray(p0, dtype=np.float64)
    a = np.asarray(p1, dtype=np.float64) - o
    b = np.asarray(p2, dtype=np.float64) - o

    short_a, short_b, parallel = _degeneracy(a, b, settings)
    if (short_a or short_b or parallel) and p3 is not None:
        q = np.asarray(p3, dtype=np.float64)
        if short_a:
            a = np.asarray(p1, dtype=np.float64) - q
        else:
            b = q - o

    n = normalize_or_zero(np.cross(a, b))
    return (float(n[0]), float(n[1]), float(n[2]))


def face_positions(mesh: "MeshGeometry", face: Face) -> list[Vec3]:
    return [mesh.vertex(vid).position() for vid in face.vertices]


def generate_face_normals(
    mesh: "MeshGeometry",
    settings: NormalSettings = DEFAULT_NORMAL_SETTINGS,
) -> int:
    """Fill in the normal of every face that lacks one.

    Returns the number of normals computed.
    """
    computed = 0
    for _, face in mesh.faces():
        if face.normal is not None:
            continue
        face.normal = face_normal(*face_positions(mesh, face), settings=settings)
        computed += 1
    return computed


def vertex_normal(faces: Sequence[Face], face_indices: Iterable[int]) -> np.ndarray:
    """Normalised sum of the normals of ``faces[i]`` for *i* in *face_indices*.

    Returns the zero vector when the normals cancel out.
    """
    total = np.zeros(3)
    for i in face_indices:
        normal = faces[i].normal
        if normal is None:
            raise MeshConsistencyError(f"Face {i} has no normal; generate face normals first")
        total += normal
    return normalize_or_zero(total)
