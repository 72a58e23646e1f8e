from __future__ import annotations

import operator
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, Union

from .vertex import Vec3


class InvalidFaceError(ValueError):
    """A face was built from too few distinct vertices."""


class MeshConsistencyError(RuntimeError):
    """Vertex ↔ face back-references no longer agree (an internal defect)."""


class Winding(Enum):
    """Vertex traversal order of a face, seen from its front side."""

    CCW = "ccw"
    CW = "cw"


@dataclass(frozen=True, order=True)
class SectionIndex:
    """Address of a face: its section and its slot in that section's list."""

    section: int
    index: int

    @classmethod
    def coerce(cls, value: Union["SectionIndex", int, Tuple[int, int]]) -> "SectionIndex":
        """Accept a ``SectionIndex``, a bare index (section 0) or a pair."""
        if isinstance(value, SectionIndex):
            return value
        if not isinstance(value, (tuple, list)):
            return cls(0, operator.index(value))
        section, index = value
        return cls(operator.index(section), operator.index(index))


@dataclass
class Face:
    vertices: List[int]
    normal: Optional[Vec3] = None
    data: Any = None

    @classmethod
    def triangle(cls, a: int, b: int, c: int, normal: Optional[Vec3] = None, data: Any = None) -> "Face":
        return cls._checked([a, b, c], normal, data)

    @classmethod
    def quad(
        cls, a: int, b: int, c: int, d: int, normal: Optional[Vec3] = None, data: Any = None,
    ) -> "Face":
        return cls._checked([a, b, c, d], normal, data)

    @classmethod
    def _checked(cls, vertex_ids: List[int], normal, data) -> "Face":
        if len(set(vertex_ids)) != len(vertex_ids):
            raise InvalidFaceError(f"Face must have {len(vertex_ids)} unique vertices, got {vertex_ids}")
        return cls(vertex_ids, _as_vec3(normal), data)

    def vertex_count(self) -> int:
        return len(self.vertices)

    def is_quad(self) -> bool:
        return len(self.vertices) == 4

    def validate_polygon(self) -> list[str]:
        errors: list[str] = []
        if self.vertex_count() not in (3, 4):
            errors.append(f"Face has {self.vertex_count()} vertices, expected 3 or 4")
        if len(set(self.vertices)) != self.vertex_count():
            errors.append(f"Face {self.vertices} has repeated vertex ids")
        return errors


@dataclass
class MeshVertex:
    """A deduplicated vertex: its payload and the faces that use it."""

    data: Any
    faces: List[SectionIndex] = field(default_factory=list)

    def section_faces(self, section: int) -> List[int]:
        """Face slots of this vertex within *section*."""
        return [ref.index for ref in self.faces if ref.section == section]

    def position(self) -> Vec3:
        return self.data.position()


@dataclass(frozen=True)
class FaceProps:
    """Optional per-face settings for :meth:`MeshGeometry.add_face3` / ``add_face4``.

    *normal*: explicit face normal; skips normal generation.
    *data*: partial payload merged over each vertex at emission.
    *section*: target section (default 0).
    """

    normal: Optional[Vec3] = None
    data: Any = None
    section: int = 0

    def with_normal(self, normal: Sequence[float]) -> "FaceProps":
        return replace(self, normal=_as_vec3(normal))

    def with_data(self, data: Any) -> "FaceProps":
        return replace(self, data=data)

    def with_section(self, section: int) -> "FaceProps":
        return replace(self, section=section)


def face_normal(normal: Sequence[float]) -> FaceProps:
    return FaceProps(normal=_as_vec3(normal))


def face_data(data: Any) -> FaceProps:
    return FaceProps(data=data)


def face_section(section: int) -> FaceProps:
    return FaceProps(section=section)


def _as_vec3(value: Optional[Sequence[float]]) -> Optional[Vec3]:
    if value is None:
        return None
    x, y, z = value
    return (float(x), float(y), float(z))
