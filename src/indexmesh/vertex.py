"""Vertex payloads and attribute formats.

A mesh payload is any value that can report its position and merge a
per-face override into itself.  Payloads that want to be emitted into a
byte buffer additionally declare their field layout (an ordered
sequence of :class:`VertexAttribute`) and produce one record (a tuple
of field values, in layout order) per vertex.

Architecture
------------
- :class:`VertexFormat` describes the storage of one attribute (element
  type, component count, byte size, normalisation).
- :class:`MeshPayload` is the structural protocol the mesh relies on.
- :class:`PositionVertex`, :class:`ColorVertex`, :class:`UvVertex` and
  :class:`UvColorVertex` are ready-made payloads.  All fields are
  optional so that the same class can be used as a partial override
  (``ColorVertex(color=(1, 0, 0, 1))``).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import (
    Any,
    Dict,
    List,
    NamedTuple,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    runtime_checkable,
)

import numpy as np

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]
Vec4 = Tuple[float, float, float, float]


# ═══════════════════════════════════════════════════════════════════
# Attribute formats
# ═══════════════════════════════════════════════════════════════════

class AttributeType(IntEnum):
    """Element types, numbered like the WebGL ``vertexAttribPointer`` constants."""

    BYTE = 0x1400
    UNSIGNED_BYTE = 0x1401
    SHORT = 0x1402
    UNSIGNED_SHORT = 0x1403
    FLOAT = 0x1406
    HALF_FLOAT = 0x140B


class RenderingPrimitive(IntEnum):
    POINTS = 0x0000
    LINES = 0x0001
    LINE_LOOP = 0x0002
    LINE_STRIP = 0x0003
    TRIANGLES = 0x0004
    TRIANGLE_STRIP = 0x0005
    TRIANGLE_FAN = 0x0006


class _FormatSpec(NamedTuple):
    count: int
    attr_type: AttributeType
    normalized: bool
    dtype: str


_T = AttributeType

# name -> (components, element type, normalized, numpy element dtype)
_FORMATS: Dict[str, _FormatSpec] = {
    "Uint8x2": _FormatSpec(2, _T.UNSIGNED_BYTE, False, "u1"),
    "Uint8x4": _FormatSpec(4, _T.UNSIGNED_BYTE, False, "u1"),
    "Sint8x2": _FormatSpec(2, _T.BYTE, False, "i1"),
    "Sint8x4": _FormatSpec(4, _T.BYTE, False, "i1"),
    "Unorm8x2": _FormatSpec(2, _T.UNSIGNED_BYTE, True, "u1"),
    "Unorm8x4": _FormatSpec(4, _T.UNSIGNED_BYTE, True, "u1"),
    "Snorm8x2": _FormatSpec(2, _T.BYTE, True, "i1"),
    "Snorm8x4": _FormatSpec(4, _T.BYTE, True, "i1"),
    "Uint16x2": _FormatSpec(2, _T.UNSIGNED_SHORT, False, "<u2"),
    "Uint16x4": _FormatSpec(4, _T.UNSIGNED_SHORT, False, "<u2"),
    "Sint16x2": _FormatSpec(2, _T.SHORT, False, "<i2"),
    "Sint16x4": _FormatSpec(4, _T.SHORT, False, "<i2"),
    "Unorm16x2": _FormatSpec(2, _T.UNSIGNED_SHORT, True, "<u2"),
    "Unorm16x4": _FormatSpec(4, _T.UNSIGNED_SHORT, True, "<u2"),
    "Snorm16x2": _FormatSpec(2, _T.SHORT, True, "<i2"),
    "Snorm16x4": _FormatSpec(4, _T.SHORT, True, "<i2"),
    "Float16x2": _FormatSpec(2, _T.HALF_FLOAT, False, "<f2"),
    "Float16x4": _FormatSpec(4, _T.HALF_FLOAT, False, "<f2"),
    "Float32": _FormatSpec(1, _T.FLOAT, False, "<f4"),
    "Float32x2": _FormatSpec(2, _T.FLOAT, False, "<f4"),
    "Float32x3": _FormatSpec(3, _T.FLOAT, False, "<f4"),
    "Float32x4": _FormatSpec(4, _T.FLOAT, False, "<f4"),
}


class VertexFormat(Enum):
    """Storage format of a single vertex attribute."""

    UINT8X2 = "Uint8x2"
    UINT8X4 = "Uint8x4"
    SINT8X2 = "Sint8x2"
    SINT8X4 = "Sint8x4"
    UNORM8X2 = "Unorm8x2"
    UNORM8X4 = "Unorm8x4"
    SNORM8X2 = "Snorm8x2"
    SNORM8X4 = "Snorm8x4"
    UINT16X2 = "Uint16x2"
    UINT16X4 = "Uint16x4"
    SINT16X2 = "Sint16x2"
    SINT16X4 = "Sint16x4"
    UNORM16X2 = "Unorm16x2"
    UNORM16X4 = "Unorm16x4"
    SNORM16X2 = "Snorm16x2"
    SNORM16X4 = "Snorm16x4"
    FLOAT16X2 = "Float16x2"
    FLOAT16X4 = "Float16x4"
    FLOAT32 = "Float32"
    FLOAT32X2 = "Float32x2"
    FLOAT32X3 = "Float32x3"
    FLOAT32X4 = "Float32x4"

    @property
    def count(self) -> int:
        """Number of components."""
        return _FORMATS[self.value].count

    @property
    def attr_type(self) -> AttributeType:
        return _FORMATS[self.value].attr_type

    @property
    def normalized(self) -> bool:
        return _FORMATS[self.value].normalized

    @property
    def numpy_dtype(self) -> np.dtype:
        """Little-endian numpy dtype of one component."""
        return np.dtype(_FORMATS[self.value].dtype)

    @property
    def byte_size(self) -> int:
        return self.count * self.numpy_dtype.itemsize


@dataclass(frozen=True)
class VertexAttribute:
    """One named field of a vertex record."""

    name: str
    format: VertexFormat


NORMAL_ATTRIBUTE = VertexAttribute("normal", VertexFormat.FLOAT32X3)


def vertex_dtype(layout: Sequence[VertexAttribute]) -> np.dtype:
    """Packed numpy structured dtype for records with the given *layout*.

    Field offsets follow declaration order with no padding, which is the
    byte layout emitted buffers use.
    """
    fields: List[Tuple[Any, ...]] = []
    for attr in layout:
        fmt = attr.format
        if fmt.count == 1:
            fields.append((attr.name, fmt.numpy_dtype))
        else:
            fields.append((attr.name, fmt.numpy_dtype, (fmt.count,)))
    return np.dtype(fields)


# ═══════════════════════════════════════════════════════════════════
# Payload protocol
# ═══════════════════════════════════════════════════════════════════

@runtime_checkable
class MeshPayload(Protocol):
    """What :class:`~indexmesh.mesh.MeshGeometry` needs from a vertex payload."""

    def position(self) -> Vec3:
        ...

    def override_with(self, other: Any) -> "MeshPayload":
        """Return a copy with every field *other* sets replacing ours."""
        ...


def _pick(value, override):
    return value if override is None else override


def _vec(value: Optional[Sequence[float]], default: Tuple[float, ...]) -> Tuple[float, ...]:
    if value is None:
        return default
    return tuple(float(c) for c in value)


class _LayoutMixin:
    LAYOUT: Tuple[VertexAttribute, ...] = ()

    @classmethod
    def vertex_layout(cls) -> List[VertexAttribute]:
        return list(cls.LAYOUT)

    def position(self) -> Vec3:
        pos = getattr(self, "pos")
        if pos is None:
            raise ValueError(f"{type(self).__name__} has no position")
        x, y, z = pos
        return (float(x), float(y), float(z))


_ORIGIN: Vec3 = (0.0, 0.0, 0.0)
_WHITE: Vec4 = (1.0, 1.0, 1.0, 1.0)
_UV_ZERO: Vec2 = (0.0, 0.0)


@dataclass(frozen=True)
class PositionVertex(_LayoutMixin):
    pos: Optional[Vec3] = None

    LAYOUT = (VertexAttribute("position", VertexFormat.FLOAT32X3),)

    def override_with(self, other: "PositionVertex") -> "PositionVertex":
        return PositionVertex(pos=_pick(self.pos, other.pos))

    def to_record(self) -> tuple:
        return (_vec(self.pos, _ORIGIN),)


@dataclass(frozen=True)
class ColorVertex(_LayoutMixin):
    """Position plus RGBA colour (floats, 0–1)."""

    pos: Optional[Vec3] = None
    color: Optional[Vec4] = None

    LAYOUT = (
        VertexAttribute("position", VertexFormat.FLOAT32X3),
        VertexAttribute("color", VertexFormat.FLOAT32X4),
    )

    def override_with(self, other: "ColorVertex") -> "ColorVertex":
        return ColorVertex(
            pos=_pick(self.pos, other.pos),
            color=_pick(self.color, other.color),
        )

    def to_record(self) -> tuple:
        return (_vec(self.pos, _ORIGIN), _vec(self.color, _WHITE))


@dataclass(frozen=True)
class UvVertex(_LayoutMixin):
    pos: Optional[Vec3] = None
    uv: Optional[Vec2] = None

    LAYOUT = (
        VertexAttribute("position", VertexFormat.FLOAT32X3),
        VertexAttribute("uv", VertexFormat.FLOAT32X2),
    )

    def override_with(self, other: "UvVertex") -> "UvVertex":
        return UvVertex(pos=_pick(self.pos, other.pos), uv=_pick(self.uv, other.uv))

    def to_record(self) -> tuple:
        return (_vec(self.pos, _ORIGIN), _vec(self.uv, _UV_ZERO))


@dataclass(frozen=True)
class UvColorVertex(_LayoutMixin):
    pos: Optional[Vec3] = None
    uv: Optional[Vec2] = None
    color: Optional[Vec4] = None

    LAYOUT = (
        VertexAttribute("position", VertexFormat.FLOAT32X3),
        VertexAttribute("uv", VertexFormat.FLOAT32X2),
        VertexAttribute("color", VertexFormat.FLOAT32X4),
    )

    def override_with(self, other: "UvColorVertex") -> "UvColorVertex":
        return UvColorVertex(
            pos=_pick(self.pos, other.pos),
            uv=_pick(self.uv, other.uv),
            color=_pick(self.color, other.color),
        )

    def to_record(self) -> tuple:
        return (
            _vec(self.pos, _ORIGIN),
            _vec(self.uv, _UV_ZERO),
            _vec(self.color, _WHITE),
        )
