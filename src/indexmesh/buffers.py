"""Buffer emission — flat vertex/index bytes for a render pipeline.

Emission never touches the caller's mesh: a copy is taken, normals are
generated on the copy (before triangulation, so quads can use their
fourth vertex), the copy is triangulated and then written out in one of
four layouts.

Modes
-----
``NO_NORMALS``
    One record per vertex id, global ``uint32`` index buffer.
``VERTEX_NORMALS``
    One record per (vertex, section) pair with the vertex normal averaged
    over that section's faces; indices are offset section by section.
``VERTEX_NORMAL_FACE_DATA``
    Unindexed; one record per face corner, payload merged with the face
    data, section-averaged vertex normal.
``FACE_NORMALS``
    Unindexed; one record per face corner, payload merged with the face
    data, the face normal on every corner.

A record is the payload's declared fields followed, in the normal
modes, by a trailing ``normal`` (:attr:`VertexFormat.FLOAT32X3`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .mesh import MeshGeometry
from .models import Face
from .normals import (
    DEFAULT_NORMAL_SETTINGS,
    NormalSettings,
    generate_face_normals,
    vertex_normal,
)
from .triangulation import triangulate
from .vertex import (
    NORMAL_ATTRIBUTE,
    AttributeType,
    RenderingPrimitive,
    VertexAttribute,
    vertex_dtype,
)

logger = logging.getLogger(__name__)

_INDEX_DTYPE = np.dtype("<u4")


class MeshBufferType(Enum):
    NO_NORMALS = "no_normals"
    VERTEX_NORMALS = "vertex_normals"
    VERTEX_NORMAL_FACE_DATA = "vertex_normal_face_data"
    FACE_NORMALS = "face_normals"

    @classmethod
    def parse(cls, value: Union["MeshBufferType", str]) -> "MeshBufferType":
        """Accept a member, its value, or its value with dashes (``"face-normals"``)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower().replace("-", "_"))
        except ValueError:
            allowed = [m.value for m in cls]
            raise ValueError(f"Unknown buffer type {value!r}. Allowed: {allowed}") from None

    @property
    def has_normals(self) -> bool:
        return self is not MeshBufferType.NO_NORMALS

    @property
    def indexed(self) -> bool:
        return self in (MeshBufferType.NO_NORMALS, MeshBufferType.VERTEX_NORMALS)


@dataclass(frozen=True)
class RenderableBuffer:
    """Raw emission result.

    *index_buffer* holds little-endian ``uint32`` indices, or is ``None``
    for unindexed modes and meshes without faces.
    """

    vertex_buffer: bytes
    index_buffer: Optional[bytes]
    vertex_count: int
    index_count: int


@dataclass(frozen=True)
class AttributeLayout:
    name: str
    size: int
    attr_type: AttributeType
    normalized: bool
    offset: int


@dataclass(frozen=True)
class BufferedGeometryLayout:
    vertex_size: int
    vertex_layout: Tuple[AttributeLayout, ...]


@dataclass(frozen=True)
class BufferedGeometry:
    """Vertex bytes plus everything needed to bind them.

    *vertex_count* is the number of indices for indexed geometry (the
    draw count), otherwise the number of vertex records.
    """

    buffer: bytes
    indices: Optional[bytes]
    vertex_size: int
    vertex_count: int
    rendering_primitive: RenderingPrimitive
    vertex_layout: Tuple[AttributeLayout, ...]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serialisable summary (byte sizes instead of the bytes)."""
        return {
            "buffer_bytes": len(self.buffer),
            "index_bytes": len(self.indices) if self.indices is not None else 0,
            "vertex_size": self.vertex_size,
            "vertex_count": self.vertex_count,
            "rendering_primitive": self.rendering_primitive.name,
            "vertex_layout": [
                {
                    "name": attr.name,
                    "size": attr.size,
                    "attr_type": int(attr.attr_type),
                    "normalized": attr.normalized,
                    "offset": attr.offset,
                }
                for attr in self.vertex_layout
            ],
        }


def create_buffered_geometry_layout(layout: Sequence[VertexAttribute]) -> BufferedGeometryLayout:
    """Assign packed byte offsets to *layout* in declaration order."""
    offset = 0
    attributes: List[AttributeLayout] = []
    for attr in layout:
        fmt = attr.format
        attributes.append(AttributeLayout(
            name=attr.name,
            size=fmt.count,
            attr_type=fmt.attr_type,
            normalized=fmt.normalized,
            offset=offset,
        ))
        offset += fmt.byte_size
    return BufferedGeometryLayout(vertex_size=offset, vertex_layout=tuple(attributes))


def emission_layout(payload_type: type, mode: Union[MeshBufferType, str]) -> List[VertexAttribute]:
    """Record layout for *payload_type* in *mode* (payload fields, then normal)."""
    mode = MeshBufferType.parse(mode)
    layout = list(payload_type.vertex_layout())
    if mode.has_normals:
        layout.append(NORMAL_ATTRIBUTE)
    return layout


# ═══════════════════════════════════════════════════════════════════
# Emission
# ═══════════════════════════════════════════════════════════════════

def prepare_for_emission(
    mesh: MeshGeometry,
    mode: Union[MeshBufferType, str],
    settings: Optional[NormalSettings] = None,
) -> MeshGeometry:
    """Triangulated copy of *mesh*, with face normals when *mode* needs them."""
    mode = MeshBufferType.parse(mode)
    snapshot = mesh.copy()
    if mode.has_normals:
        generate_face_normals(snapshot, settings or DEFAULT_NORMAL_SETTINGS)
    triangulate(snapshot)
    return snapshot


def to_renderable_buffer(
    mesh: MeshGeometry,
    mode: Union[MeshBufferType, str],
    *,
    settings: Optional[NormalSettings] = None,
) -> RenderableBuffer:
    """Emit *mesh* in *mode* without modifying it."""
    mode = MeshBufferType.parse(mode)
    snapshot = prepare_for_emission(mesh, mode, settings)

    if mode is MeshBufferType.NO_NORMALS:
        records, indices = _emit_no_normals(snapshot)
    elif mode is MeshBufferType.VERTEX_NORMALS:
        records, indices = _emit_vertex_normals(snapshot)
    elif mode is MeshBufferType.VERTEX_NORMAL_FACE_DATA:
        records, indices = _emit_unrolled(snapshot, face_normals=False)
    else:
        records, indices = _emit_unrolled(snapshot, face_normals=True)

    vertex_buffer = _pack_records(snapshot, records, mode)
    index_buffer = np.asarray(indices, dtype=_INDEX_DTYPE).tobytes() if indices else None

    logger.debug(
        "emitted %s: %d vertices, %d indices", mode.value, len(records), len(indices),
    )
    return RenderableBuffer(
        vertex_buffer=vertex_buffer,
        index_buffer=index_buffer,
        vertex_count=len(records),
        index_count=len(indices),
    )


def to_buffered_geometry(
    mesh: MeshGeometry,
    mode: Union[MeshBufferType, str],
    *,
    payload_type: Optional[type] = None,
    settings: Optional[NormalSettings] = None,
) -> BufferedGeometry:
    """Emit *mesh* together with its attribute layout.

    *payload_type* is only needed for a mesh without vertices; otherwise
    it is taken from the stored payloads.
    """
    mode = MeshBufferType.parse(mode)
    if payload_type is None:
        if not mesh.vertices:
            raise ValueError("Cannot infer the vertex layout of an empty mesh; pass payload_type")
        payload_type = type(mesh.vertices[0].data)

    geom_layout = create_buffered_geometry_layout(emission_layout(payload_type, mode))
    buffer = to_renderable_buffer(mesh, mode, settings=settings)

    return BufferedGeometry(
        buffer=buffer.vertex_buffer,
        indices=buffer.index_buffer,
        vertex_size=geom_layout.vertex_size,
        vertex_count=buffer.index_count if buffer.index_buffer is not None else buffer.vertex_count,
        rendering_primitive=RenderingPrimitive.TRIANGLES,
        vertex_layout=geom_layout.vertex_layout,
    )


Record = Tuple[Any, ...]


def _emit_no_normals(mesh: MeshGeometry) -> Tuple[List[Record], List[int]]:
    records = [vertex.data.to_record() for vertex in mesh.vertices]
    indices = [vid for _, face in mesh.faces() for vid in face.vertices]
    return records, indices


def _emit_vertex_normals(mesh: MeshGeometry) -> Tuple[List[Record], List[int]]:
    # Section-local vertex order: first discovery scanning vertices by id.
    section_vertices: Dict[int, List[int]] = {}
    local_index: Dict[Tuple[int, int], int] = {}
    for vid, vertex in enumerate(mesh.vertices):
        for ref in vertex.faces:
            key = (vid, ref.section)
            if key in local_index:
                continue
            order = section_vertices.setdefault(ref.section, [])
            local_index[key] = len(order)
            order.append(vid)

    records: List[Record] = []
    indices: List[int] = []
    offset = 0
    for section in mesh.sections():
        faces = mesh.section_faces(section)
        order = section_vertices.get(section, [])
        for vid in order:
            vertex = mesh.vertex(vid)
            normal = vertex_normal(faces, vertex.section_faces(section))
            records.append(vertex.data.to_record() + (tuple(normal),))
        for face in faces:
            indices.extend(local_index[(vid, section)] + offset for vid in face.vertices)
        offset += len(order)
    return records, indices


def _emit_unrolled(mesh: MeshGeometry, *, face_normals: bool) -> Tuple[List[Record], List[int]]:
    records: List[Record] = []
    for section in mesh.sections():
        faces = mesh.section_faces(section)
        normals: Dict[int, Tuple[float, ...]] = {}
        for face in faces:
            for vid in face.vertices:
                if face_normals:
                    normal = face.normal
                else:
                    normal = normals.get(vid)
                    if normal is None:
                        normal = tuple(vertex_normal(faces, mesh.vertex(vid).section_faces(section)))
                        normals[vid] = normal
                records.append(_face_vertex_data(mesh, face, vid).to_record() + (tuple(normal),))
    return records, []


def _face_vertex_data(mesh: MeshGeometry, face: Face, vertex_id: int) -> Any:
    data = mesh.vertex(vertex_id).data
    if face.data is not None:
        data = data.override_with(face.data)
    return data


def _pack_records(mesh: MeshGeometry, records: List[Record], mode: MeshBufferType) -> bytes:
    if not records:
        return b""
    payload_types = {type(vertex.data) for vertex in mesh.vertices}
    if len(payload_types) != 1:
        names = sorted(t.__name__ for t in payload_types)
        raise TypeError(f"All vertex payloads must share one type to be packed, got {names}")
    dtype = vertex_dtype(emission_layout(payload_types.pop(), mode))
    return np.array(records, dtype=dtype).tobytes()
