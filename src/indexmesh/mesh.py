from __future__ import annotations

import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from .models import (
    Face,
    FaceProps,
    InvalidFaceError,
    MeshConsistencyError,
    MeshVertex,
    SectionIndex,
)
from .position_index import PositionIndex, position_key
from .vertex import MeshPayload

if TYPE_CHECKING:
    from .buffers import BufferedGeometry, MeshBufferType, RenderableBuffer
    from .normals import NormalSettings

logger = logging.getLogger(__name__)

FaceRef = Union[SectionIndex, int, Tuple[int, int]]


class MeshGeometry:
    """Indexed mesh builder with position-deduplicated vertices.

    Faces live in integer-keyed *sections* that share one vertex pool.
    Every vertex records the :class:`SectionIndex` of each face using
    it, and every mutation keeps those back-references in step with the
    face lists (see :meth:`validate`).
    """

    def __init__(self) -> None:
        self.vertices: List[MeshVertex] = []
        self._sections: Dict[int, List[Face]] = {}
        self._index = PositionIndex()

    # ── Queries ─────────────────────────────────────────────────────

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        return sum(len(faces) for faces in self._sections.values())

    def sections(self) -> List[int]:
        """Section ids in ascending order."""
        return sorted(self._sections)

    def section_faces(self, section: int) -> Tuple[Face, ...]:
        return tuple(self._sections.get(section, ()))

    def faces(self) -> Iterator[Tuple[SectionIndex, Face]]:
        """Yield ``(SectionIndex, Face)`` for every face, section by section."""
        for section in self.sections():
            for i, face in enumerate(self._sections[section]):
                yield SectionIndex(section, i), face

    def face(self, ref: FaceRef) -> Face:
        idx = SectionIndex.coerce(ref)
        return self._sections[idx.section][idx.index]

    def vertex(self, vertex_id: int) -> MeshVertex:
        return self.vertices[vertex_id]

    def vertex_id(self, position: Sequence[float]) -> Optional[int]:
        """Id of the vertex at exactly *position*, if any."""
        return self._index.lookup(position)

    # ── Building ────────────────────────────────────────────────────

    def add_face3(self, v1: Any, v2: Any, v3: Any, props: Optional[FaceProps] = None) -> SectionIndex:
        return self._add_face((v1, v2, v3), props)

    def add_face4(
        self, v1: Any, v2: Any, v3: Any, v4: Any, props: Optional[FaceProps] = None,
    ) -> SectionIndex:
        return self._add_face((v1, v2, v3, v4), props)

    def add_quads(
        self,
        quads: Iterable[Sequence[Any]],
        props: Optional[FaceProps] = None,
    ) -> List[SectionIndex]:
        """Add every 4-tuple of payloads from *quads* with the shared *props*.

        Tuples are taken in the winding the producer declared; no
        reordering happens here.
        """
        added = [self.add_face4(q[0], q[1], q[2], q[3], props) for q in quads]
        logger.debug("added %d quads", len(added))
        return added

    def _add_face(self, payloads: Sequence[Any], props: Optional[FaceProps]) -> SectionIndex:
        props = props or FaceProps()
        keys = [position_key(_position_of(p)) for p in payloads]
        if len(set(keys)) != len(keys):
            raise InvalidFaceError(
                f"Face must have {len(keys)} unique vertices, got {len(set(keys))}"
            )

        vertex_ids = [self._index.resolve_key(key) for key in keys]
        if len(vertex_ids) == 3:
            face = Face.triangle(*vertex_ids, normal=props.normal, data=props.data)
        else:
            face = Face.quad(*vertex_ids, normal=props.normal, data=props.data)

        for vid, payload in zip(vertex_ids, payloads):
            self._store_payload(vid, payload)
        return self.insert_face(face, props.section)

    def _store_payload(self, vertex_id: int, payload: Any) -> None:
        if vertex_id < len(self.vertices):
            self.vertices[vertex_id].data = payload
        elif vertex_id == len(self.vertices):
            self.vertices.append(MeshVertex(payload))
        else:
            raise MeshConsistencyError(
                f"Vertex id {vertex_id} skips ahead of {len(self.vertices)} stored vertices"
            )

    def insert_face(self, face: Face, section: int = 0) -> SectionIndex:
        """Append an already-indexed *face* to *section* and register it with its vertices."""
        for vid in face.vertices:
            if not 0 <= vid < len(self.vertices):
                raise MeshConsistencyError(f"Face references missing vertex {vid}")
        faces = self._sections.setdefault(section, [])
        idx = SectionIndex(section, len(faces))
        faces.append(face)
        for vid in face.vertices:
            self.vertices[vid].faces.append(idx)
        return idx

    def set_vertex(self, vertex_id: int, data: Any) -> None:
        """Replace the payload of *vertex_id*; unknown ids are ignored.

        The position index is not updated, so *data* should keep the
        vertex's position.
        """
        if 0 <= vertex_id < len(self.vertices):
            self.vertices[vertex_id].data = data

    def merge(self, other: "MeshGeometry") -> None:
        """Replay every face of *other* into this geometry.

        Sections, explicit normals and face data carry over; positions
        shared between the two meshes collapse onto one vertex.
        """
        # Snapshot first: *other* may be this geometry.
        replay = [
            ([other.vertex(vid).data for vid in face.vertices], FaceProps(face.normal, face.data, idx.section))
            for idx, face in other.faces()
        ]
        for payloads, props in replay:
            self._add_face(payloads, props)
        logger.debug("merged %d faces, now %d vertices", len(replay), self.vertex_count)

    # ── Removal ─────────────────────────────────────────────────────

    def remove_face(self, ref: FaceRef) -> Face:
        """Swap-remove the face at *ref* and return it.

        The last face of the section moves into the vacated slot; the
        back-references of its vertices are rewritten to the new slot.
        """
        idx = SectionIndex.coerce(ref)
        faces = self._sections[idx.section]
        if not 0 <= idx.index < len(faces):
            raise IndexError(f"No face at {idx}")

        removed = faces[idx.index]
        moved = faces.pop()
        if idx.index < len(faces):
            faces[idx.index] = moved

        for vid in removed.vertices:
            refs = self.vertices[vid].faces
            remaining = [r for r in refs if r != idx]
            if len(refs) - len(remaining) != 1:
                raise MeshConsistencyError(
                    f"Vertex {vid} holds {len(refs) - len(remaining)} references to {idx}"
                )
            refs[:] = remaining

        if idx.index < len(faces):
            stale = SectionIndex(idx.section, len(faces))
            for vid in moved.vertices:
                refs = self.vertices[vid].faces
                hits = [k for k, r in enumerate(refs) if r == stale]
                if len(hits) != 1:
                    raise MeshConsistencyError(
                        f"Vertex {vid} holds {len(hits)} references to moved face {stale}"
                    )
                refs[hits[0]] = idx

        return removed

    # ── Processing ──────────────────────────────────────────────────

    def triangulate(self) -> int:
        from .triangulation import triangulate
        return triangulate(self)

    def generate_face_normals(self, settings: Optional["NormalSettings"] = None) -> int:
        from .normals import DEFAULT_NORMAL_SETTINGS, generate_face_normals
        return generate_face_normals(self, settings or DEFAULT_NORMAL_SETTINGS)

    def to_renderable_buffer(
        self, mode: Union["MeshBufferType", str], settings: Optional["NormalSettings"] = None,
    ) -> "RenderableBuffer":
        from .buffers import to_renderable_buffer
        return to_renderable_buffer(self, mode, settings=settings)

    def to_buffered_geometry(
        self,
        mode: Union["MeshBufferType", str],
        payload_type: Optional[type] = None,
        settings: Optional["NormalSettings"] = None,
    ) -> "BufferedGeometry":
        from .buffers import to_buffered_geometry
        return to_buffered_geometry(self, mode, payload_type=payload_type, settings=settings)

    def copy(self) -> "MeshGeometry":
        """Structural copy; payloads are shared, everything else is fresh."""
        clone = MeshGeometry()
        clone.vertices = [MeshVertex(v.data, list(v.faces)) for v in self.vertices]
        clone._sections = {
            section: [Face(list(f.vertices), f.normal, f.data) for f in faces]
            for section, faces in self._sections.items()
        }
        clone._index = self._index.copy()
        return clone

    # ── Consistency ─────────────────────────────────────────────────

    def validate(self) -> list[str]:
        """Return every broken back-reference (empty list = consistent)."""
        errors: list[str] = []

        if len(self._index) != len(self.vertices):
            errors.append(
                f"Position index holds {len(self._index)} ids but {len(self.vertices)} vertices are stored"
            )

        for idx, face in self.faces():
            errors.extend(f"Face {idx}: {e}" for e in face.validate_polygon())
            for vid in face.vertices:
                if not 0 <= vid < len(self.vertices):
                    errors.append(f"Face {idx} references missing vertex {vid}")
                    continue
                count = self.vertices[vid].faces.count(idx)
                if count != 1:
                    errors.append(f"Vertex {vid} references face {idx} {count} times")

        for vid, vertex in enumerate(self.vertices):
            for ref in vertex.faces:
                faces = self._sections.get(ref.section)
                if faces is None or not 0 <= ref.index < len(faces):
                    errors.append(f"Vertex {vid} references missing face {ref}")
                elif vid not in faces[ref.index].vertices:
                    errors.append(f"Vertex {vid} references face {ref} which does not use it")

        return errors


def _position_of(payload: Any) -> Sequence[float]:
    if not isinstance(payload, MeshPayload):
        raise TypeError(
            f"{type(payload).__name__} payload does not provide position() and override_with()"
        )
    return payload.position()
