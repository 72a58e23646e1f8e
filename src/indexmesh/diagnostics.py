from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from .mesh import MeshGeometry
from .models import SectionIndex
from .normals import DEFAULT_NORMAL_SETTINGS, NormalSettings, is_degenerate


@dataclass(frozen=True)
class SectionStats:
    section: int
    triangles: int
    quads: int
    vertices: int


def section_stats(mesh: MeshGeometry) -> List[SectionStats]:
    """Face and referenced-vertex counts per section, in section order."""
    stats: List[SectionStats] = []
    for section in mesh.sections():
        faces = mesh.section_faces(section)
        quads = sum(1 for f in faces if f.is_quad())
        used = {vid for f in faces for vid in f.vertices}
        stats.append(SectionStats(section, len(faces) - quads, quads, len(used)))
    return stats


def degenerate_faces(
    mesh: MeshGeometry,
    settings: NormalSettings = DEFAULT_NORMAL_SETTINGS,
) -> List[SectionIndex]:
    """Faces whose first two edges fail the normal degeneracy test.

    Quads in this list still get a usable normal through their fourth
    vertex; triangles do not.  Faces with an explicit normal are skipped.
    """
    found: List[SectionIndex] = []
    for idx, face in mesh.faces():
        if face.normal is not None:
            continue
        p0, p1, p2 = (mesh.vertex(vid).position() for vid in face.vertices[:3])
        if is_degenerate(p0, p1, p2, settings):
            found.append(idx)
    return found


def mesh_report(
    mesh: MeshGeometry,
    settings: Optional[NormalSettings] = None,
) -> Dict[str, Any]:
    """JSON-serialisable summary of *mesh*."""
    settings = settings or DEFAULT_NORMAL_SETTINGS
    stats = section_stats(mesh)
    degenerate = degenerate_faces(mesh, settings)
    triangle_faces = sum(s.triangles for s in stats)
    quad_faces = sum(s.quads for s in stats)
    return {
        "vertex_count": mesh.vertex_count,
        "face_count": mesh.face_count,
        "triangle_count": triangle_faces,
        "quad_count": quad_faces,
        "triangle_equivalent_count": triangle_faces + 2 * quad_faces,
        "orphan_vertex_count": sum(1 for v in mesh.vertices if not v.faces),
        "sections": [asdict(s) for s in stats],
        "degenerate_faces": [[idx.section, idx.index] for idx in degenerate],
        "errors": mesh.validate(),
    }
