from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import Face, SectionIndex

if TYPE_CHECKING:
    from .mesh import MeshGeometry

logger = logging.getLogger(__name__)


def triangulate(mesh: "MeshGeometry") -> int:
    """Split every quad into the triangles ``(v0, v1, v2)`` and ``(v0, v2, v3)``.

    Quads are removed highest slot first, so the swap-removals never move
    a quad that is still waiting to be split.  Both triangles keep the
    quad's normal and data and are appended at the end of the section.
    Returns the number of quads split; a triangle-only mesh is left as is.
    """
    split = 0
    for section in mesh.sections():
        quads = [
            (i, list(face.vertices), face.normal, face.data)
            for i, face in enumerate(mesh.section_faces(section))
            if face.is_quad()
        ]
        for i, (v0, v1, v2, v3), normal, data in reversed(quads):
            mesh.remove_face(SectionIndex(section, i))
            mesh.insert_face(Face.triangle(v0, v1, v2, normal, data), section)
            mesh.insert_face(Face.triangle(v0, v2, v3, normal, data), section)
        if quads:
            logger.debug("section %d: split %d quads", section, len(quads))
        split += len(quads)
    return split
