"""indexmesh — indexed mesh geometry builder with render-buffer emission.

Public API is organised into layers:

- **Core** — payloads and formats, models, position index, the mesh container
- **Processing** — triangulation and normal generation
- **Emission** — vertex/index byte buffers in four layouts
- **Shapes** — quad producers for planes and boxes
- **Diagnostics** — consistency and degeneracy reports
- **Rendering** — matplotlib debug views (``indexmesh.visualize``, optional)
"""

# ── Core ────────────────────────────────────────────────────────────
from .vertex import (
    AttributeType,
    ColorVertex,
    MeshPayload,
    PositionVertex,
    RenderingPrimitive,
    UvColorVertex,
    UvVertex,
    VertexAttribute,
    VertexFormat,
    vertex_dtype,
)
from .models import (
    Face,
    FaceProps,
    InvalidFaceError,
    MeshConsistencyError,
    MeshVertex,
    SectionIndex,
    Winding,
    face_data,
    face_normal,
    face_section,
)
from .position_index import PositionIndex, position_key
from .mesh import MeshGeometry

# ── Processing ──────────────────────────────────────────────────────
from .triangulation import triangulate
from .normals import (
    DEFAULT_NORMAL_SETTINGS,
    NormalSettings,
    generate_face_normals,
    vertex_normal,
)
from .normals import face_normal as compute_face_normal

# ── Emission ────────────────────────────────────────────────────────
from .buffers import (
    AttributeLayout,
    BufferedGeometry,
    MeshBufferType,
    RenderableBuffer,
    create_buffered_geometry_layout,
    to_buffered_geometry,
    to_renderable_buffer,
)

# ── Shapes ──────────────────────────────────────────────────────────
from .shapes import BOX_SIDE_NORMALS, box_quads, plane_quads

# ── Diagnostics ─────────────────────────────────────────────────────
from .diagnostics import SectionStats, degenerate_faces, mesh_report, section_stats

__all__ = [
    # Core
    "AttributeType",
    "ColorVertex",
    "MeshPayload",
    "PositionVertex",
    "RenderingPrimitive",
    "UvColorVertex",
    "UvVertex",
    "VertexAttribute",
    "VertexFormat",
    "vertex_dtype",
    "Face",
    "FaceProps",
    "InvalidFaceError",
    "MeshConsistencyError",
    "MeshVertex",
    "SectionIndex",
    "Winding",
    "face_data",
    "face_normal",
    "face_section",
    "PositionIndex",
    "position_key",
    "MeshGeometry",
    # Processing
    "triangulate",
    "DEFAULT_NORMAL_SETTINGS",
    "NormalSettings",
    "generate_face_normals",
    "vertex_normal",
    "compute_face_normal",
    # Emission
    "AttributeLayout",
    "BufferedGeometry",
    "MeshBufferType",
    "RenderableBuffer",
    "create_buffered_geometry_layout",
    "to_buffered_geometry",
    "to_renderable_buffer",
    # Shapes
    "BOX_SIDE_NORMALS",
    "box_quads",
    "plane_quads",
    # Diagnostics
    "SectionStats",
    "degenerate_faces",
    "mesh_report",
    "section_stats",
]
