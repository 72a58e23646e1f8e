"""Matplotlib debug views of a :class:`MeshGeometry`.

Returns figures rather than writing files; callers decide whether to
show or save them.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .mesh import MeshGeometry
from .normals import face_normal

# One colour per section, cycled
_SECTION_COLORS = [
    "#e6194b", "#3cb44b", "#4363d8", "#f58231", "#911eb4",
    "#42d4f4", "#f032e6", "#bfef45", "#fabed4", "#469990",
    "#dcbeff", "#9a6324",
]
_NORMAL_COLOR = "#2b2b2b"


def _ensure_mpl():
    """Lazy-import matplotlib; raise helpful error if missing."""
    try:
        import matplotlib.pyplot as plt
        from mpl_toolkits.mplot3d.art3d import Poly3DCollection
        return plt, Poly3DCollection
    except ImportError as exc:
        raise RuntimeError(
            "matplotlib is required for visualisation. "
            "Install with `pip install indexmesh[viz]`."
        ) from exc


def plot_mesh(
    mesh: MeshGeometry,
    *,
    show_normals: bool = False,
    normal_length: Optional[float] = None,
    face_alpha: float = 0.35,
    figsize: Tuple[float, float] = (6.0, 6.0),
    title: Optional[str] = None,
):
    """Draw every face of *mesh*, coloured by section.

    With *show_normals*, each face gets an arrow from its centroid along
    its normal (the explicit one, or a freshly computed one).  The mesh
    is not modified.
    """
    plt, Poly3DCollection = _ensure_mpl()

    fig = plt.figure(figsize=figsize)
    ax = fig.add_subplot(projection="3d")

    points = np.array([v.position() for v in mesh.vertices], dtype=float).reshape(-1, 3)
    if normal_length is None:
        extent = float(np.ptp(points, axis=0).max()) if len(points) else 1.0
        normal_length = 0.15 * (extent or 1.0)

    for section in mesh.sections():
        color = _SECTION_COLORS[section % len(_SECTION_COLORS)]
        polys = []
        for face in mesh.section_faces(section):
            corners = [points[vid] for vid in face.vertices]
            polys.append(corners)
            if show_normals:
                centre = np.mean(corners, axis=0)
                normal = face.normal or face_normal(*corners)
                ax.quiver(
                    *centre, *normal, length=normal_length, color=_NORMAL_COLOR, linewidth=0.8,
                )
        if polys:
            ax.add_collection3d(Poly3DCollection(
                polys, facecolors=color, edgecolors="#2b2b2b", alpha=face_alpha, linewidths=0.6,
            ))

    if len(points):
        lo = points.min(axis=0)
        hi = points.max(axis=0)
        pad = 0.1 * float((hi - lo).max() or 1.0)
        ax.set_xlim(lo[0] - pad, hi[0] + pad)
        ax.set_ylim(lo[1] - pad, hi[1] + pad)
        ax.set_zlim(lo[2] - pad, hi[2] + pad)
    ax.set_xlabel("x")
    ax.set_ylabel("y")
    ax.set_zlabel("z")
    if title:
        ax.set_title(title)
    return fig
