"""Quad producers for common shapes.

Each function yields 4-tuples of payloads ready for
:meth:`MeshGeometry.add_quads`.  Corner positions are computed with one
formula per grid point, so neighbouring quads share bit-identical
positions and deduplicate to the same vertex.
"""

from __future__ import annotations

from typing import Callable, Iterator, List, Tuple

from .models import Winding
from .vertex import PositionVertex, Vec3

VertexFactory = Callable[[Vec3], object]
Quad = Tuple[object, object, object, object]


def plane_quads(
    cols: int,
    rows: int,
    width: float = 1.0,
    height: float = 1.0,
    *,
    winding: Winding = Winding.CCW,
    vertex_factory: VertexFactory = PositionVertex,
) -> Iterator[Quad]:
    """Quads of a *cols* × *rows* grid spanning ``[0, width] × [0, height]`` at z = 0.

    Counter-clockwise quads face +Z, clockwise quads face -Z.
    """
    if cols < 1 or rows < 1:
        raise ValueError("cols and rows must be >= 1")

    def corner(i: int, j: int):
        return vertex_factory((width * i / cols, height * j / rows, 0.0))

    for j in range(rows):
        for i in range(cols):
            a = corner(i, j)
            b = corner(i + 1, j)
            c = corner(i + 1, j + 1)
            d = corner(i, j + 1)
            if winding is Winding.CCW:
                yield (a, b, c, d)
            else:
                yield (a, d, c, b)


# (sign per axis) corners of each side, counter-clockwise seen from outside
_BOX_SIDES: List[Tuple[Vec3, Vec3, Vec3, Vec3]] = [
    ((-1, -1, 1), (1, -1, 1), (1, 1, 1), (-1, 1, 1)),        # +Z
    ((-1, -1, -1), (-1, 1, -1), (1, 1, -1), (1, -1, -1)),    # -Z
    ((1, -1, -1), (1, 1, -1), (1, 1, 1), (1, -1, 1)),        # +X
    ((-1, -1, -1), (-1, -1, 1), (-1, 1, 1), (-1, 1, -1)),    # -X
    ((-1, 1, -1), (-1, 1, 1), (1, 1, 1), (1, 1, -1)),        # +Y
    ((-1, -1, -1), (1, -1, -1), (1, -1, 1), (-1, -1, 1)),    # -Y
]

BOX_SIDE_NORMALS: List[Vec3] = [
    (0.0, 0.0, 1.0),
    (0.0, 0.0, -1.0),
    (1.0, 0.0, 0.0),
    (-1.0, 0.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, -1.0, 0.0),
]


def box_quads(
    sx: float = 1.0,
    sy: float = 1.0,
    sz: float = 1.0,
    *,
    vertex_factory: VertexFactory = PositionVertex,
) -> Iterator[Tuple[int, Quad]]:
    """Yield ``(side, quad)`` for the six outward-facing sides of a centred box.

    *side* indexes :data:`BOX_SIDE_NORMALS`; use it to route sides into
    separate sections for hard edges.
    """
    hx, hy, hz = sx / 2.0, sy / 2.0, sz / 2.0
    for side, corners in enumerate(_BOX_SIDES):
        quad = tuple(
            vertex_factory((cx * hx, cy * hy, cz * hz)) for cx, cy, cz in corners
        )
        yield side, quad
