"""indexmesh command-line interface."""

from __future__ import annotations

import argparse
import json
import logging
from typing import List, Optional

from .buffers import MeshBufferType, to_buffered_geometry
from .diagnostics import mesh_report
from .mesh import MeshGeometry
from .models import FaceProps, Winding
from .shapes import box_quads, plane_quads


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="indexmesh CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    modes = [m.value for m in MeshBufferType]

    plane = sub.add_parser("plane", help="Build a quad grid in the XY plane and emit it")
    plane.add_argument("--cols", type=int, default=4)
    plane.add_argument("--rows", type=int, default=4)
    plane.add_argument("--width", type=float, default=1.0)
    plane.add_argument("--height", type=float, default=1.0)
    plane.add_argument("--winding", choices=[w.value for w in Winding], default="ccw")
    plane.add_argument("--mode", choices=modes, default=MeshBufferType.VERTEX_NORMALS.value)
    plane.add_argument("--json", action="store_true", help="Print a JSON report")

    box = sub.add_parser("box", help="Build a box and emit it")
    box.add_argument("--size", type=float, nargs=3, default=(1.0, 1.0, 1.0), metavar=("SX", "SY", "SZ"))
    box.add_argument(
        "--hard-edges", action="store_true",
        help="Put every side into its own section (flat shading per side)",
    )
    box.add_argument("--mode", choices=modes, default=MeshBufferType.VERTEX_NORMALS.value)
    box.add_argument("--json", action="store_true", help="Print a JSON report")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "plane":
        mesh = MeshGeometry()
        mesh.add_quads(plane_quads(
            args.cols, args.rows, args.width, args.height, winding=Winding(args.winding),
        ))
    elif args.command == "box":
        mesh = _build_box(args.size, args.hard_edges)

    _emit(mesh, args.mode, args.json)


def _build_box(size, hard_edges: bool) -> MeshGeometry:
    mesh = MeshGeometry()
    for side, quad in box_quads(*size):
        props = FaceProps(section=side if hard_edges else 0)
        mesh.add_face4(*quad, props)
    return mesh


def _emit(mesh: MeshGeometry, mode: str, as_json: bool) -> None:
    geometry = to_buffered_geometry(mesh, mode)
    if as_json:
        payload = {
            "mode": mode,
            "mesh": mesh_report(mesh),
            "geometry": geometry.to_dict(),
        }
        print(json.dumps(payload, indent=2))
        return

    print(f"mesh: {mesh.vertex_count} vertices, {mesh.face_count} faces, "
          f"{len(mesh.sections())} sections")
    print(f"{mode}: {len(geometry.buffer)} vertex bytes "
          f"({geometry.vertex_size} per vertex), draw count {geometry.vertex_count}")
    for attr in geometry.vertex_layout:
        print(f"  {attr.name}: {attr.size} x {attr.attr_type.name} @ {attr.offset}")


if __name__ == "__main__":
    main()
