"""Tests for section stats, degenerate-face detection and mesh reports."""

import json

import pytest

from indexmesh.diagnostics import (
    SectionStats,
    degenerate_faces,
    mesh_report,
    section_stats,
)
from indexmesh.mesh import MeshGeometry
from indexmesh.models import SectionIndex, face_normal, face_section
from indexmesh.normals import NormalSettings
from indexmesh.shapes import plane_quads
from indexmesh.vertex import PositionVertex


P = PositionVertex


@pytest.fixture
def mixed_mesh():
    mesh = MeshGeometry()
    mesh.add_quads(plane_quads(2, 1))
    mesh.add_face3(P((0, 0, 1)), P((1, 0, 1)), P((0, 1, 1)), face_section(3))
    return mesh


class TestSectionStats:

    def test_counts(self, mixed_mesh):
        assert section_stats(mixed_mesh) == [
            SectionStats(section=0, triangles=0, quads=2, vertices=6),
            SectionStats(section=3, triangles=1, quads=0, vertices=3),
        ]

    def test_empty(self):
        assert section_stats(MeshGeometry()) == []


class TestDegenerateFaces:

    def test_regular_mesh_has_none(self, mixed_mesh):
        assert degenerate_faces(mixed_mesh) == []

    def test_collinear_triangle(self):
        mesh = MeshGeometry()
        mesh.add_face3(P((0, 0, 0)), P((1, 0, 0)), P((0, 1, 0)))
        mesh.add_face3(P((0, 0, 0)), P((1, 0, 0)), P((2, 0, 0)))
        assert degenerate_faces(mesh) == [SectionIndex(0, 1)]

    def test_explicit_normal_skipped(self):
        mesh = MeshGeometry()
        mesh.add_face3(P((0, 0, 0)), P((1, 0, 0)), P((2, 0, 0)), face_normal((0, 0, 1)))
        assert degenerate_faces(mesh) == []

    def test_settings(self):
        mesh = MeshGeometry()
        mesh.add_face3(P((0, 0, 0)), P((0.01, 0, 0)), P((0, 1, 0)))
        assert degenerate_faces(mesh) == []
        assert degenerate_faces(mesh, NormalSettings(edge_epsilon=0.1)) == [SectionIndex(0, 0)]


class TestMeshReport:

    def test_fields(self, mixed_mesh):
        report = mesh_report(mixed_mesh)
        assert report["vertex_count"] == 9
        assert report["face_count"] == 3
        assert report["triangle_count"] == 1
        assert report["quad_count"] == 2
        assert report["triangle_equivalent_count"] == 5
        assert report["orphan_vertex_count"] == 0
        assert report["sections"][1] == {"section": 3, "triangles": 1, "quads": 0, "vertices": 3}
        assert report["degenerate_faces"] == []
        assert report["errors"] == []

    def test_orphans_after_removal(self, mixed_mesh):
        mixed_mesh.remove_face(SectionIndex(3, 0))
        report = mesh_report(mixed_mesh)
        assert report["orphan_vertex_count"] == 3
        assert report["sections"][1]["vertices"] == 0

    def test_reports_corruption(self, mixed_mesh):
        mixed_mesh.vertex(0).faces.clear()
        assert mesh_report(mixed_mesh)["errors"]

    def test_json_serialisable(self, mixed_mesh):
        json.dumps(mesh_report(mixed_mesh))
