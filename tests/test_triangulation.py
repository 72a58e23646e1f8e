"""Tests for quad → triangle splitting."""

import pytest

from indexmesh.mesh import MeshGeometry
from indexmesh.models import FaceProps, face_section
from indexmesh.shapes import plane_quads
from indexmesh.triangulation import triangulate
from indexmesh.vertex import PositionVertex


P = PositionVertex


def _quad(x0=0.0):
    return (P((x0, 0, 0)), P((x0 + 1, 0, 0)), P((x0 + 1, 1, 0)), P((x0, 1, 0)))


class TestTriangulate:

    def test_single_quad(self):
        mesh = MeshGeometry()
        mesh.add_face4(*_quad())
        assert triangulate(mesh) == 1
        faces = mesh.section_faces(0)
        assert [f.vertices for f in faces] == [[0, 1, 2], [0, 2, 3]]
        assert mesh.vertex_count == 4
        assert mesh.validate() == []

    def test_triangles_untouched(self):
        mesh = MeshGeometry()
        mesh.add_face3(P((0, 0, 0)), P((1, 0, 0)), P((0, 1, 0)))
        mesh.add_face3(P((1, 0, 0)), P((1, 1, 0)), P((0, 1, 0)))
        before = [list(f.vertices) for f in mesh.section_faces(0)]
        assert triangulate(mesh) == 0
        assert [f.vertices for f in mesh.section_faces(0)] == before

    def test_mixed_section(self):
        mesh = MeshGeometry()
        mesh.add_face4(*_quad(0))
        mesh.add_face3(P((5, 0, 0)), P((6, 0, 0)), P((5, 1, 0)))
        mesh.add_face4(*_quad(2))
        assert triangulate(mesh) == 2
        faces = mesh.section_faces(0)
        assert len(faces) == 5
        assert all(not f.is_quad() for f in faces)
        assert mesh.validate() == []

    def test_grid_face_count(self):
        mesh = MeshGeometry()
        mesh.add_quads(plane_quads(3, 2))
        triangulate(mesh)
        assert mesh.face_count == 12
        assert mesh.vertex_count == 12
        assert mesh.validate() == []

    def test_each_quad_becomes_its_two_triangles(self):
        mesh = MeshGeometry()
        mesh.add_quads(plane_quads(2, 2))
        quads = {tuple(f.vertices) for f in mesh.section_faces(0)}
        triangulate(mesh)
        triangles = {tuple(f.vertices) for f in mesh.section_faces(0)}
        expected = set()
        for v0, v1, v2, v3 in quads:
            expected.add((v0, v1, v2))
            expected.add((v0, v2, v3))
        assert triangles == expected

    def test_props_carry_over(self):
        mesh = MeshGeometry()
        mesh.add_face4(*_quad(), FaceProps(normal=(0, 0, 1), data="tag", section=2))
        triangulate(mesh)
        faces = mesh.section_faces(2)
        assert len(faces) == 2
        for face in faces:
            assert face.normal == (0.0, 0.0, 1.0)
            assert face.data == "tag"

    def test_sections_stay_separate(self):
        mesh = MeshGeometry()
        mesh.add_face4(*_quad(), face_section(0))
        mesh.add_face4(*_quad(), face_section(1))
        mesh.triangulate()
        assert len(mesh.section_faces(0)) == 2
        assert len(mesh.section_faces(1)) == 2
        assert mesh.vertex_count == 4
        assert all(len(v.faces) in (2, 4) for v in mesh.vertices)
        assert mesh.validate() == []

    def test_idempotent(self):
        mesh = MeshGeometry()
        mesh.add_quads(plane_quads(2, 2))
        mesh.triangulate()
        assert mesh.triangulate() == 0
        assert mesh.face_count == 8

    def test_empty_mesh(self):
        assert triangulate(MeshGeometry()) == 0

    @pytest.mark.parametrize("cols,rows", [(1, 1), (4, 1), (3, 3)])
    def test_back_references_after_split(self, cols, rows):
        mesh = MeshGeometry()
        mesh.add_quads(plane_quads(cols, rows))
        mesh.triangulate()
        for idx, face in mesh.faces():
            for vid in face.vertices:
                assert mesh.vertex(vid).faces.count(idx) == 1
