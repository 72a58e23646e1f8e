"""Tests for faces, section indices and per-face props."""

import numpy as np
import pytest

from indexmesh.models import (
    Face,
    FaceProps,
    InvalidFaceError,
    MeshVertex,
    SectionIndex,
    face_data,
    face_normal,
    face_section,
)
from indexmesh.vertex import ColorVertex, PositionVertex


class TestSectionIndex:

    def test_coerce_int_is_section_zero(self):
        assert SectionIndex.coerce(5) == SectionIndex(0, 5)

    def test_coerce_pair(self):
        assert SectionIndex.coerce((2, 3)) == SectionIndex(2, 3)

    def test_coerce_numpy_integers(self):
        assert SectionIndex.coerce(np.int64(4)) == SectionIndex(0, 4)
        assert SectionIndex.coerce((np.int32(1), np.uint8(2))) == SectionIndex(1, 2)

    def test_coerce_rejects_floats(self):
        with pytest.raises(TypeError):
            SectionIndex.coerce(1.0)

    def test_coerce_passthrough(self):
        idx = SectionIndex(1, 1)
        assert SectionIndex.coerce(idx) is idx

    def test_hashable_and_ordered(self):
        assert len({SectionIndex(0, 1), SectionIndex(0, 1)}) == 1
        assert SectionIndex(0, 9) < SectionIndex(1, 0)


class TestFace:

    def test_triangle(self):
        face = Face.triangle(0, 1, 2)
        assert face.vertices == [0, 1, 2]
        assert face.vertex_count() == 3
        assert not face.is_quad()

    def test_quad_with_normal(self):
        face = Face.quad(0, 1, 2, 3, normal=[0, 0, 1])
        assert face.is_quad()
        assert face.normal == (0.0, 0.0, 1.0)

    def test_repeated_ids_rejected(self):
        with pytest.raises(InvalidFaceError, match="3 unique"):
            Face.triangle(0, 0, 1)
        with pytest.raises(InvalidFaceError, match="4 unique"):
            Face.quad(0, 1, 2, 1)

    def test_invalid_face_is_value_error(self):
        with pytest.raises(ValueError):
            Face.triangle(1, 1, 1)

    def test_validate_polygon(self):
        assert Face([0, 1, 2]).validate_polygon() == []
        errors = Face([0, 1]).validate_polygon()
        assert any("expected 3 or 4" in e for e in errors)
        assert Face([0, 1, 1]).validate_polygon()


class TestMeshVertex:

    def test_section_faces(self):
        vertex = MeshVertex(PositionVertex((0, 0, 0)))
        vertex.faces.extend([SectionIndex(0, 2), SectionIndex(1, 0), SectionIndex(0, 5)])
        assert vertex.section_faces(0) == [2, 5]
        assert vertex.section_faces(1) == [0]
        assert vertex.section_faces(7) == []

    def test_position(self):
        assert MeshVertex(PositionVertex((1, 2, 3))).position() == (1.0, 2.0, 3.0)


class TestFaceProps:

    def test_defaults(self):
        props = FaceProps()
        assert props.normal is None
        assert props.data is None
        assert props.section == 0

    def test_helpers(self):
        assert face_normal((0, 1, 0)).normal == (0.0, 1.0, 0.0)
        assert face_section(3).section == 3
        data = ColorVertex(color=(1, 0, 0, 1))
        assert face_data(data).data is data

    def test_chaining_returns_new_props(self):
        base = face_section(2)
        props = base.with_normal((0, 0, 1)).with_data("d")
        assert props == FaceProps(normal=(0.0, 0.0, 1.0), data="d", section=2)
        assert base.normal is None
        assert base.with_section(4).section == 4
