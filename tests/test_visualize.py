"""Tests for the visualize module (rendering to PNG)."""

import tempfile
from pathlib import Path

import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from indexmesh.mesh import MeshGeometry  # noqa: E402
from indexmesh.models import face_section  # noqa: E402
from indexmesh.shapes import box_quads, plane_quads  # noqa: E402
from indexmesh.visualize import plot_mesh  # noqa: E402


@pytest.fixture
def tmp_dir():
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


@pytest.fixture
def box_mesh():
    mesh = MeshGeometry()
    for side, quad in box_quads():
        mesh.add_face4(*quad, face_section(side))
    return mesh


class TestPlotMesh:
    def test_renders_box(self, box_mesh, tmp_dir):
        fig = plot_mesh(box_mesh, title="Box")
        out = tmp_dir / "box.png"
        fig.savefig(out)
        plt.close(fig)
        assert out.exists()
        assert out.stat().st_size > 0

    def test_renders_normals(self, box_mesh, tmp_dir):
        fig = plot_mesh(box_mesh, show_normals=True)
        out = tmp_dir / "box_normals.png"
        fig.savefig(out)
        plt.close(fig)
        assert out.stat().st_size > 0

    def test_does_not_modify_mesh(self, box_mesh):
        fig = plot_mesh(box_mesh, show_normals=True)
        plt.close(fig)
        assert all(face.normal is None for _, face in box_mesh.faces())
        assert all(face.is_quad() for _, face in box_mesh.faces())

    def test_one_collection_per_section(self, box_mesh):
        fig = plot_mesh(box_mesh)
        ax = fig.axes[0]
        assert len(ax.collections) == 6
        plt.close(fig)

    def test_flat_plane(self):
        mesh = MeshGeometry()
        mesh.add_quads(plane_quads(2, 2))
        fig = plot_mesh(mesh, show_normals=True, normal_length=0.2)
        plt.close(fig)

    def test_empty_mesh(self):
        fig = plot_mesh(MeshGeometry())
        assert len(fig.axes) == 1
        plt.close(fig)
