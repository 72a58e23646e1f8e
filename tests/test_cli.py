"""Tests for the indexmesh command-line interface."""

import json

import pytest

from indexmesh.cli import build_parser, main


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["plane"])
        assert args.cols == 4
        assert args.rows == 4
        assert args.mode == "vertex_normals"
        assert args.winding == "ccw"

    def test_unknown_mode(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["box", "--mode", "smooth"])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    def test_plane_text(self, capsys):
        main(["plane", "--cols", "2", "--rows", "1", "--mode", "no_normals"])
        out = capsys.readouterr().out
        assert "6 vertices, 2 faces, 1 sections" in out
        assert "draw count 12" in out
        assert "position: 3 x FLOAT @ 0" in out

    def test_plane_json(self, capsys):
        main(["plane", "--cols", "1", "--rows", "1", "--winding", "cw", "--json"])
        payload = json.loads(capsys.readouterr().out)
        assert payload["mode"] == "vertex_normals"
        assert payload["mesh"]["vertex_count"] == 4
        assert payload["geometry"]["vertex_size"] == 24
        assert payload["geometry"]["vertex_count"] == 6

    def test_box_hard_edges_json(self, capsys):
        main(["box", "--size", "2", "1", "1", "--hard-edges", "--json"])
        payload = json.loads(capsys.readouterr().out)
        assert len(payload["mesh"]["sections"]) == 6
        assert payload["geometry"]["buffer_bytes"] == 24 * 24
        assert payload["geometry"]["index_bytes"] == 36 * 4

    def test_box_face_normals(self, capsys):
        main(["box", "--mode", "face_normals"])
        out = capsys.readouterr().out
        assert "8 vertices, 6 faces, 1 sections" in out
        assert "draw count 36" in out
        assert "normal: 3 x FLOAT @ 12" in out

    def test_verbose_logging(self, capsys):
        main(["-v", "box", "--json"])
        assert json.loads(capsys.readouterr().out)["mesh"]["face_count"] == 6
