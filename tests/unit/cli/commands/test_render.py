"""
Unit tests for the 'render' command.
"""

import json
from unittest.mock import patch

from click.testing import CliRunner

from fmviz.cli.commands.render import render


class TestRenderCommand:
    def test_writes_svg(self, model_file, tmp_path):
        runner = CliRunner()
        out = tmp_path / "diagram.svg"

        result = runner.invoke(render, [str(model_file), "-o", str(out), "--query", "electric"])

        assert result.exit_code == 0
        assert "Generated:" in result.output
        assert "6 features, 2 constraints drawn" in result.output
        assert "1 feature(s) matched 'electric'" in result.output
        svg = out.read_text()
        assert svg.startswith("<svg")
        assert 'data-id="electric"' in svg

    def test_json_output(self, model_file):
        runner = CliRunner()
        result = runner.invoke(render, [str(model_file), "--json", "--width", "800", "--height", "600"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["meta"]["status"] == "success"
        assert data["data"]["viewport"]["width"] == 800
        assert len(data["data"]["nodes"]) == 6

    def test_highlight_option(self, model_file):
        runner = CliRunner()
        result = runner.invoke(render, [str(model_file), "--json", "--highlight", "gps"])

        nodes = {n["id"]: n["emphasis"] for n in json.loads(result.output)["data"]["nodes"]}
        assert nodes["gps"] == "match"
        assert nodes["car"] == "related"
        assert nodes["engine"] == "none"

    def test_width_without_height(self, model_file, tmp_path):
        runner = CliRunner()
        result = runner.invoke(render, [str(model_file), "-o", str(tmp_path / "x.svg"), "--width", "800"])

        assert result.exit_code == 1
        assert "--width and --height must be given together" in result.output

    def test_missing_model(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(render, [str(tmp_path / "missing.json"), "--json"])

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["meta"]["status"] == "error"
        assert "file not found" in data["error"]["message"]

    def test_bad_settings(self, model_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("spacing_x: -5\n")
        runner = CliRunner()

        result = runner.invoke(render, [str(model_file), "-c", str(config), "-o", str(tmp_path / "x.svg")])

        assert result.exit_code == 1
        assert not (tmp_path / "x.svg").exists()

    @patch("fmviz.cli.commands.render.FeatureModelEngine")
    def test_settings_reach_engine(self, mock_engine_cls, model_file, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("engine:\n  spacing_x: 100\n")
        mock_engine_cls.return_value.render.side_effect = RuntimeError("stop")
        runner = CliRunner()

        runner.invoke(render, [str(model_file), "-c", str(config)])

        settings = mock_engine_cls.call_args[0][0]
        assert settings.spacing_x == 100
