"""
Unit tests for the 'validate' command.
"""

import json

from click.testing import CliRunner

from fmviz.cli.commands.validate import validate
from fmviz.cli.main import main


class TestValidateCommand:
    def test_valid(self, model_file):
        runner = CliRunner()
        result = runner.invoke(validate, [str(model_file)])

        assert result.exit_code == 0
        assert "Valid model: 6 features, 2 constraints" in result.output

    def test_schema_errors(self, tmp_path):
        f = tmp_path / "model.json"
        f.write_text(json.dumps({"features": [{"id": "a"}, {"id": "a"}]}))
        runner = CliRunner()

        result = runner.invoke(validate, [str(f)])

        assert result.exit_code == 1
        assert "Duplicate feature id 'a'" in result.output

    def test_warnings(self, tmp_path):
        f = tmp_path / "model.json"
        f.write_text(json.dumps({"features": [{"id": "a"}, {"id": "b", "parent": "ghost"}]}))
        runner = CliRunner()

        result = runner.invoke(validate, [str(f)])
        assert result.exit_code == 0
        assert "references unknown parent 'ghost'" in result.output

        strict = runner.invoke(validate, [str(f), "--strict"])
        assert strict.exit_code == 1
        assert "1 warning(s) in strict mode" in strict.output

    def test_registered_on_main(self, model_file):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(model_file)])
        assert result.exit_code == 0
