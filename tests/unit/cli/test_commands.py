"""Tests for the lazy-radial command-line interface."""

import orjson
import pytest
from typer.testing import CliRunner

from lazy_radial.cli.main import app
from lazy_radial.core.generator import generate_multi_tree_dataset


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def dataset_file(tmp_path):
    path = tmp_path / "data.json"
    path.write_bytes(orjson.dumps(generate_multi_tree_dataset(trees=3, seed=1)))
    return path


class TestGenerateCommand:
    def test_writes_dataset(self, cli_runner, tmp_path):
        output = tmp_path / "out" / "forest.json"
        result = cli_runner.invoke(app, ["generate", str(output), "--trees", "4", "--seed", "3"])

        assert result.exit_code == 0, result.output
        data = orjson.loads(output.read_bytes())
        assert len(data["rootIds"]) == 4

    def test_invalid_bounds_fail(self, cli_runner, tmp_path):
        result = cli_runner.invoke(
            app,
            ["generate", str(tmp_path / "x.json"), "--min-children", "5", "--max-children", "2"],
        )
        assert result.exit_code == 1


class TestLayoutCommand:
    def test_layout_writes_output(self, cli_runner, dataset_file, tmp_path):
        output = tmp_path / "layout.json"
        result = cli_runner.invoke(
            app, ["layout", str(dataset_file), "-o", str(output), "--seed", "9"]
        )

        assert result.exit_code == 0, result.output
        payload = orjson.loads(output.read_bytes())
        assert set(payload) == {"nodes", "edges", "rootIds", "performanceMetrics"}
        assert "Initialization Metrics" in result.output

    def test_invalid_dataset_fails(self, cli_runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_bytes(orjson.dumps({"nodes": [{"id": "a"}, {"id": "a"}], "edges": []}))

        result = cli_runner.invoke(app, ["layout", str(path)])
        assert result.exit_code == 1
        assert "Duplicate" in result.output

    def test_malformed_json_fails(self, cli_runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        result = cli_runner.invoke(app, ["layout", str(path)])
        assert result.exit_code == 1


class TestInspectCommand:
    def test_prints_stats(self, cli_runner, dataset_file):
        result = cli_runner.invoke(app, ["inspect", str(dataset_file)])

        assert result.exit_code == 0, result.output
        assert "Dataset Statistics" in result.output
        assert "Roots" in result.output

    def test_subtree_preview(self, cli_runner, dataset_file):
        result = cli_runner.invoke(app, ["inspect", str(dataset_file), "--node", "tree0-root"])

        assert result.exit_code == 0, result.output
        assert "tree0-branch0" in result.output

    def test_unknown_node_fails(self, cli_runner, dataset_file):
        result = cli_runner.invoke(app, ["inspect", str(dataset_file), "--node", "ghost"])
        assert result.exit_code == 1


class TestExploreCommand:
    def test_expand_and_collapse(self, cli_runner, dataset_file):
        result = cli_runner.invoke(
            app,
            [
                "explore",
                str(dataset_file),
                "--expand",
                "tree0-root",
                "--expand",
                "tree0-branch0",
                "--collapse",
                "tree0-root",
                "--seed",
                "1",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Expanded tree0-root" in result.output
        assert "Collapsed tree0-root" in result.output
        assert "Visible Tree" in result.output

    def test_depth_option(self, cli_runner, dataset_file):
        result = cli_runner.invoke(app, ["explore", str(dataset_file), "--depth", "1"])

        assert result.exit_code == 0, result.output
        assert "tree0-branch1" in result.output


class TestGlobalOptions:
    def test_version(self, cli_runner):
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "lazy-radial version" in result.output
