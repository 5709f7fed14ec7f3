"""Tests for group command."""

import json

from click.testing import CliRunner
import pandas as pd
import pytest

from disjoint_sets.commands.group import group


class TestGroupCommand:
    """Tests for group command."""

    @pytest.fixture(autouse=True)
    def isolated_config(self, tmp_path, monkeypatch):
        """Keep user and working-directory config files out of the tests."""
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        monkeypatch.chdir(tmp_path)

    @pytest.fixture
    def runner(self):
        """Create CLI runner."""
        return CliRunner()

    @pytest.fixture
    def pairs_csv(self, tmp_path):
        """Create pairs CSV file."""
        csv_file = tmp_path / "pairs.csv"
        pd.DataFrame({"key_1": ["a", "b", "d"], "key_2": ["b", "c", "e"]}).to_csv(
            csv_file, index=False
        )
        return csv_file

    @pytest.fixture
    def items_csv(self, tmp_path):
        """Create items CSV file."""
        csv_file = tmp_path / "items.csv"
        pd.DataFrame(
            {"key": ["a", "b", "c", "d", "e", "f"], "value": [1, 2, 3, 4, 5, 6]}
        ).to_csv(csv_file, index=False)
        return csv_file

    def test_group_pairs_only(self, runner, pairs_csv):
        """Test grouping keys taken from the pairs file."""
        result = runner.invoke(group, [str(pairs_csv)])

        assert result.exit_code == 0
        assert "Grouping pairs from" in result.output
        assert "Classes" in result.output
        assert "classes: 2" in result.output
        assert "Grouping complete!" in result.output

    def test_group_with_items_and_output(self, runner, pairs_csv, items_csv, tmp_path):
        """Test grouping items and saving classes to CSV."""
        output = tmp_path / "out" / "classes.csv"
        result = runner.invoke(
            group, [str(pairs_csv), "--items", str(items_csv), "-o", str(output)]
        )

        assert result.exit_code == 0
        assert "Saved classes to" in result.output

        df = pd.read_csv(output)
        assert df["class_id"].tolist() == [0, 3, 5]
        assert df["value"].tolist() == [6, 9, 6]
        assert df["size"].tolist() == [3, 2, 1]
        assert df["members"].tolist() == ["a;b;c", "d;e", "f"]

    def test_group_with_combiner(self, runner, pairs_csv, items_csv, tmp_path):
        """Test choosing the combine function."""
        output = tmp_path / "classes.csv"
        result = runner.invoke(
            group,
            [str(pairs_csv), "-i", str(items_csv), "-c", "max", "-o", str(output)],
        )

        assert result.exit_code == 0
        assert pd.read_csv(output)["value"].tolist() == [3, 5, 6]

    def test_group_with_config(self, runner, tmp_path):
        """Test column names taken from a config file."""
        pairs_file = tmp_path / "edges.csv"
        pd.DataFrame({"src": ["x"], "dst": ["y"]}).to_csv(pairs_file, index=False)
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps({"grouping": {"left_column": "src", "right_column": "dst"}})
        )

        result = runner.invoke(group, [str(pairs_file), "--config", str(config_file)])

        assert result.exit_code == 0
        assert "classes: 1" in result.output

    def test_group_uses_working_directory_config(self, runner, pairs_csv, items_csv, tmp_path):
        """Test disjoint-sets.json in the working directory is loaded."""
        (tmp_path / "disjoint-sets.json").write_text(json.dumps({"grouping": {"combine": "max"}}))
        output = tmp_path / "classes.csv"

        result = runner.invoke(group, [str(pairs_csv), "-i", str(items_csv), "-o", str(output)])

        assert result.exit_code == 0
        assert pd.read_csv(output)["value"].tolist() == [3, 5, 6]

    def test_group_strict_failure(self, runner, pairs_csv, items_csv):
        """Test a failing combine aborts the command."""
        result = runner.invoke(
            group, [str(pairs_csv), "-i", str(items_csv), "-c", "equal", "--strict"]
        )

        assert result.exit_code != 0
        assert "different values" in result.output

    def test_group_missing_columns(self, runner, tmp_path):
        """Test a pairs file without key columns aborts the command."""
        pairs_file = tmp_path / "bad.csv"
        pd.DataFrame({"x": [1]}).to_csv(pairs_file, index=False)

        result = runner.invoke(group, [str(pairs_file)])

        assert result.exit_code != 0
        assert "Missing required columns" in result.output

    def test_group_invalid_combiner(self, runner, pairs_csv):
        """Test unknown combine names are rejected by click."""
        result = runner.invoke(group, [str(pairs_csv), "-c", "avg"])
        assert result.exit_code != 0

    def test_group_nonexistent_file(self, runner):
        """Test with nonexistent file."""
        result = runner.invoke(group, ["nonexistent.csv"])
        assert result.exit_code != 0
