"""Tests for CLI commands."""

from click.testing import CliRunner
import pytest

from disjoint_sets.cli import main


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


def test_main_help(runner):
    """Test main help command."""
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Disjoint-Set Grouping Tool" in result.output


def test_version(runner):
    """Test version command."""
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_group_help(runner):
    """Test group help command."""
    result = runner.invoke(main, ["group", "--help"])
    assert result.exit_code == 0
    assert "Merge keyed items into equivalence classes" in result.output
