"""Unit tests for config command.

Tests for the CLI config subcommands.
"""

from pathlib import Path

from reclaim.cli.main import app
from reclaim.core.config import load_config
from typer.testing import CliRunner

runner = CliRunner()


def _config_path(isolated_xdg: Path) -> Path:
    return isolated_xdg / "config" / "reclaim" / "config.toml"


class TestConfigCommand:
    """Tests for the config subcommands."""

    def test_path(self, isolated_xdg: Path) -> None:
        """config path prints the config location."""
        result = runner.invoke(app, ["config", "path"])

        assert result.exit_code == 0
        assert result.output.strip() == str(_config_path(isolated_xdg))

    def test_show_defaults(self) -> None:
        """config show prints the defaults when no file exists."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "defaults (no config file)" in result.output
        assert "project_age_days = 14" in result.output

    def test_init_writes_file(self, isolated_xdg: Path) -> None:
        """config init writes a loadable default config."""
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0
        assert load_config(_config_path(isolated_xdg), missing_ok=False).history.max_sessions == 50

    def test_init_refuses_overwrite(self, isolated_xdg: Path) -> None:
        """config init keeps an existing file unless --force is given."""
        path = _config_path(isolated_xdg)
        path.parent.mkdir(parents=True)
        path.write_text("[thresholds]\nmin_age_days = 9\n")

        refused = runner.invoke(app, ["config", "init"])
        assert refused.exit_code == 1
        assert "already exists" in refused.output
        assert "min_age_days = 9" in path.read_text()

        forced = runner.invoke(app, ["config", "init", "--force"])
        assert forced.exit_code == 0
        assert load_config(path).thresholds.min_age_days == 1

    def test_show_invalid(self, isolated_xdg: Path) -> None:
        """config show exits with code 1 for an invalid file."""
        path = _config_path(isolated_xdg)
        path.parent.mkdir(parents=True)
        path.write_text("[nope]\n")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 1
        assert "Invalid config content" in result.output
