"""
Tests for the CLI commands.

Uses typer's CliRunner to test CLI commands without starting the service.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from productsvc.cli.main import app
from productsvc.config.environment import ENVIRONMENT_VARIABLE

runner = CliRunner()


@pytest.fixture
def app_dir(tmp_path: Path) -> Path:
    """Application directory with per-environment databases under tmp_path."""
    directory = tmp_path / "app"
    directory.mkdir()
    (directory / "config.yaml").write_text(
        f"connection_strings:\n  products: duckdb://{tmp_path}/data/products.duckdb\n"
    )
    (directory / "config.Development.yaml").write_text(
        f"connection_strings:\n  products: duckdb://{tmp_path}/data/products_{{env}}.duckdb\n"
    )
    return directory


class TestVersion:
    """Tests for --version flag."""

    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "productsvc version" in result.output

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "productsvc version" in result.output


class TestHelp:
    """Tests for help output."""

    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "productsvc" in result.output.lower()

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "migrate" in result.output.lower()

    def test_serve_help(self):
        result = runner.invoke(app, ["serve", "--help"])
        assert result.exit_code == 0
        assert "--app-dir" in result.output

    def test_migrate_help(self):
        result = runner.invoke(app, ["migrate", "--help"])
        assert result.exit_code == 0
        assert "--mode" in result.output


class TestMigrate:
    """Tests for the migrate command."""

    def test_apply_with_environment_variable(self, app_dir, tmp_path):
        result = runner.invoke(
            app, ["migrate", "--app-dir", str(app_dir)], env={ENVIRONMENT_VARIABLE: "Development"}
        )
        assert result.exit_code == 0, result.output
        assert "Executed 1 migration(s)" in result.output
        assert (tmp_path / "data" / "products_Development.duckdb").exists()

    def test_second_run_has_nothing_to_do(self, app_dir):
        env = {ENVIRONMENT_VARIABLE: "Production"}
        runner.invoke(app, ["migrate", "--app-dir", str(app_dir)], env=env)
        result = runner.invoke(app, ["migrate", "--app-dir", str(app_dir)], env=env)
        assert result.exit_code == 0
        assert "No migrations to run" in result.output

    def test_environment_argument(self, app_dir, tmp_path):
        result = runner.invoke(
            app,
            ["migrate", "--mode", "design-argument", "--app-dir", str(app_dir), "--environment", "Development"],
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "data" / "products_Development.duckdb").exists()
        assert not (tmp_path / "data" / "products.duckdb").exists()

    def test_environment_argument_missing_fails(self, app_dir, tmp_path):
        result = runner.invoke(app, ["migrate", "--mode", "design-argument", "--app-dir", str(app_dir)])
        assert result.exit_code == 1
        assert not (tmp_path / "data").exists()

    def test_environment_argument_without_value_fails(self, app_dir):
        result = runner.invoke(
            app, ["migrate", "--mode", "design-argument", "--app-dir", str(app_dir), "--environment"]
        )
        assert result.exit_code == 1

    def test_list(self, app_dir):
        result = runner.invoke(
            app, ["migrate", "--app-dir", str(app_dir), "--list"], env={ENVIRONMENT_VARIABLE: "Production"}
        )
        assert result.exit_code == 0
        assert "0001_initialize_db (pending)" in result.output

    def test_dry_run(self, app_dir, tmp_path):
        result = runner.invoke(
            app, ["migrate", "--app-dir", str(app_dir), "--dry-run"], env={ENVIRONMENT_VARIABLE: "Production"}
        )
        assert result.exit_code == 0
        assert "[DRY RUN]" in result.output

    def test_missing_config_fails(self, tmp_path):
        result = runner.invoke(app, ["migrate", "--app-dir", str(tmp_path)])
        assert result.exit_code == 1

    def test_developer_fallback_requires_flag(self, tmp_path):
        result = runner.invoke(app, ["migrate", "--mode", "developer-fallback", "--app-dir", str(tmp_path)])
        assert result.exit_code == 1


class TestConfigCommand:
    """Tests for the config command."""

    def test_lists_environments(self, app_dir):
        result = runner.invoke(app, ["config", "--app-dir", str(app_dir)])
        assert result.exit_code == 0
        assert "Development" in result.output

    def test_show_environment_file(self, app_dir):
        result = runner.invoke(app, ["config", "--app-dir", str(app_dir), "--env", "Development"])
        assert result.exit_code == 0
        assert "config.Development.yaml" in result.output

    def test_unknown_environment_fails(self, app_dir):
        result = runner.invoke(app, ["config", "--app-dir", str(app_dir), "--env", "Staging"])
        assert result.exit_code == 1

    def test_missing_base_config_fails(self, tmp_path):
        result = runner.invoke(app, ["config", "--app-dir", str(tmp_path)])
        assert result.exit_code == 1


class TestServe:
    def test_missing_config_fails_before_binding(self, tmp_path):
        result = runner.invoke(app, ["serve", "--app-dir", str(tmp_path)])
        assert result.exit_code == 1
