"""
Tests for connection resolution across modes.
"""

import pytest

from productsvc.config.environment import ENVIRONMENT_VARIABLE
from productsvc.config.service import ConfigurationService
from productsvc.connections.resolver import (
    DEVELOPER_CONNECTION_STRING,
    MIGRATIONS_OWNER,
    ConnectionResolver,
    ResolutionMode,
)
from productsvc.exceptions import (
    ConfigurationError,
    ConnectionStringNotFoundError,
    EnvironmentArgumentError,
)


@pytest.fixture
def app_dir(tmp_path):
    """Application directory with a base and a Development config."""
    directory = tmp_path / "app"
    directory.mkdir()
    (directory / "config.yaml").write_text("connection_strings:\n  products: Server=A;Database=Prod\n")
    (directory / "config.Development.yaml").write_text("connection_strings:\n  products: Server=B;Database=Dev\n")
    return directory


@pytest.fixture
def empty_app_dir(tmp_path):
    directory = tmp_path / "empty"
    directory.mkdir()
    (directory / "config.yaml").write_text("logging:\n  level: INFO\n")
    return directory


class TestRuntimeMode:
    def test_unset_environment_uses_base_value(self, app_dir):
        """Variable unset -> Production -> base file value, not the Development override."""
        resolver = ConnectionResolver(ConfigurationService(environ={}), app_dir=app_dir, environ={})
        descriptor = resolver.resolve("products")

        assert descriptor.environment == "Production"
        assert descriptor.connection_string == "Server=A;Database=Prod"
        assert descriptor.mode is ResolutionMode.RUNTIME

    def test_environment_from_variable(self, app_dir):
        environ = {ENVIRONMENT_VARIABLE: "Development"}
        resolver = ConnectionResolver(ConfigurationService(environ), app_dir=app_dir, environ=environ)
        assert resolver.resolve().connection_string == "Server=B;Database=Dev"

    def test_passed_down_environment_wins_over_variable(self, app_dir):
        environ = {ENVIRONMENT_VARIABLE: "Production"}
        resolver = ConnectionResolver(
            ConfigurationService(environ), environment="Development", app_dir=app_dir, environ=environ
        )
        assert resolver.resolve().connection_string == "Server=B;Database=Dev"

    def test_variable_override_wins(self, app_dir):
        environ = {"CONNECTION_STRINGS__PRODUCTS": "Server=C"}
        resolver = ConnectionResolver(ConfigurationService(environ), app_dir=app_dir, environ=environ)
        assert resolver.resolve().connection_string == "Server=C"

    def test_variable_overrides_mixed_case_context(self, tmp_path):
        (tmp_path / "config.yaml").write_text("connection_strings:\n  ProductsDbContext: Server=A\n")
        environ = {"CONNECTION_STRINGS__PRODUCTSDBCONTEXT": "Server=C"}
        resolver = ConnectionResolver(ConfigurationService(environ), app_dir=tmp_path, environ=environ)
        assert resolver.resolve("ProductsDbContext").connection_string == "Server=C"

    def test_missing_connection_string_fails_fast(self, empty_app_dir):
        resolver = ConnectionResolver(ConfigurationService(environ={}), app_dir=empty_app_dir, environ={})
        with pytest.raises(ConnectionStringNotFoundError) as exc_info:
            resolver.resolve("products")
        assert exc_info.value.context_name == "products"
        assert DEVELOPER_CONNECTION_STRING not in str(exc_info.value)

    def test_missing_base_config_fails(self, tmp_path):
        resolver = ConnectionResolver(ConfigurationService(environ={}), app_dir=tmp_path, environ={})
        with pytest.raises(ConfigurationError, match="config.yaml"):
            resolver.resolve()


class TestDesignModes:
    def test_runtime_wiring_uses_design_app_dir(self, app_dir, empty_app_dir):
        resolver = ConnectionResolver(
            ConfigurationService(environ={}),
            mode=ResolutionMode.DESIGN_RUNTIME_WIRING,
            environment="Development",
            app_dir=empty_app_dir,
            design_app_dir=app_dir,
            environ={},
        )
        assert resolver.resolve().connection_string == "Server=B;Database=Dev"

    def test_runtime_wiring_uses_injected_service(self, app_dir):
        class RecordingService(ConfigurationService):
            calls = []

            def build(self, base_dir, environment):
                self.calls.append((base_dir, environment))
                return super().build(base_dir, environment)

        service = RecordingService(environ={})
        resolver = ConnectionResolver(
            service, mode=ResolutionMode.DESIGN_RUNTIME_WIRING, design_app_dir=app_dir, environ={}
        )
        resolver.resolve()
        assert service.calls == [(app_dir, "Production")]

    def test_environment_mode_rereads_variable(self, app_dir):
        environ = {ENVIRONMENT_VARIABLE: "Development"}
        resolver = ConnectionResolver(
            ConfigurationService(environ={}),
            mode=ResolutionMode.DESIGN_ENVIRONMENT,
            environment="Production",
            design_app_dir=app_dir,
            environ=environ,
        )
        descriptor = resolver.resolve()
        assert descriptor.environment == "Development"
        assert descriptor.connection_string == "Server=B;Database=Dev"

    def test_environment_mode_default_is_production(self, app_dir):
        resolver = ConnectionResolver(
            ConfigurationService(environ={}), mode=ResolutionMode.DESIGN_ENVIRONMENT, design_app_dir=app_dir, environ={}
        )
        assert resolver.resolve().connection_string == "Server=A;Database=Prod"

    def test_environment_mode_missing_key_fails(self, empty_app_dir):
        resolver = ConnectionResolver(
            ConfigurationService(environ={}),
            mode=ResolutionMode.DESIGN_ENVIRONMENT,
            design_app_dir=empty_app_dir,
            environ={},
        )
        with pytest.raises(ConnectionStringNotFoundError):
            resolver.resolve()

    def test_argument_mode(self, app_dir):
        resolver = ConnectionResolver(
            ConfigurationService(environ={}),
            mode=ResolutionMode.DESIGN_ARGUMENT,
            design_app_dir=app_dir,
            args=["--environment", "Development"],
            environ={ENVIRONMENT_VARIABLE: "Production"},
        )
        descriptor = resolver.resolve()
        assert descriptor.environment == "Development"
        assert descriptor.connection_string == "Server=B;Database=Dev"

    def test_argument_mode_flag_without_value_fails(self, app_dir):
        resolver = ConnectionResolver(
            ConfigurationService(environ={}),
            mode=ResolutionMode.DESIGN_ARGUMENT,
            design_app_dir=app_dir,
            args=["--environment"],
            environ={},
        )
        with pytest.raises(EnvironmentArgumentError):
            resolver.resolve()

    def test_argument_mode_absent_flag_does_not_default(self, app_dir):
        resolver = ConnectionResolver(
            ConfigurationService(environ={}),
            mode=ResolutionMode.DESIGN_ARGUMENT,
            design_app_dir=app_dir,
            args=[],
            environ={ENVIRONMENT_VARIABLE: "Development"},
        )
        with pytest.raises(EnvironmentArgumentError):
            resolver.resolve()

    def test_default_design_app_dir_is_sibling(self, tmp_path, monkeypatch, app_dir):
        tools_dir = tmp_path / "tools"
        tools_dir.mkdir()
        monkeypatch.chdir(tools_dir)
        resolver = ConnectionResolver(
            ConfigurationService(environ={}), mode=ResolutionMode.DESIGN_ENVIRONMENT, environ={}
        )
        assert resolver.resolve().connection_string == "Server=A;Database=Prod"


class TestDeveloperFallback:
    def test_requires_opt_in(self):
        resolver = ConnectionResolver(
            ConfigurationService(environ={}), mode=ResolutionMode.DEVELOPER_FALLBACK, environ={}
        )
        with pytest.raises(ConfigurationError, match="disabled"):
            resolver.resolve()

    def test_ignores_configuration(self, tmp_path):
        resolver = ConnectionResolver(
            ConfigurationService(environ={}),
            mode=ResolutionMode.DEVELOPER_FALLBACK,
            app_dir=tmp_path,
            design_app_dir=tmp_path,
            environ={},
            allow_developer_fallback=True,
        )
        descriptor = resolver.resolve()
        assert descriptor.connection_string == DEVELOPER_CONNECTION_STRING
        assert descriptor.environment is None


class TestMigrationsOwner:
    @pytest.mark.parametrize(
        "mode,kwargs",
        [
            (ResolutionMode.RUNTIME, {}),
            (ResolutionMode.DESIGN_RUNTIME_WIRING, {}),
            (ResolutionMode.DESIGN_ENVIRONMENT, {}),
            (ResolutionMode.DESIGN_ARGUMENT, {"args": ["--environment", "Development"]}),
            (ResolutionMode.DEVELOPER_FALLBACK, {"allow_developer_fallback": True}),
        ],
    )
    def test_every_mode_stamps_same_owner(self, app_dir, mode, kwargs):
        resolver = ConnectionResolver(
            ConfigurationService(environ={}),
            mode=mode,
            app_dir=app_dir,
            design_app_dir=app_dir,
            environ={},
            **kwargs,
        )
        descriptor = resolver.resolve()
        assert descriptor.migrations_owner == MIGRATIONS_OWNER
        assert descriptor.mode is mode

    def test_custom_owner(self, app_dir):
        resolver = ConnectionResolver(
            ConfigurationService(environ={}), app_dir=app_dir, environ={}, migrations_owner="acme.schema"
        )
        assert resolver.resolve().migrations_owner == "acme.schema"

    def test_mode_accepts_string_value(self, app_dir):
        resolver = ConnectionResolver(
            ConfigurationService(environ={}), mode="design-environment", design_app_dir=app_dir, environ={}
        )
        assert resolver.mode is ResolutionMode.DESIGN_ENVIRONMENT


class TestPrebuiltConfiguration:
    def test_runtime_reuses_given_config(self, app_dir):
        service = ConfigurationService(environ={})
        config = service.build(app_dir, "Development")
        resolver = ConnectionResolver(service, app_dir=app_dir / "missing", environ={})
        assert resolver.resolve(config=config).connection_string == "Server=B;Database=Dev"

    def test_rebuilding_modes_reject_given_config(self, app_dir):
        service = ConfigurationService(environ={})
        config = service.build(app_dir, "Production")
        resolver = ConnectionResolver(
            service, mode=ResolutionMode.DESIGN_ENVIRONMENT, design_app_dir=app_dir, environ={}
        )
        with pytest.raises(ValueError, match="builds its own configuration"):
            resolver.resolve(config=config)
