"""Unit tests for settings loading."""

import pytest

from core.config import ConfigError, DatabaseSettings, load_server_settings, load_settings

DB_ENV = {
    "DB_HOST": "db.internal",
    "DB_PORT": "5433",
    "DB_USER": "app",
    "DB_PASSWORD": "secret",
    "DB_NAME": "products",
}

OPTIONAL_VARS = (
    "DB_SSLMODE",
    "DB_CONNECT_TIMEOUT_S",
    "DB_COMMAND_TIMEOUT_S",
    "DB_VERIFY_ON_STARTUP",
    "LOG_LEVEL",
    "APP_HOST",
    "APP_PORT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in (*DB_ENV, *OPTIONAL_VARS):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def db_env(clean_env):
    for name, value in DB_ENV.items():
        clean_env.setenv(name, value)
    return clean_env


class TestLoadSettings:
    def test_reads_database_descriptor(self, db_env):
        settings = load_settings(env_file=None)

        assert settings.database == DatabaseSettings(
            host="db.internal",
            port=5433,
            user="app",
            password="secret",
            name="products",
        )
        assert settings.database.sslmode == "disable"
        assert settings.verify_on_startup is True
        assert settings.log_level == "INFO"

    def test_missing_values_are_fatal_and_listed(self, clean_env):
        clean_env.setenv("DB_HOST", "db.internal")
        clean_env.setenv("DB_NAME", "   ")

        with pytest.raises(ConfigError) as exc_info:
            load_settings(env_file=None)

        message = str(exc_info.value)
        for name in ("DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME"):
            assert name in message
        assert "DB_HOST" not in message

    @pytest.mark.parametrize("port", ["abc", "0", "70000"])
    def test_bad_port_is_fatal(self, db_env, port):
        db_env.setenv("DB_PORT", port)

        with pytest.raises(ConfigError):
            load_settings(env_file=None)

    def test_optional_overrides(self, db_env):
        db_env.setenv("DB_SSLMODE", "require")
        db_env.setenv("DB_CONNECT_TIMEOUT_S", "2.5")
        db_env.setenv("DB_COMMAND_TIMEOUT_S", "5")
        db_env.setenv("DB_VERIFY_ON_STARTUP", "false")
        db_env.setenv("LOG_LEVEL", "debug")

        settings = load_settings(env_file=None)

        assert settings.database.sslmode == "require"
        assert settings.database.connect_timeout_s == 2.5
        assert settings.database.command_timeout_s == 5.0
        assert settings.verify_on_startup is False
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("name, value", [("DB_COMMAND_TIMEOUT_S", "soon"), ("DB_VERIFY_ON_STARTUP", "maybe")])
    def test_bad_optional_values_are_fatal(self, db_env, name, value):
        db_env.setenv(name, value)

        with pytest.raises(ConfigError):
            load_settings(env_file=None)

    def test_env_file_fills_gaps(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("".join(f"{k}={v}\n" for k, v in DB_ENV.items()))
        clean_env.setenv("DB_HOST", "from-environment")

        settings = load_settings(env_file=env_file)

        assert settings.database.host == "from-environment"
        assert settings.database.port == 5433
        assert settings.database.name == "products"

    def test_missing_env_file_is_fine(self, db_env, tmp_path):
        settings = load_settings(env_file=tmp_path / "absent.env")

        assert settings.database.host == "db.internal"

    def test_password_is_not_in_repr(self, db_env):
        assert "secret" not in repr(load_settings(env_file=None))


class TestServerSettings:
    def test_defaults(self, clean_env):
        server = load_server_settings(env_file=None)

        assert (server.host, server.port) == ("0.0.0.0", 8080)

    def test_overrides(self, clean_env):
        clean_env.setenv("APP_HOST", "127.0.0.1")
        clean_env.setenv("APP_PORT", "9000")

        server = load_server_settings(env_file=None)

        assert (server.host, server.port) == ("127.0.0.1", 9000)
