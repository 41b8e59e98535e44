"""Tests for server configuration.

These tests cover:
1. Default values
2. Environment variable loading
3. Validation rules
4. The configuration singleton
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from library_mcp.config import ServerConfig, get_config, reset_config


class TestServerConfig:
    """Test server configuration behavior."""

    def test_default_configuration(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LIBRARY_DATABASE_PATH")
        monkeypatch.delenv("LIBRARY_OBSERVABILITY_ENABLED")
        monkeypatch.chdir(tmp_path)

        config = ServerConfig()

        assert config.server_name == "library"
        assert config.server_version == "0.1.0"
        assert config.transport == "stdio"
        assert config.database_path == Path("data/library.db").absolute()
        assert config.default_page_size == 10
        assert config.max_page_size == 100
        assert config.observability_enabled is True
        assert config.debug is False

    def test_environment_variable_loading(self, tmp_path):
        env_vars = {
            "LIBRARY_SERVER_NAME": "test-library",
            "LIBRARY_SERVER_VERSION": "2.0.0",
            "LIBRARY_DATABASE_PATH": str(tmp_path / "env.db"),
            "LIBRARY_DEBUG": "true",
            "LIBRARY_LOG_LEVEL": "DEBUG",
            "LIBRARY_DEFAULT_PAGE_SIZE": "25",
        }

        with patch.dict(os.environ, env_vars):
            config = ServerConfig()

            assert config.server_name == "test-library"
            assert config.server_version == "2.0.0"
            assert config.database_path == tmp_path / "env.db"
            assert config.debug is True
            assert config.log_level == "DEBUG"
            assert config.default_page_size == 25
            assert config.is_development

    @pytest.mark.parametrize("name", ["MCP_Server", "mcp server", "ab", "x" * 51])
    def test_invalid_server_names(self, name):
        with pytest.raises(ValidationError):
            ServerConfig(server_name=name)

    def test_invalid_transport(self):
        with pytest.raises(ValidationError):
            ServerConfig(transport="websocket")

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            ServerConfig(log_level="TRACE")

    def test_default_page_size_must_fit_maximum(self):
        with pytest.raises(ValidationError, match="default_page_size"):
            ServerConfig(default_page_size=50, max_page_size=20)

    def test_database_directory_is_created(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "library.db"
        config = ServerConfig(database_path=db_path)

        assert config.database_path.parent.is_dir()
        assert config.get_database_url() == f"sqlite:///{db_path}"

    def test_server_info(self, test_config):
        assert test_config.server_info == {
            "name": "test-library",
            "version": "0.0.1-test",
            "transport": "stdio",
        }


class TestConfigSingleton:
    def test_get_config_returns_same_instance(self):
        assert get_config() is get_config()

    def test_reset_config_reloads_environment(self, monkeypatch):
        first = get_config()
        monkeypatch.setenv("LIBRARY_MAX_PAGE_SIZE", "50")
        reset_config()

        second = get_config()
        assert second is not first
        assert second.max_page_size == 50
