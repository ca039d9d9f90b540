"""
Unit tests for server configuration.
"""

import pytest

from bws.config import ServerConfig


class TestDefaults:

    def test_defaults(self):
        config = ServerConfig()

        assert config.port == 8080
        assert config.document_root == "www"
        assert config.default_documents == ("index.html", "index.htm")
        assert config.access_log == "access-log.txt"
        assert config.max_line_length == 32768
        assert config.max_null_run == 16
        assert config.max_header_lines == 64
        assert config.server_name == "bws"
        config.validate()


class TestFromEnv:

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("BWS_HOST", "127.0.0.1")
        monkeypatch.setenv("BWS_PORT", "9000")
        monkeypatch.setenv("BWS_DOCUMENT_ROOT", "/srv/www")
        monkeypatch.setenv("BWS_ACCESS_LOG", "/var/log/bws.txt")
        monkeypatch.setenv("BWS_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 9000
        assert config.document_root == "/srv/www"
        assert config.access_log == "/var/log/bws.txt"
        assert config.log_level == "DEBUG"

    def test_unset_environment_gives_defaults(self, monkeypatch):
        for name in ("BWS_HOST", "BWS_PORT", "BWS_DOCUMENT_ROOT", "BWS_ACCESS_LOG", "BWS_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        assert ServerConfig.from_env() == ServerConfig()

    def test_bad_port(self, monkeypatch):
        monkeypatch.setenv("BWS_PORT", "http")

        with pytest.raises(ValueError):
            ServerConfig.from_env()


class TestValidate:

    @pytest.mark.parametrize("port", [0, 1, 65535])
    def test_port_range_ok(self, port):
        ServerConfig(port=port).validate()

    @pytest.mark.parametrize("port", [-1, 65536])
    def test_port_out_of_range(self, port):
        with pytest.raises(ValueError, match="Invalid port"):
            ServerConfig(port=port).validate()

    @pytest.mark.parametrize("field,value", [
        ("backlog", 0),
        ("max_line_length", 0),
        ("max_null_run", -1),
        ("max_header_lines", 0),
        ("log_level", "LOUD"),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValueError):
            ServerConfig(**{field: value}).validate()

    def test_log_level_case_insensitive(self):
        ServerConfig(log_level="debug").validate()
