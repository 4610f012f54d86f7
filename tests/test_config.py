"""
Tests for core.config, core.logs and core.firebase start-up behaviour.
"""

import logging
import os

import pytest

from core.config import Settings, load_settings
from core.firebase import init_firestore
from core.logs import configure_logging


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings({})
        assert settings == Settings()
        assert settings.service_account_key_path is None
        assert settings.transport == "stdio"
        assert settings.http_port == 3000

    def test_reads_values(self):
        settings = load_settings({
            "SERVICE_ACCOUNT_KEY_PATH": " /secrets/key.json ",
            "FIREBASE_PROJECT_ID": "demo-project",
            "MCP_TRANSPORT": "HTTP",
            "MCP_HTTP_HOST": "0.0.0.0",
            "MCP_HTTP_PORT": "8080",
            "LOG_LEVEL": "debug",
        })
        assert settings.service_account_key_path == "/secrets/key.json"
        assert settings.project_id == "demo-project"
        assert settings.transport == "http"
        assert settings.http_host == "0.0.0.0"
        assert settings.http_port == 8080
        assert settings.log_level == "DEBUG"

    def test_invalid_transport(self):
        with pytest.raises(ValueError, match="MCP_TRANSPORT"):
            load_settings({"MCP_TRANSPORT": "websocket"})

    def test_invalid_port(self):
        with pytest.raises(ValueError, match="MCP_HTTP_PORT"):
            load_settings({"MCP_HTTP_PORT": "eighty"})

    @pytest.mark.parametrize("raw", ["", "false", "undefined"])
    def test_debug_log_file_disabled(self, raw):
        assert load_settings({"DEBUG_LOG_FILE": raw}).debug_log_file is None

    def test_debug_log_file_true_uses_cwd(self):
        assert load_settings({"DEBUG_LOG_FILE": "true"}).debug_log_file == os.path.join(os.getcwd(), "debug.log")

    def test_debug_log_file_path(self):
        assert load_settings({"DEBUG_LOG_FILE": "/tmp/mcp.log"}).debug_log_file == "/tmp/mcp.log"


class TestConfigureLogging:
    def test_file_handler_written(self, tmp_path):
        log_file = tmp_path / "debug.log"
        configure_logging("INFO", str(log_file))
        logging.getLogger("tests").info("hello file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello file" in log_file.read_text()

    def test_unwritable_file_is_ignored(self, tmp_path):
        configure_logging("INFO", str(tmp_path / "missing-dir" / "debug.log"))
        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)


class TestInitFirestore:
    def test_no_key_means_degraded(self):
        assert init_firestore(Settings()) is None

    def test_unreadable_key_means_degraded(self, tmp_path):
        settings = Settings(service_account_key_path=str(tmp_path / "missing.json"))
        assert init_firestore(settings) is None

    def test_invalid_key_means_degraded(self, tmp_path):
        key = tmp_path / "key.json"
        key.write_text('{"type": "authorized_user"}')
        assert init_firestore(Settings(service_account_key_path=str(key))) is None
