# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for configuration, errors and logging
"""

import json
import logging

from forgeflow.core.config import Config, get_provider_api_key, load_config
from forgeflow.core.errors import NotFoundError, ValidationError, sanitize_error_for_user
from forgeflow.core.logging import JSONFormatter, log_event


class TestConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(str(tmp_path / "missing.yaml")) == Config()

    def test_yaml_values(self, tmp_path, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("LEDGER_URL", raising=False)
        config_file = tmp_path / "forgeflow.yaml"
        config_file.write_text(
            "server:\n"
            "  port: 4000\n"
            "paths:\n"
            "  data: /srv/forgeflow\n"
            "execution:\n"
            "  node_timeout: 12.5\n"
            "  max_retries: 3\n"
            "validation:\n"
            "  require_trigger: false\n"
            "ledger:\n"
            "  url: http://ledger:8080\n"
        )

        config = load_config(str(config_file))

        assert config.service_port == 4000
        assert config.workflows_path == "/srv/forgeflow/workflows"
        assert config.executions_path == "/srv/forgeflow/executions"
        assert config.node_timeout == 12.5
        assert config.max_retries == 3
        assert config.require_trigger is False
        assert config.ledger_url == "http://ledger:8080"
        assert config.log_level == "INFO"

    def test_environment_overrides(self, tmp_path, monkeypatch):
        config_file = tmp_path / "forgeflow.yaml"
        config_file.write_text("server:\n  port: 4000\nlogging:\n  level: DEBUG\n")
        monkeypatch.setenv("PORT", "5000")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        config = load_config(str(config_file))

        assert config.service_port == 5000
        assert config.log_level == "WARNING"

    def test_provider_keys_come_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "or-secret")

        assert get_provider_api_key("openrouter") == "or-secret"
        assert get_provider_api_key("groq") is None
        assert get_provider_api_key("unknown") is None


class TestErrors:
    def test_to_dict(self):
        error = NotFoundError("Workflow", "wf-1")

        assert error.to_dict() == {
            "error": "NotFoundError",
            "message": "Workflow not found: wf-1",
            "status_code": 404,
            "details": {},
        }

    def test_validation_error_details(self):
        error = ValidationError("Workflow validation failed", details={"errors": ["x"]})

        assert error.status_code == 400
        assert error.details["errors"] == ["x"]

    def test_sanitize(self):
        error = RuntimeError("failed to open /app/data/store/x.json")

        assert sanitize_error_for_user(error) == "RuntimeError: failed to open data/store/x.json"
        assert sanitize_error_for_user(ValueError("y" * 600), include_type=False).endswith("...")


def test_json_formatter_includes_event_fields():
    logger = logging.getLogger("forgeflow.test")
    record = logger.makeRecord(
        "forgeflow.test", logging.INFO, __file__, 1, "node_completed", (), None,
        extra={"node_id": "n1", "duration_ms": 12},
    )

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "node_completed"
    assert data["level"] == "INFO"
    assert data["node_id"] == "n1"
    assert data["duration_ms"] == 12


def test_log_event(caplog):
    logger = logging.getLogger("forgeflow.test.events")
    caplog.set_level(logging.DEBUG, logger="forgeflow.test.events")

    log_event(logger, "workflow_started", level="WARNING", execution_id="exec_1")

    record = caplog.records[-1]
    assert record.levelname == "WARNING"
    assert record.execution_id == "exec_1"
