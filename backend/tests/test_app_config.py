from __future__ import annotations

import logging
from pathlib import Path

from scorecard import create_app
from scorecard.config import BaseConfig, DevConfig, TestConfig, get_config
from scorecard.extensions import report_service
from scorecard.utils.logging import ENGINE_LOGGER


def test_get_config_by_name(monkeypatch):
    assert get_config("testing") is TestConfig
    assert get_config("Development") is DevConfig
    assert get_config("unknown") is BaseConfig

    monkeypatch.setenv("SCORECARD_ENV", "production")
    assert get_config() is BaseConfig


def test_create_app_applies_overrides_and_registers_service(tmp_path):
    app = create_app("testing", {"TEMPLATE_PATH": tmp_path / "t.pdf", "CTA_URL": "https://example.test"})

    assert app.config["TESTING"] is True
    service = report_service(app)
    assert service.template_path == Path(tmp_path / "t.pdf")
    assert service.link_url == "https://example.test"
    assert app.config["REPORT_FILENAME"] == "dominance-scorecard-report.pdf"


def test_engine_records_go_to_report_log_file(tmp_path):
    log_file = tmp_path / "logs" / "engine.log"
    create_app("testing", {"REPORT_LOG_FILE": str(log_file)})
    engine_logger = logging.getLogger(ENGINE_LOGGER)
    try:
        logging.getLogger(f"{ENGINE_LOGGER}.document_assembler").warning("stream skipped")
        assert "stream skipped" in log_file.read_text()
    finally:
        for handler in list(engine_logger.handlers):
            engine_logger.removeHandler(handler)
            handler.close()
