"""Tests for loguru setup."""

import json

from loguru import logger

from config.settings import settings
from holder_monitor.analytics.concentration import calculate_centralization_metrics
from holder_monitor.utils.logger import setup_logger


def test_file_sink_captures_debug(tmp_path, monkeypatch, equal_holders):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    log_file = tmp_path / "analysis.log"

    setup_logger(level="WARNING", log_file=str(log_file))
    try:
        calculate_centralization_metrics(equal_holders, 0, whale_count=0)
        content = log_file.read_text()
    finally:
        logger.remove()

    assert "[METRICS] total_supply=0 is not positive" in content


def test_json_file_sink(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    log_file = tmp_path / "analysis.jsonl"

    setup_logger(json_logs=True, log_file=str(log_file))
    try:
        logger.info("[ANALYSIS] json record")
        lines = log_file.read_text().splitlines()
    finally:
        logger.remove()

    record = json.loads(lines[-1])
    assert record["record"]["message"] == "[ANALYSIS] json record"


def test_unset_arguments_come_from_settings(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    log_file = tmp_path / "from_settings.log"
    monkeypatch.setattr(settings, "log_file", str(log_file))
    monkeypatch.setattr(settings, "json_logs", True)
    monkeypatch.setattr(settings, "log_level", "ERROR")

    setup_logger()
    try:
        logger.debug("[ANALYSIS] configured from settings")
        lines = log_file.read_text().splitlines()
    finally:
        logger.remove()

    record = json.loads(lines[-1])
    assert record["record"]["message"] == "[ANALYSIS] configured from settings"


def test_empty_log_file_setting_adds_no_file_sink(tmp_path, monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings, "log_file", "")

    setup_logger()
    try:
        logger.info("[ANALYSIS] stdout only")
    finally:
        logger.remove()

    assert list(tmp_path.iterdir()) == []
