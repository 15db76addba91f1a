"""Tests for prokill logging setup."""

import json
import logging

import pytest
import structlog

from prokill.logger import get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == "prokill-file":
            root.removeHandler(handler)
            handler.close()
    structlog.reset_defaults()


def test_writes_to_file(tmp_path):
    log_file = tmp_path / "nested" / "prokill.log"
    setup_logging(level="INFO", log_file=log_file)

    get_logger("tests").info("process.kill.sent", pid=42)

    text = log_file.read_text()
    assert "process.kill.sent" in text
    assert "pid=42" in text


def test_level_filters(tmp_path):
    log_file = tmp_path / "prokill.log"
    setup_logging(level="WARNING", log_file=log_file)

    log = get_logger("tests")
    log.info("quiet.event")
    log.warning("loud.event")

    text = log_file.read_text()
    assert "quiet.event" not in text
    assert "loud.event" in text


def test_json_format(tmp_path):
    log_file = tmp_path / "prokill.log"
    setup_logging(level="INFO", log_file=log_file, json_format=True)

    get_logger("tests").bind(component="router").info("search.filter", term="sh")

    record = json.loads(log_file.read_text().splitlines()[-1])
    assert record["event"] == "search.filter"
    assert record["term"] == "sh"
    assert record["component"] == "router"
    assert record["level"] == "info"


def test_setup_twice_keeps_one_handler(tmp_path):
    setup_logging(log_file=tmp_path / "a.log")
    setup_logging(log_file=tmp_path / "b.log")

    names = [h.get_name() for h in logging.getLogger().handlers]
    assert names.count("prokill-file") == 1


def test_without_file_discards(tmp_path):
    setup_logging(level="DEBUG", log_file=None)

    get_logger("tests").debug("nowhere")

    assert list(tmp_path.iterdir()) == []
