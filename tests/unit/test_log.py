"""
Unit tests for log.py.
"""

import json
import logging

import pytest

from fincast.log import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)


def test_plain_text(capsys):
    setup_logging("INFO")
    logging.getLogger("fincast.test").info("projected %d accounts", 4)
    err = capsys.readouterr().err
    assert "INFO fincast.test projected 4 accounts" in err


def test_json_lines(capsys):
    setup_logging("DEBUG", json_logs=True)
    logging.getLogger("fincast.debt").debug("run finished")
    record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert record["message"] == "run finished"
    assert record["levelname"] == "DEBUG"
    assert record["name"] == "fincast.debt"


def test_level_filters(capsys):
    setup_logging("warning")
    logging.getLogger("fincast.goals").info("hidden")
    assert capsys.readouterr().err == ""


def test_repeated_setup_keeps_one_handler():
    setup_logging("INFO")
    root = setup_logging("INFO")
    assert len(root.handlers) == 1


def test_json_formatter_import_is_current():
    import importlib
    import warnings

    import fincast.log
    from pythonjsonlogger.json import JsonFormatter

    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        module = importlib.reload(fincast.log)
        root = module.setup_logging("INFO", json_logs=True)
    assert isinstance(root.handlers[0].formatter, JsonFormatter)
