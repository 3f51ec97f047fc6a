import logging

from tracker.config import Config, configure_logging


def test_config_defaults_are_typed():
    assert isinstance(Config.REMINDER_HOUR, int)
    assert isinstance(Config.BUDGET_CHECK_INTERVAL, float)
    assert Config.CURRENCY


def test_configure_logging_accepts_level_names(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

    configure_logging("debug")
    configure_logging("not-a-level")

    assert calls[0]["level"] == logging.DEBUG
    assert calls[1]["level"] == logging.INFO
