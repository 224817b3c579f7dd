"""Tests for hookwork.config."""

import pytest
from loguru import logger
from pydantic import ValidationError

from hookwork.config import HookSettings, configure_logging


def test_defaults():
    settings = HookSettings()
    assert settings.shutdown_hook == "shutdown"
    assert settings.setup_hook == "after_hooks_setup"
    assert settings.fire_on_exit is True
    assert settings.log_level == "WARNING"


def test_from_env_reads_prefixed_variables():
    settings = HookSettings.from_env(
        {
            "HOOKWORK_SHUTDOWN_HOOK": "teardown",
            "HOOKWORK_FIRE_ON_EXIT": "0",
            "HOOKWORK_LOG_LEVEL": "debug",
            "UNRELATED": "ignored",
        }
    )
    assert settings.shutdown_hook == "teardown"
    assert settings.setup_hook == "after_hooks_setup"
    assert settings.fire_on_exit is False
    assert settings.log_level == "DEBUG"


def test_from_env_defaults_to_process_environment(monkeypatch):
    monkeypatch.setenv("HOOKWORK_SETUP_HOOK", "ready")
    assert HookSettings.from_env().setup_hook == "ready"


def test_empty_hook_name_rejected():
    with pytest.raises(ValidationError):
        HookSettings(shutdown_hook="")


def test_unknown_log_level_rejected():
    with pytest.raises(ValidationError):
        HookSettings(log_level="CHATTY")


def test_configure_logging_enables_package_output():
    messages = []
    sink_id = configure_logging("debug")
    capture_id = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        from hookwork.engine import Hooks

        Hooks().add_action("logged", len)
    finally:
        logger.remove(capture_id)
        logger.remove(sink_id)
        logger.disable("hookwork")

    assert isinstance(sink_id, int)
    assert any("logged" in str(message) for message in messages)
