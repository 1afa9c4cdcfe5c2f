import pytest

from di_platform.config.context import ContainerConfig


def test_log_impl_defaults_to_null(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("DI_LOG_IMPL", raising=False)
    assert ContainerConfig().log_impl == "null"


def test_log_impl_read_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DI_LOG_IMPL", "pretty")
    assert ContainerConfig().log_impl == "pretty"


def test_overrides_win_over_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DI_LOG_IMPL", "pretty")
    config = ContainerConfig(overrides={"DI_LOG_IMPL": "memory"})
    assert config.log_impl == "memory"


def test_empty_value_falls_back_to_null():
    assert ContainerConfig(overrides={"DI_LOG_IMPL": ""}).log_impl == "null"


def test_get_with_default():
    config = ContainerConfig(overrides={"SOME_KEY": "v"})
    assert config.get("SOME_KEY") == "v"
    assert config.get("DI_UNSET_KEY_FOR_TEST", "d") == "d"
