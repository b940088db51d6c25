"""
Tests for environment-driven settings.
"""

import pytest
from pydantic import ValidationError

from oomwatch.core.config import Settings

ENV_VARS = ["WATCH_NAMESPACE", "TARGET_STS", "SLEEP_SECONDS", "RESTART_DELAY_SECONDS",
            "DEBUG", "LOG_LEVEL", "KUBECONFIG", "REQUEST_TIMEOUT_SECONDS", "BUILD_TAG"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    # keep a developer's .env out of the picture
    monkeypatch.chdir(tmp_path)


class TestSettings:

    def test_defaults(self):
        settings = Settings()
        cfg = settings.to_watcher_config()

        assert cfg.namespace == "default"
        assert cfg.targets == ()
        assert cfg.poll_interval_seconds == 30
        assert cfg.stagger_delay_seconds == 30
        assert cfg.verbose is False
        assert settings.BUILD_TAG == "dev"
        assert settings.effective_log_level == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("WATCH_NAMESPACE", "kafka")
        monkeypatch.setenv("TARGET_STS", "broker, zookeeper,,")
        monkeypatch.setenv("SLEEP_SECONDS", "10")
        monkeypatch.setenv("RESTART_DELAY_SECONDS", "0")
        monkeypatch.setenv("DEBUG", "true")

        settings = Settings()
        cfg = settings.to_watcher_config()

        assert cfg.namespace == "kafka"
        assert cfg.targets == ("broker", "zookeeper")
        assert cfg.poll_interval_seconds == 10
        assert cfg.stagger_delay_seconds == 0
        assert cfg.verbose is True
        assert settings.effective_log_level == "DEBUG"

    def test_target_order_is_kept(self, monkeypatch):
        monkeypatch.setenv("TARGET_STS", "c,a,b")
        assert Settings().targets == ("c", "a", "b")

    @pytest.mark.parametrize("var,value", [
        ("SLEEP_SECONDS", "0"),
        ("SLEEP_SECONDS", "soon"),
        ("RESTART_DELAY_SECONDS", "-1"),
        ("LOG_LEVEL", "LOUD"),
    ])
    def test_invalid_values_rejected(self, monkeypatch, var, value):
        monkeypatch.setenv(var, value)
        with pytest.raises(ValidationError):
            Settings()

    @pytest.mark.parametrize("var,field,default", [
        ("WATCH_NAMESPACE", "namespace", "default"),
        ("SLEEP_SECONDS", "poll_interval_seconds", 30),
        ("RESTART_DELAY_SECONDS", "stagger_delay_seconds", 30),
        ("DEBUG", "verbose", False),
    ])
    def test_empty_value_falls_back_to_default(self, monkeypatch, var, field, default):
        monkeypatch.setenv(var, "")
        cfg = Settings().to_watcher_config()
        assert getattr(cfg, field) == default

    def test_empty_log_level_and_build_tag_use_defaults(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "")
        monkeypatch.setenv("BUILD_TAG", "")
        settings = Settings()
        assert settings.LOG_LEVEL == "INFO"
        assert settings.BUILD_TAG == "dev"

    def test_log_level_normalised(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        assert Settings().LOG_LEVEL == "WARNING"

    def test_settings_are_immutable(self):
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.WATCH_NAMESPACE = "other"

    def test_watcher_config_is_immutable(self):
        cfg = Settings().to_watcher_config()
        with pytest.raises(ValidationError):
            cfg.namespace = "other"

    def test_empty_targets_warn(self, caplog):
        with caplog.at_level("WARNING"):
            Settings().to_watcher_config()
        assert "TARGET_STS is empty" in caplog.text
