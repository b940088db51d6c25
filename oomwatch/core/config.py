# oomwatch/core/config.py
from functools import lru_cache
from typing import Optional, Tuple
import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from oomwatch.models.watcher import WatcherConfig

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    APP_NAME: str = "StatefulSet OOM Watcher"
    BUILD_TAG: str = Field("dev", description="Build identifier, injected at image build time")
    LOG_LEVEL: str = "INFO"

    # Watch Settings
    WATCH_NAMESPACE: str = Field("default", min_length=1, description="Namespace to watch and remediate")
    TARGET_STS: str = Field("", description="Comma-separated StatefulSet names to restart on OOM")
    SLEEP_SECONDS: float = Field(30, gt=0, description="Seconds between watch cycles")
    RESTART_DELAY_SECONDS: float = Field(30, ge=0, description="Seconds to wait after restarting the first StatefulSet")
    DEBUG: bool = Field(False, description="Emit per-cycle diagnostic detail")

    # Kubernetes Config - leave blank to use in-cluster or default kubeconfig
    KUBECONFIG: Optional[str] = None
    REQUEST_TIMEOUT_SECONDS: Optional[float] = Field(None, gt=0, description="Per-request Kubernetes API timeout")

    model_config = SettingsConfigDict(
        env_file='.env',  # Load environment variables from .env file
        env_file_encoding='utf-8',
        extra='ignore',
        env_ignore_empty=True,  # empty values fall back to defaults
        frozen=True,
    )

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @property
    def targets(self) -> Tuple[str, ...]:
        return tuple(name.strip() for name in self.TARGET_STS.split(",") if name.strip())

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL

    def to_watcher_config(self) -> WatcherConfig:
        if not self.targets:
            logger.warning("TARGET_STS is empty. OOM events will be logged but nothing will be restarted.")
        return WatcherConfig(
            namespace=self.WATCH_NAMESPACE,
            targets=self.targets,
            poll_interval_seconds=self.SLEEP_SECONDS,
            stagger_delay_seconds=self.RESTART_DELAY_SECONDS,
            verbose=self.DEBUG,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
