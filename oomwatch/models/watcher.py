# oomwatch/models/watcher.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Tuple

STATEFULSET_KIND = "StatefulSet"


class WatcherConfig(BaseModel):
    """Immutable runtime configuration for the watch loop, built once at startup."""
    model_config = ConfigDict(frozen=True)

    namespace: str = Field("default", min_length=1)
    targets: Tuple[str, ...] = ()
    poll_interval_seconds: float = Field(30, gt=0, description="Pause between watch cycles")
    stagger_delay_seconds: float = Field(30, ge=0, description="Pause after restarting the first target")
    verbose: bool = False
    controller_kind: str = STATEFULSET_KIND
