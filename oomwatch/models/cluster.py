# oomwatch/models/cluster.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class TerminationState(BaseModel):
    """Exit record of a terminated container."""
    model_config = ConfigDict(frozen=True)

    exit_code: int
    reason: Optional[str] = None


class ContainerObservation(BaseModel):
    """
    Observed state of one container in an instance.

    `state` is the current termination record (None while the container is
    running or waiting). `last_state` is the termination record of the
    previous run, kept by the kubelet after a restart.
    """
    model_config = ConfigDict(frozen=True)

    name: str = ""
    state: Optional[TerminationState] = None
    restart_count: int = Field(0, ge=0)
    last_state: Optional[TerminationState] = None


class OwnerReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    name: str


class Instance(BaseModel):
    """One observed pod."""
    model_config = ConfigDict(frozen=True)

    name: str
    containers: List[ContainerObservation] = []
    owner_references: List[OwnerReference] = []


class WorkloadController(BaseModel):
    """
    A controller whose pod template is annotated to trigger a rolling restart.
    `manifest` is whatever the cluster client fetched (e.g. a V1StatefulSet)
    and is handed back untouched on apply.
    """
    name: str
    namespace: str
    template_annotations: Optional[Dict[str, str]] = None
    manifest: Any = Field(None, exclude=True, repr=False)
