"""
Shared fixtures for the watcher tests.

Provides a recording ClusterClient double that returns scripted results,
plus small builders for pods and StatefulSets.
"""

import pytest
from typing import Dict, List, Optional

from oomwatch.models.cluster import (
    ContainerObservation,
    Instance,
    OwnerReference,
    TerminationState,
    WorkloadController,
)
from oomwatch.services.cluster_client import (
    ApplyError,
    ClusterClient,
    FetchError,
    ObservationError,
)


class FakeClusterClient(ClusterClient):
    """Records every call and answers from scripted data."""

    def __init__(self, instances: Optional[List[Instance]] = None,
                 controllers: Optional[Dict[str, WorkloadController]] = None,
                 list_error: Optional[Exception] = None,
                 fetch_errors: Optional[Dict[str, Exception]] = None,
                 apply_errors: Optional[Dict[str, Exception]] = None):
        self.instances = instances or []
        self.controllers = controllers or {}
        self.list_error = list_error
        self.fetch_errors = fetch_errors or {}
        self.apply_errors = apply_errors or {}

        self.list_calls: List[str] = []
        self.get_calls: List[tuple] = []
        self.apply_calls: List[tuple] = []

    def list_instances(self, namespace):
        self.list_calls.append(namespace)
        if self.list_error is not None:
            raise self.list_error
        return list(self.instances)

    def get_controller(self, namespace, name):
        self.get_calls.append((namespace, name))
        if name in self.fetch_errors:
            raise self.fetch_errors[name]
        if name not in self.controllers:
            raise FetchError(f"statefulset {name} not found")
        return self.controllers[name]

    def apply_controller(self, namespace, controller):
        self.apply_calls.append((namespace, controller.name, dict(controller.template_annotations or {})))
        if controller.name in self.apply_errors:
            raise self.apply_errors[controller.name]

    @property
    def applied_names(self) -> List[str]:
        return [name for _, name, _ in self.apply_calls]


class RecordingSleep:
    """Stands in for time.sleep."""

    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds):
        self.calls.append(seconds)


def make_instance(name="pod-0", owner="a", kind="StatefulSet", containers=None) -> Instance:
    owners = [OwnerReference(kind=kind, name=owner)] if owner else []
    return Instance(name=name, containers=containers or [], owner_references=owners)


def running(name="app", restart_count=0, last_state=None) -> ContainerObservation:
    return ContainerObservation(name=name, restart_count=restart_count, last_state=last_state)


def oom_killed(name="app") -> ContainerObservation:
    return ContainerObservation(name=name, state=TerminationState(exit_code=137, reason="OOMKilled"))


def make_controller(name, namespace="ns", annotations=None) -> WorkloadController:
    return WorkloadController(name=name, namespace=namespace, template_annotations=annotations)


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def two_targets_client():
    return FakeClusterClient(controllers={
        "a": make_controller("a", annotations={}),
        "b": make_controller("b"),
    })


@pytest.fixture
def observation_error():
    return ObservationError("connection refused")


@pytest.fixture
def apply_error():
    return ApplyError("409 - Conflict")
