# oomwatch/services/cluster_client.py
from abc import ABC, abstractmethod
from typing import List

from oomwatch.models.cluster import Instance, WorkloadController


class ClusterClientError(Exception):
    """Base error for any failed call against the cluster."""


class ClusterConfigError(ClusterClientError):
    """Cluster credentials/endpoint could not be resolved."""


class ObservationError(ClusterClientError):
    """Listing instances failed."""


class FetchError(ClusterClientError):
    """A workload controller could not be retrieved."""


class ApplyError(ClusterClientError):
    """A workload controller update was rejected."""


class ClusterClient(ABC):
    """
    The three cluster operations the watcher depends on.

    Implementations raise the matching ClusterClientError subclass on failure.
    The watcher never constructs a client itself; one is handed in at startup.
    """

    @abstractmethod
    def list_instances(self, namespace: str) -> List[Instance]:
        """Lists every instance (pod) in the namespace. Raises ObservationError."""

    @abstractmethod
    def get_controller(self, namespace: str, name: str) -> WorkloadController:
        """Fetches the named workload controller. Raises FetchError."""

    @abstractmethod
    def apply_controller(self, namespace: str, controller: WorkloadController) -> None:
        """Writes an updated workload controller back. Raises ApplyError."""
