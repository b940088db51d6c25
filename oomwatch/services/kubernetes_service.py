# oomwatch/services/kubernetes_service.py
import logging
import os
from typing import Any, Dict, List, Optional

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

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
    ClusterConfigError,
    FetchError,
    ObservationError,
)

logger = logging.getLogger(__name__)


def _termination_from(container_state) -> Optional[TerminationState]:
    """Extracts the terminated record from a V1ContainerState, if any."""
    if container_state is None or container_state.terminated is None:
        return None
    terminated = container_state.terminated
    return TerminationState(exit_code=terminated.exit_code or 0, reason=terminated.reason)


def instance_from_pod(pod: client.V1Pod) -> Instance:
    """Converts a V1Pod into the watcher's Instance model."""
    metadata = pod.metadata
    statuses = (pod.status.container_statuses if pod.status else None) or []
    containers = [
        ContainerObservation(
            name=cs.name or "",
            state=_termination_from(cs.state),
            restart_count=cs.restart_count or 0,
            last_state=_termination_from(cs.last_state),
        )
        for cs in statuses
    ]
    owners = [
        OwnerReference(kind=ref.kind, name=ref.name)
        for ref in (metadata.owner_references or [])
    ]
    return Instance(name=metadata.name, containers=containers, owner_references=owners)


def controller_from_statefulset(sts: client.V1StatefulSet, namespace: str) -> WorkloadController:
    template_meta = sts.spec.template.metadata if sts.spec and sts.spec.template else None
    annotations = template_meta.annotations if template_meta else None
    return WorkloadController(
        name=sts.metadata.name,
        namespace=namespace,
        template_annotations=dict(annotations) if annotations is not None else None,
        manifest=sts,
    )


class KubernetesService(ClusterClient):
    """ClusterClient backed by the official Kubernetes API client. Works on StatefulSets."""

    def __init__(self, kubeconfig_path: Optional[str] = None, request_timeout_seconds: Optional[float] = None):
        self.kubeconfig_path = kubeconfig_path
        self.request_timeout_seconds = request_timeout_seconds
        self.core_api: Optional[client.CoreV1Api] = None
        self.apps_api: Optional[client.AppsV1Api] = None
        self._load_config()

    def _load_config(self):
        """Loads Kubernetes configuration: explicit kubeconfig, then in-cluster, then the default kubeconfig."""
        try:
            if self.kubeconfig_path:
                config.load_kube_config(config_file=self.kubeconfig_path)
                logger.info(f"Loaded Kubernetes config from: {self.kubeconfig_path}")
            elif os.getenv("KUBERNETES_SERVICE_HOST"):
                config.load_incluster_config()
                logger.info("Loaded in-cluster Kubernetes config.")
            else:
                config.load_kube_config()
                logger.info("Loaded default Kubernetes config (kubeconfig).")
        except config.ConfigException as e:
            raise ClusterConfigError(f"Could not load Kubernetes config: {e}") from e

        self.core_api = client.CoreV1Api()
        self.apps_api = client.AppsV1Api()
        logger.info("Kubernetes API clients initialized.")

    def _call_kwargs(self) -> Dict[str, Any]:
        if self.request_timeout_seconds:
            return {"_request_timeout": self.request_timeout_seconds}
        return {}

    def list_instances(self, namespace: str) -> List[Instance]:
        try:
            pod_list = self.core_api.list_namespaced_pod(namespace, **self._call_kwargs())
        except ApiException as e:
            raise ObservationError(f"{e.status} - {e.reason}") from e
        except Exception as e:
            raise ObservationError(str(e)) from e

        logger.debug(f"Fetched {len(pod_list.items)} pods from namespace '{namespace}'.")
        return [instance_from_pod(pod) for pod in pod_list.items]

    def get_controller(self, namespace: str, name: str) -> WorkloadController:
        try:
            sts = self.apps_api.read_namespaced_stateful_set(name, namespace, **self._call_kwargs())
        except ApiException as e:
            raise FetchError(f"{e.status} - {e.reason}") from e
        except Exception as e:
            raise FetchError(str(e)) from e
        return controller_from_statefulset(sts, namespace)

    def apply_controller(self, namespace: str, controller: WorkloadController) -> None:
        sts = controller.manifest
        if sts is None:
            raise ApplyError("no fetched manifest to update")

        if sts.spec.template.metadata is None:
            sts.spec.template.metadata = client.V1ObjectMeta()
        sts.spec.template.metadata.annotations = controller.template_annotations

        try:
            self.apps_api.replace_namespaced_stateful_set(controller.name, namespace, sts, **self._call_kwargs())
        except ApiException as e:
            raise ApplyError(f"{e.status} - {e.reason}") from e
        except Exception as e:
            raise ApplyError(str(e)) from e
