# oomwatch/services/detection_service.py
import logging
from typing import Iterable, List, Optional

from oomwatch.models.cluster import Instance
from oomwatch.models.remediation import FailureMatch
from oomwatch.models.watcher import STATEFULSET_KIND

logger = logging.getLogger(__name__)

OOM_REASON = "OOMKilled"
OOM_EXIT_CODE = 137  # SIGKILL, what the kernel OOM killer leaves behind


def filter_owned_instances(instances: Iterable[Instance], targets: Iterable[str], kind: str = STATEFULSET_KIND) -> List[Instance]:
    """
    Keeps only the instances owned by one of the target controllers.

    An owner reference matches when its kind equals `kind` and its name is in
    `targets`. Instances owned by another controller of the same kind are dropped.
    """
    target_names = set(targets)
    return [
        instance for instance in instances
        if any(ref.kind == kind and ref.name in target_names for ref in instance.owner_references)
    ]


def find_failure(instances: Iterable[Instance], verbose: bool = False) -> Optional[FailureMatch]:
    """
    Returns the first container showing the OOM signature, or None.

    A container matches when its current termination reason is OOMKilled, or
    when it has restarted and its previous run exited with code 137.
    """
    for instance in instances:
        for container in instance.containers:
            current = container.state
            if current is not None:
                match = FailureMatch(instance=instance.name, container=container.name,
                                     exit_code=current.exit_code, reason=current.reason)
                if verbose:
                    logger.debug(f"Terminated container: {match.describe()}")
                if current.reason == OOM_REASON:
                    logger.warning(f"[FAILED] {match.describe()}")
                    return match

            previous = container.last_state
            if container.restart_count > 0 and previous is not None:
                match = FailureMatch(instance=instance.name, container=container.name,
                                     exit_code=previous.exit_code, reason=previous.reason, previous=True)
                if verbose:
                    logger.debug(f"Terminated container: {match.describe()} (previous run, {container.restart_count} restarts)")
                if previous.exit_code == OOM_EXIT_CODE:
                    logger.warning(f"[FAILED] {match.describe()} (previous run)")
                    return match
    return None


def needs_restart(instances: Iterable[Instance], verbose: bool = False) -> bool:
    return find_failure(instances, verbose=verbose) is not None
