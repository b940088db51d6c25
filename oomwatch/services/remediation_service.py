# oomwatch/services/remediation_service.py
import logging
import time
from typing import Callable, List, Sequence

from oomwatch.models.remediation import RESTART_ANNOTATION, RemediationOutcome
from oomwatch.services.cluster_client import ClusterClient, ClusterClientError

logger = logging.getLogger(__name__)


class RemediationService:
    """
    Triggers rolling restarts by stamping the pod template of each target
    controller with a `restartTimestamp` annotation.
    """

    def __init__(self, cluster_client: ClusterClient,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.time):
        self.cluster_client = cluster_client
        self._sleep = sleep
        self._clock = clock

    def restart_targets(self, namespace: str, targets: Sequence[str], stagger_delay_seconds: float,
                        verbose: bool = False) -> List[RemediationOutcome]:
        """
        Restarts every target in order, returning one outcome per target.

        All targets share one trigger stamp. A failed fetch or apply is logged
        and recorded, then the next target is processed; nothing is retried.
        A single stagger pause follows the first target when there are more
        targets to go.
        """
        trigger = str(int(self._clock()))
        outcomes: List[RemediationOutcome] = []

        for index, name in enumerate(targets):
            outcomes.append(self._restart_one(namespace, name, trigger))

            # Pause follows the first target even when its fetch or apply failed
            if index == 0 and len(targets) > 1:
                if verbose:
                    logger.info(f"Waiting {stagger_delay_seconds} seconds before restarting next StatefulSet...")
                self._sleep(stagger_delay_seconds)

        failed = [o.target for o in outcomes if not o.success]
        if failed:
            logger.warning(f"Remediation pass finished with {len(failed)} failed target(s): {', '.join(failed)}")
        return outcomes

    def _restart_one(self, namespace: str, name: str, trigger: str) -> RemediationOutcome:
        try:
            controller = self.cluster_client.get_controller(namespace, name)
        except ClusterClientError as e:
            logger.error(f"get sts {name}: {e}")
            return RemediationOutcome(target=name, success=False, stage="fetch", error=str(e))
        except Exception as e:
            logger.error(f"Unexpected error fetching sts {name}: {e}", exc_info=True)
            return RemediationOutcome(target=name, success=False, stage="fetch", error=str(e))

        if controller.template_annotations is None:
            controller.template_annotations = {}
        controller.template_annotations[RESTART_ANNOTATION] = trigger

        try:
            self.cluster_client.apply_controller(namespace, controller)
        except ClusterClientError as e:
            logger.error(f"update sts {name}: {e}")
            return RemediationOutcome(target=name, success=False, stage="apply", trigger=trigger, error=str(e))
        except Exception as e:
            logger.error(f"Unexpected error updating sts {name}: {e}", exc_info=True)
            return RemediationOutcome(target=name, success=False, stage="apply", trigger=trigger, error=str(e))

        logger.info(f"Restarted {name} ({RESTART_ANNOTATION}={trigger})")
        return RemediationOutcome(target=name, success=True, stage="done", trigger=trigger)
