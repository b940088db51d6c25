# oomwatch/services/watcher_service.py
import logging
import time
from typing import Callable, Optional

from oomwatch.models.remediation import CycleReport
from oomwatch.models.watcher import WatcherConfig
from oomwatch.services.cluster_client import ClusterClient, ClusterClientError
from oomwatch.services.detection_service import filter_owned_instances, find_failure
from oomwatch.services.remediation_service import RemediationService

logger = logging.getLogger(__name__)


class WatcherService:
    """
    The watch loop: observe pods, keep the ones owned by the targets, look for
    the OOM signature and, when found, restart every target. Then sleep and
    start over. Nothing is carried from one cycle to the next.
    """

    def __init__(self, cluster_client: ClusterClient, watcher_config: WatcherConfig,
                 remediation_service: Optional[RemediationService] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.cluster_client = cluster_client
        self.config = watcher_config
        self._sleep = sleep
        self.remediation_service = remediation_service or RemediationService(cluster_client, sleep=sleep)

    def run_cycle(self) -> CycleReport:
        """Runs one observe/filter/decide/remediate pass and reports what happened."""
        cfg = self.config
        report = CycleReport(namespace=cfg.namespace)

        if cfg.verbose:
            logger.info(f"Checking pods in namespace: {cfg.namespace}")

        try:
            instances = self.cluster_client.list_instances(cfg.namespace)
        except ClusterClientError as e:
            logger.error(f"Error listing pods: {e}")
            report.observation_error = str(e)
            return report
        except Exception as e:
            logger.error(f"Unexpected error listing pods: {e}", exc_info=True)
            report.observation_error = str(e)
            return report

        owned = filter_owned_instances(instances, cfg.targets, kind=cfg.controller_kind)
        report.instances_checked = len(instances)
        report.instances_owned = len(owned)
        if cfg.verbose:
            logger.info(f"{len(owned)} of {len(instances)} pods are owned by target {cfg.controller_kind}s.")

        report.failure = find_failure(owned, verbose=cfg.verbose)
        if report.failure is None:
            if cfg.verbose:
                logger.info("No restart needed.")
            return report

        logger.warning(f"OOM detected in pod {report.failure.instance}; restarting {', '.join(cfg.targets) or 'no targets'}.")
        report.outcomes = self.remediation_service.restart_targets(
            cfg.namespace, cfg.targets, cfg.stagger_delay_seconds, verbose=cfg.verbose
        )
        return report

    def run(self, max_cycles: Optional[int] = None):
        """
        Loops forever (or `max_cycles` times), sleeping the poll interval after
        every cycle, including cycles whose observation failed.
        """
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            self.run_cycle()
            cycles += 1
            if self.config.verbose:
                logger.info(f"Sleeping for {self.config.poll_interval_seconds}s...")
            self._sleep(self.config.poll_interval_seconds)
