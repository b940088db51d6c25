# oomwatch/main.py
import logging
import sys

from pydantic import ValidationError

from oomwatch.core.config import get_settings
from oomwatch.core.logging_config import setup_logging
from oomwatch.services.cluster_client import ClusterConfigError
from oomwatch.services.kubernetes_service import KubernetesService
from oomwatch.services.watcher_service import WatcherService

logger = logging.getLogger(__name__)


def main() -> int:
    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        logger.critical(f"Invalid configuration: {e}")
        return 1

    # Setup logging FIRST
    setup_logging(settings.effective_log_level)

    watcher_config = settings.to_watcher_config()
    logger.info(f"{settings.APP_NAME} starting.")
    logger.info(f"Start watching StatefulSets: {list(watcher_config.targets)}")
    logger.info(f"Build tag: {settings.BUILD_TAG}")
    logger.info(f"Namespace: {watcher_config.namespace}, poll interval: {watcher_config.poll_interval_seconds}s, "
                f"restart delay: {watcher_config.stagger_delay_seconds}s")

    try:
        k8s_service = KubernetesService(
            kubeconfig_path=settings.KUBECONFIG,
            request_timeout_seconds=settings.REQUEST_TIMEOUT_SECONDS,
        )
    except ClusterConfigError as e:
        logger.critical(str(e))
        return 1

    watcher = WatcherService(k8s_service, watcher_config)
    try:
        watcher.run()
    except KeyboardInterrupt:
        logger.info("Watcher stopped.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
