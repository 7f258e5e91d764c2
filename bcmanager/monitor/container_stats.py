""" Container stats monitor """
import logging

from bcmanager.common.bcmanager_logging import get_bcmanager_logger
from bcmanager.monitor import Monitor
from bcmanager.orchestrator.docker import DockerStatsClient
from bcmanager.stats.data import NormalizedStats

logger: logging.Logger = get_bcmanager_logger(__name__)


class ContainerStatsMonitor(Monitor):
    """
    Polls the normalized stats of the tracked containers once per refresh interval.

    Args:
        client: engine client reading the counters
        containers: names of the tracked containers, every running container when None
        period: seconds between two polls, defaults to the client's refresh interval
    """
    def __init__(self,
                 client: DockerStatsClient,
                 containers: list[str] | None = None,
                 period: float | None = None,
                 name: str = 'container_stats_monitor'):
        super().__init__(name, period or client.settings.refresh_interval)

        self.client: DockerStatsClient = client
        self.containers: list[str] | None = containers
        self.data: dict[str, NormalizedStats] = {}

    def update_data(self):
        self.data = self.client.collect_container_stats(self.containers)

        for name, stats in self.data.items():
            if stats.warning:
                self.logger.info(f'Container {name}: {stats.warning}')

    def report_data(self) -> dict[str, NormalizedStats]:
        return dict(self.data)
