import logging

import docker
import docker.errors
import requests

from bcmanager.common.bcmanager_logging import get_bcmanager_logger
from bcmanager.common.exceptions import ContainerListError, ContainerNotFoundError, StatsAcquisitionError
from bcmanager.settings import ManagerSettings
from bcmanager.stats.data import NormalizedStats, Platform, RawStatsSnapshot
from bcmanager.stats.normalizer import StatsNormalizer

logger: logging.Logger = get_bcmanager_logger(__name__)


class DockerStatsClient:
    """
    Reads container counters from the Docker Engine and normalizes them
    """

    CLIENT_NAME = 'Docker'

    def __init__(self, settings: ManagerSettings | None = None, client: docker.DockerClient | None = None):
        self.settings: ManagerSettings = settings or ManagerSettings()
        # The client timeout bounds every engine request, isolated containers can be slow to answer
        self.client: docker.DockerClient = client or docker.from_env(timeout=int(self.settings.stats_timeout))
        self.normalizer: StatsNormalizer = StatsNormalizer(self.settings.primary_interfaces)

    def list_containers(self, *args, **kwargs):
        """
        The Docker Python API lists containers and then inspects them one by one. If a container is removed in
        the meantime it fails with 'requests.exceptions.HTTPError: 404 Client Error: Not Found'.
        As a workaround, the list operation is retried if an exception occurs.
        """
        tries = 0
        max_tries = 3

        if 'ignore_removed' not in kwargs:
            kwargs['ignore_removed'] = True

        while True:
            try:
                return self.client.containers.list(*args, **kwargs)
            except requests.exceptions.HTTPError:
                tries += 1
                logger.warning(f'Failed to list containers. Try {tries}/{max_tries}.')
                if tries >= max_tries:
                    raise

    def list_running_containers(self) -> list[str]:
        """
        Raises:
            ContainerListError: the engine failed or is unreachable
        """
        try:
            containers = self.list_containers()
        except (docker.errors.APIError, requests.exceptions.RequestException) as ex:
            raise ContainerListError(str(ex), ex) from ex
        return [c.name for c in containers if c.status == 'running']

    def get_platform_hint(self, container) -> Platform | None:
        """ Hyper-V isolated containers say so in their host configuration """
        isolation = (container.attrs.get('HostConfig') or {}).get('Isolation', '')
        if isinstance(isolation, str) and isolation.lower() == 'hyperv':
            return Platform.ISOLATED
        return None

    def _get_container(self, container_id: str):
        try:
            return self.client.containers.get(container_id)
        except docker.errors.NotFound as ex:
            raise ContainerNotFoundError(container_id, ex) from ex
        except (docker.errors.APIError, requests.exceptions.RequestException) as ex:
            raise StatsAcquisitionError(container_id, str(ex), ex) from ex

    @staticmethod
    def _read_stats(container) -> RawStatsSnapshot:
        try:
            stats = container.stats(stream=False)
        except docker.errors.NotFound as ex:
            raise ContainerNotFoundError(container.name, ex) from ex
        except requests.exceptions.Timeout as ex:
            raise StatsAcquisitionError(container.name, 'stats request timed out', ex) from ex
        except (docker.errors.APIError, requests.exceptions.RequestException) as ex:
            raise StatsAcquisitionError(container.name, str(ex), ex) from ex

        return RawStatsSnapshot.from_docker(stats)

    def get_raw_stats(self, container_id: str) -> RawStatsSnapshot:
        """
        Reads one stats payload from the engine. The payload carries both the current and the previous
        CPU reading.

        Raises:
            ContainerNotFoundError: the container doesn't exist
            StatsAcquisitionError: the engine failed or didn't answer in time
        """
        return self._read_stats(self._get_container(container_id))

    def get_container_stats(self, container_id: str) -> NormalizedStats:
        container = self._get_container(container_id)
        return self.normalizer.normalize(self._read_stats(container), self.get_platform_hint(container))

    def collect_container_stats(self, containers: list[str] | None = None) -> dict[str, NormalizedStats]:
        """
        Collects normalized stats for the given containers, or for every running container.
        A container whose stats can't be read is logged and left out.

        Returns:
            A dictionary container name -> NormalizedStats
        """
        if containers is None:
            containers = self.list_running_containers()

        stats = {}
        for name in containers:
            try:
                stats[name] = self.get_container_stats(name)
            except StatsAcquisitionError as e:
                logger.warning(f'Failed to get stats for container {name}: {e.reason}')
        return stats
