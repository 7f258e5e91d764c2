"""
    Data structures for the container resource counters and the normalized stats record
"""
import math
from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BeforeValidator, Field
from strenum import StrEnum

from bcmanager.common.base_model import BCBaseModel
from bcmanager.common.utils import parse_engine_timestamp


def lenient_counter(value: Any) -> float | None:
    """
    Converts a raw counter into a float. Anything that is not a finite number is considered absent.
    Args:
        value: raw counter as deserialized from the container engine

    Returns: the counter as float or None

    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def lenient_timestamp(value: Any) -> datetime | None:
    """ Engine timestamps, the zero time reported before a first reading counts as absent """
    parsed = parse_engine_timestamp(value)
    if parsed is None or parsed.year <= 1:
        return None
    return parsed


def lenient_list(value: Any) -> list | None:
    return value if isinstance(value, (list, tuple)) else None


Counter = Annotated[float | None, BeforeValidator(lenient_counter)]
Timestamp = Annotated[datetime | None, BeforeValidator(lenient_timestamp)]


class Platform(StrEnum):
    """ Isolation mode of a container """
    SHARED_KERNEL = 'shared-kernel'
    ISOLATED = 'isolated'


class CpuCounters(BCBaseModel):
    total_usage: Counter = None
    percpu_usage: Annotated[list | None, BeforeValidator(lenient_list)] = None
    system_usage: Counter = None
    online_cpus: Counter = None


class MemoryCounters(BCBaseModel):
    # Shared-kernel (cgroup) accounting
    usage: Counter = None
    limit: Counter = None
    cache: Counter = None
    inactive_file: Counter = None

    # Isolated (commit based) accounting
    commit_bytes: Counter = None
    peak_commit_bytes: Counter = None
    private_working_set_bytes: Counter = None

    @property
    def has_isolation_counters(self) -> bool:
        return any(v is not None for v in (self.commit_bytes,
                                           self.peak_commit_bytes,
                                           self.private_working_set_bytes))


class InterfaceCounters(BCBaseModel):
    rx_bytes: Counter = None
    tx_bytes: Counter = None


class StatsSample(BCBaseModel):
    """ One reading of the container counters """
    read: Timestamp = None
    cpu: CpuCounters = Field(default_factory=CpuCounters)
    memory: MemoryCounters = Field(default_factory=MemoryCounters)
    num_procs: Counter = None
    networks: dict[str, InterfaceCounters] = Field(default_factory=dict)


def _section(stats: dict, key: str) -> dict:
    value = stats.get(key)
    return value if isinstance(value, dict) else {}


def _cpu_from_docker(cpu_stats: dict) -> CpuCounters:
    cpu_usage = _section(cpu_stats, 'cpu_usage')
    return CpuCounters(total_usage=cpu_usage.get('total_usage'),
                       percpu_usage=cpu_usage.get('percpu_usage'),
                       system_usage=cpu_stats.get('system_cpu_usage'),
                       online_cpus=cpu_stats.get('online_cpus'))


def _memory_from_docker(memory_stats: dict) -> MemoryCounters:
    breakdown = _section(memory_stats, 'stats')
    return MemoryCounters(usage=memory_stats.get('usage'),
                          limit=memory_stats.get('limit'),
                          cache=breakdown.get('cache'),
                          inactive_file=breakdown.get('inactive_file'),
                          commit_bytes=memory_stats.get('commitbytes'),
                          peak_commit_bytes=memory_stats.get('commitpeakbytes'),
                          private_working_set_bytes=memory_stats.get('privateworkingset'))


def _networks_from_docker(networks: dict) -> dict[str, InterfaceCounters]:
    return {name: InterfaceCounters(rx_bytes=iface.get('rx_bytes'),
                                    tx_bytes=iface.get('tx_bytes'))
            for name, iface in networks.items() if isinstance(iface, dict)}


class RawStatsSnapshot(BCBaseModel):
    """ Two consecutive readings of the container counters """
    current: StatsSample = Field(default_factory=StatsSample)
    previous: StatsSample = Field(default_factory=StatsSample)

    @classmethod
    def from_docker(cls, stats: dict | None) -> 'RawStatsSnapshot':
        """
        Builds a snapshot from the payload of the engine stats endpoint (stream=false). The engine reports
        the previous CPU reading under `precpu_stats`/`preread`, memory, network and process counters only
        for the current reading.

        Args:
            stats: payload returned by `Container.stats(stream=False)`

        Returns: a RawStatsSnapshot, empty samples when the payload is missing sections

        """
        if not isinstance(stats, dict):
            return cls()

        current = StatsSample(read=stats.get('read'),
                              cpu=_cpu_from_docker(_section(stats, 'cpu_stats')),
                              memory=_memory_from_docker(_section(stats, 'memory_stats')),
                              num_procs=stats.get('num_procs'),
                              networks=_networks_from_docker(_section(stats, 'networks')))
        previous = StatsSample(read=stats.get('preread'),
                               cpu=_cpu_from_docker(_section(stats, 'precpu_stats')))

        return cls(current=current, previous=previous)


class _PlatformCounters(BCBaseModel):
    """ Counters meaningful to the CPU derivation in both isolation modes """
    cpu_total: float | None = None
    cpu_total_previous: float | None = None
    system_usage: float | None = None
    system_usage_previous: float | None = None
    online_cores: float | None = None


class SharedKernelCounters(_PlatformCounters):
    mode: Literal['shared-kernel'] = 'shared-kernel'
    percpu_count: int = 0

    usage: float | None = None
    limit: float | None = None
    cache: float | None = None
    inactive_file: float | None = None


class IsolatedCounters(_PlatformCounters):
    mode: Literal['isolated'] = 'isolated'
    num_procs: float | None = None
    read: datetime | None = None
    previous_read: datetime | None = None

    private_working_set_bytes: float | None = None
    commit_bytes: float | None = None
    peak_commit_bytes: float | None = None
    limit: float | None = None


PlatformCounters = Annotated[Union[SharedKernelCounters, IsolatedCounters], Field(discriminator='mode')]


class NormalizedStats(BCBaseModel):
    """ Platform agnostic container metrics """
    cpu_percent: float = 0.0
    memory_usage_bytes: int = 0
    memory_limit_bytes: int = 0
    memory_percent: float = 0.0
    network_rx_bytes: int = 0
    network_tx_bytes: int = 0
    is_isolated_container: bool = False
    warning: str | None = None
