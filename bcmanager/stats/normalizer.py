"""
Container stats normalization

Derives CPU percentage, memory usage/limit and network counters from two consecutive counter readings of a
container. Shared-kernel (cgroup) and isolated (commit based, 100ns CPU ticks) containers report different
counters; the snapshot is classified first and each mode runs its own formulas.
"""
import logging
import math

from bcmanager.common.bcmanager_logging import get_bcmanager_logger
from bcmanager.common.constants import CTE
from bcmanager.stats.data import (RawStatsSnapshot, NormalizedStats, Platform, PlatformCounters,
                                  SharedKernelCounters, IsolatedCounters)

logger: logging.Logger = get_bcmanager_logger(__name__)

_PERCENT_FIELDS: frozenset[str] = frozenset({'cpu_percent', 'memory_percent'})


def detect_counters(raw: RawStatsSnapshot, platform_hint: Platform | None = None) -> PlatformCounters:
    """
    Classifies the snapshot and keeps only the counters meaningful to the detected isolation mode.

    Isolation counters (commit/working set memory or a process count) take precedence over anything else,
    the hint is only used when the snapshot carries no isolation evidence.

    Args:
        raw: the two counter readings
        platform_hint: isolation mode known by the caller, if any

    Returns: SharedKernelCounters or IsolatedCounters

    """
    current, previous = raw.current, raw.previous

    isolated = (current.memory.has_isolation_counters
                or (current.num_procs or 0) > 0
                or platform_hint == Platform.ISOLATED)

    if isolated:
        return IsolatedCounters(cpu_total=current.cpu.total_usage,
                                cpu_total_previous=previous.cpu.total_usage,
                                system_usage=current.cpu.system_usage,
                                system_usage_previous=previous.cpu.system_usage,
                                online_cores=current.cpu.online_cpus,
                                num_procs=current.num_procs,
                                read=current.read,
                                previous_read=previous.read,
                                private_working_set_bytes=current.memory.private_working_set_bytes,
                                commit_bytes=current.memory.commit_bytes,
                                peak_commit_bytes=current.memory.peak_commit_bytes,
                                limit=current.memory.limit)

    return SharedKernelCounters(cpu_total=current.cpu.total_usage,
                                cpu_total_previous=previous.cpu.total_usage,
                                system_usage=current.cpu.system_usage,
                                system_usage_previous=previous.cpu.system_usage,
                                online_cores=current.cpu.online_cpus,
                                percpu_count=len(current.cpu.percpu_usage or []),
                                usage=current.memory.usage,
                                limit=current.memory.limit,
                                cache=current.memory.cache,
                                inactive_file=current.memory.inactive_file)


def _system_based_percent(cpu_delta: float, system_delta: float, num_cores: float) -> float:
    if system_delta <= 0:
        return 0.0
    return (cpu_delta / system_delta) * num_cores * 100.0


def _finite(value: float | int | None) -> float:
    if value is None or not math.isfinite(value):
        return 0.0
    return float(value)


def enforce_finite(stats: NormalizedStats) -> NormalizedStats:
    """
    Makes every numeric field of the record finite and non-negative, percentages are clamped to [0, 100]
    and byte counters are rounded to integers.
    """
    update = {}
    for name, value in stats:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue

        number = max(_finite(value), 0.0)
        if name in _PERCENT_FIELDS:
            update[name] = min(number, 100.0)
        else:
            update[name] = int(round(number))

    return stats.model_copy(update=update)


class StatsNormalizer:
    """
    Turns raw container counters into NormalizedStats. Stateless, instances can be shared between threads.
    """

    def __init__(self, primary_interfaces: tuple[str, ...] | list[str] = CTE.PRIMARY_INTERFACES):
        self.primary_interfaces: tuple[str, ...] = tuple(primary_interfaces)

    def normalize(self, raw: RawStatsSnapshot, platform_hint: Platform | None = None) -> NormalizedStats:
        """
        Args:
            raw: two consecutive counter readings of the container
            platform_hint: isolation mode known by the caller, only used when the counters don't tell

        Returns: the normalized stats. Missing or malformed counters contribute zero, never an exception

        """
        counters = detect_counters(raw, platform_hint)

        match counters:
            case IsolatedCounters():
                stats = self._normalize_isolated(counters)
            case SharedKernelCounters():
                stats = self._normalize_shared_kernel(counters)
            case _:  # pragma: no cover
                raise TypeError(f'Unknown counters type {type(counters)}')

        stats.network_rx_bytes, stats.network_tx_bytes = self._network_counters(raw)

        return enforce_finite(stats)

    @staticmethod
    def _memory_percent(usage: float, limit: float) -> float:
        return (usage / limit) * 100.0 if limit > 0 else 0.0

    def _normalize_shared_kernel(self, counters: SharedKernelCounters) -> NormalizedStats:
        cpu_percent = 0.0
        if counters.cpu_total is not None and counters.cpu_total_previous is not None:
            cpu_delta = counters.cpu_total - counters.cpu_total_previous
            system_delta = (counters.system_usage or 0.0) - (counters.system_usage_previous or 0.0)
            num_cores = counters.online_cores or counters.percpu_count or 1
            cpu_percent = _system_based_percent(cpu_delta, system_delta, num_cores)
        else:
            logger.debug('CPU usage counters missing, reporting 0% CPU')

        memory_usage = 0.0
        if counters.usage is not None:
            memory_usage = counters.usage - (counters.cache or counters.inactive_file or 0.0)
        memory_limit = counters.limit or 0.0

        return NormalizedStats(cpu_percent=_finite(cpu_percent),
                               memory_usage_bytes=max(int(_finite(memory_usage)), 0),
                               memory_limit_bytes=int(_finite(memory_limit)),
                               memory_percent=_finite(self._memory_percent(memory_usage, memory_limit)),
                               is_isolated_container=False)

    @staticmethod
    def _isolated_cpu_percent(counters: IsolatedCounters) -> float:
        if counters.cpu_total is None or counters.cpu_total_previous is None:
            logger.debug('CPU usage counters missing, reporting 0% CPU')
            return 0.0

        cpu_delta = counters.cpu_total - counters.cpu_total_previous

        if counters.system_usage and counters.system_usage_previous:
            system_delta = counters.system_usage - counters.system_usage_previous
            num_cores = counters.online_cores or counters.num_procs or 1
            return _system_based_percent(cpu_delta, system_delta, num_cores)

        # No system wide counter, compare against the 100ns ticks elapsed between both readings
        if counters.read is None or counters.previous_read is None:
            logger.debug('Sample timestamps missing, reporting 0% CPU')
            return 0.0

        try:
            elapsed_ms = (counters.read - counters.previous_read).total_seconds() * 1000.0
        except TypeError as ex:
            logger.warning(f'Cannot compare sample timestamps: {ex}')
            return 0.0

        if elapsed_ms <= 0:
            return 0.0

        possible_ticks = elapsed_ms * CTE.TICKS_PER_MS * (counters.num_procs or 1)
        return (cpu_delta / possible_ticks) * 100.0

    def _normalize_isolated(self, counters: IsolatedCounters) -> NormalizedStats:
        warning = None
        memory_usage = counters.private_working_set_bytes or counters.commit_bytes or 0.0
        memory_limit = counters.peak_commit_bytes or counters.limit or 0.0

        if not counters.private_working_set_bytes and not counters.commit_bytes:
            warning = CTE.ISOLATION_WARNING
            memory_usage = memory_limit = 0.0
            logger.debug('Isolated container without working set or commit counters')

        cpu_percent = self._isolated_cpu_percent(counters)

        return NormalizedStats(cpu_percent=_finite(cpu_percent),
                               memory_usage_bytes=int(_finite(memory_usage)),
                               memory_limit_bytes=int(_finite(memory_limit)),
                               memory_percent=_finite(self._memory_percent(memory_usage, memory_limit)),
                               is_isolated_container=True,
                               warning=warning)

    def _network_counters(self, raw: RawStatsSnapshot) -> tuple[int, int]:
        """
        Picks one interface: the first configured primary interface present, else the first reported one.
        Readings are totals, no difference between samples is taken.
        """
        networks = raw.current.networks
        if not networks:
            return 0, 0

        name = next((n for n in self.primary_interfaces if n in networks), next(iter(networks)))
        iface = networks[name]

        return int(_finite(iface.rx_bytes)), int(_finite(iface.tx_bytes))


_default_normalizer = StatsNormalizer()


def normalize(raw: RawStatsSnapshot, platform_hint: Platform | None = None) -> NormalizedStats:
    return _default_normalizer.normalize(raw, platform_hint)
