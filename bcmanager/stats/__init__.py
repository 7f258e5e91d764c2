from bcmanager.stats.data import (RawStatsSnapshot, StatsSample, CpuCounters, MemoryCounters, InterfaceCounters,
                                  NormalizedStats, Platform)
from bcmanager.stats.normalizer import StatsNormalizer, normalize

__all__ = ['RawStatsSnapshot', 'StatsSample', 'CpuCounters', 'MemoryCounters', 'InterfaceCounters',
           'NormalizedStats', 'Platform', 'StatsNormalizer', 'normalize']
