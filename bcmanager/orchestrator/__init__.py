from bcmanager.orchestrator.docker import DockerStatsClient

__all__ = ['DockerStatsClient']
