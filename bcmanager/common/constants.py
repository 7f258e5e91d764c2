from dataclasses import dataclass, field


@dataclass(frozen=True)
class Constants:
    # Timeouts
    STATS_TIMEOUT: int = 5  # Seconds to wait for the container engine to answer a stats request

    # Intervals
    REFRESH_INTERVAL: int = 10  # Default polling interval of the container stats monitor

    # Container port band used by Business Central containers (inclusive)
    PORT_RANGE_START: int = 8000
    PORT_RANGE_END: int = 9999

    # Isolated containers report CPU time in 100ns ticks
    TICKS_PER_MS: int = 10_000

    # Network interface names reported by the engine for the container's primary adapter
    PRIMARY_INTERFACES: tuple[str, ...] = field(default=('eth0', 'nat'))

    # Remediation scripts
    SCRIPTS_DIRECTORY: str = 'scripts'
    DIAGNOSTICS_SCRIPT: str = 'Diagnose-HNS-Ports.ps1'
    FIX_SCRIPT: str = 'Fix-HNS-State.ps1'

    ISOLATION_WARNING: str = 'stats limited under isolation'
    DEFAULT_ERROR_MESSAGE: str = 'Deployment failed'


CTE: Constants = Constants()
