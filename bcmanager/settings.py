import logging

from pydantic import Field, field_validator, model_validator
from pydantic_settings import SettingsConfigDict

from bcmanager.common.constants import CTE
from bcmanager.common.settings_parser import BCBaseSettings
from bcmanager.diagnostics.suggestions import RemediationScripts


class ManagerSettings(BCBaseSettings):
    """
    Settings of the bcmanager telemetry and diagnosis core. Every field can be overridden with an environment
    variable prefixed with BCMANAGER_ (e.g. BCMANAGER_STATS_TIMEOUT=10).

    Attributes:
        log_level (str): Log level name. Default value is "INFO".
        debug (bool): Enables debug logging on console and files.
        logging_directory (Optional[str]): Directory for the log files, defaults to ~/.bcmanager/logs.
        disable_file_logging (bool): Only log to console.

        stats_timeout (float): Seconds to wait for the container engine stats of one container.
        refresh_interval (float): Seconds between two polls of the container stats monitor.
        primary_interfaces (list[str]): Interface names preferred for the network counters, in order.

        port_range_start (int): First port of the container port band (inclusive).
        port_range_end (int): Last port of the container port band (inclusive).

        scripts_directory (str): Directory of the remediation scripts.
        diagnostics_script (str): Script file running the network diagnostics.
        fix_script (str): Script file cleaning the host network state.
    """
    model_config = SettingsConfigDict(env_prefix='BCMANAGER_')

    log_level: str = "INFO"
    debug: bool = False
    logging_directory: str | None = None
    disable_file_logging: bool = False

    stats_timeout: float = Field(CTE.STATS_TIMEOUT, gt=0)
    refresh_interval: float = Field(CTE.REFRESH_INTERVAL, gt=0)
    primary_interfaces: list[str] = Field(default_factory=lambda: list(CTE.PRIMARY_INTERFACES))

    port_range_start: int = Field(CTE.PORT_RANGE_START, ge=1, le=65535)
    port_range_end: int = Field(CTE.PORT_RANGE_END, ge=1, le=65535)

    scripts_directory: str = CTE.SCRIPTS_DIRECTORY
    diagnostics_script: str = CTE.DIAGNOSTICS_SCRIPT
    fix_script: str = CTE.FIX_SCRIPT

    @field_validator('log_level', mode='after')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f'Unknown log level {v}')
        return level

    @model_validator(mode='after')
    def validate_port_range(self):
        if self.port_range_start > self.port_range_end:
            raise ValueError(f'Port range start ({self.port_range_start}) is greater than '
                             f'its end ({self.port_range_end})')
        return self

    @property
    def port_range(self) -> range:
        return range(self.port_range_start, self.port_range_end + 1)

    @property
    def log_level_value(self) -> int:
        return logging.getLevelName(self.log_level)

    def remediation_scripts(self) -> RemediationScripts:
        return RemediationScripts(scripts_directory=self.scripts_directory,
                                  diagnostics_script=self.diagnostics_script,
                                  fix_script=self.fix_script)
