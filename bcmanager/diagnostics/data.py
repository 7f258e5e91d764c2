"""
    Data structures for the diagnosis of network stack failures
"""
from pydantic import field_validator, model_validator
from strenum import StrEnum

from bcmanager.common.base_model import BCFrozenModel


class ErrorType(StrEnum):
    PORT_CONFLICT = 'port_conflict'
    ENDPOINT_CREATION_FAILURE = 'endpoint_creation_failure'
    NAT_MAPPING_CONFLICT = 'nat_mapping_conflict'
    SERVICE_FAILURE = 'service_failure'
    UNKNOWN_NETWORK_FAILURE = 'unknown_network_failure'


class Severity(StrEnum):
    CRITICAL = 'critical'
    WARNING = 'warning'
    INFO = 'info'


class SuggestionAction(StrEnum):
    RUN_DIAGNOSTICS = 'run_diagnostics'
    RUN_FIX_SCRIPT = 'run_fix_script'
    RETRY_DEPLOYMENT = 'retry_deployment'
    CHANGE_PORTS = 'change_ports'
    RESTART_SERVICE = 'restart_service'
    MANUAL_INTERVENTION = 'manual_intervention'


class RemediationSuggestion(BCFrozenModel):
    """
    One remediation step offered to the user. Automated steps other than a plain retry run an external script,
    which has to be referenced.
    """
    title: str
    description: str
    automated: bool = False
    action: SuggestionAction | None = None
    script_reference: str | None = None

    @field_validator('title', 'description')
    @classmethod
    def non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError('must not be empty')
        return v

    @model_validator(mode='after')
    def automated_requires_script(self):
        if self.automated and self.action != SuggestionAction.RETRY_DEPLOYMENT and not self.script_reference:
            raise ValueError(f'Automated suggestion "{self.title}" needs a script reference')
        return self


class ErrorDiagnosis(BCFrozenModel):
    type: ErrorType
    severity: Severity
    message: str
    error_code: str | None = None
    affected_ports: tuple[int, ...] = ()
    suggestions: tuple[RemediationSuggestion, ...] = ()
