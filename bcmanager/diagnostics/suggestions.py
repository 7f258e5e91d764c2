"""
Remediation suggestions offered for each kind of network failure.

Each failure type has a fixed, ordered list of steps: cheapest and least intrusive first. Unclassified failures
only get the diagnostics step, nothing that changes the host networking state.
"""
from posixpath import join

from bcmanager.common.base_model import BCFrozenModel
from bcmanager.common.constants import CTE
from bcmanager.diagnostics.data import ErrorType, RemediationSuggestion, SuggestionAction


class RemediationScripts(BCFrozenModel):
    """ Location of the external scripts the automated suggestions point to """
    scripts_directory: str = CTE.SCRIPTS_DIRECTORY
    diagnostics_script: str = CTE.DIAGNOSTICS_SCRIPT
    fix_script: str = CTE.FIX_SCRIPT

    @property
    def diagnostics(self) -> str:
        return join(self.scripts_directory, self.diagnostics_script) if self.scripts_directory \
            else self.diagnostics_script

    @property
    def fix(self) -> str:
        return join(self.scripts_directory, self.fix_script) if self.scripts_directory else self.fix_script


def _run_diagnostics(scripts: RemediationScripts, description: str) -> RemediationSuggestion:
    return RemediationSuggestion(action=SuggestionAction.RUN_DIAGNOSTICS,
                                 title='Run Network Diagnostics',
                                 description=description,
                                 automated=True,
                                 script_reference=scripts.diagnostics)


def _retry() -> RemediationSuggestion:
    return RemediationSuggestion(action=SuggestionAction.RETRY_DEPLOYMENT,
                                 title='Retry Deployment',
                                 description='After cleanup, retry the container deployment',
                                 automated=True)


def _port_conflict(scripts: RemediationScripts) -> list[RemediationSuggestion]:
    return [
        _run_diagnostics(scripts, 'Analyze HNS state to identify orphaned endpoints and port conflicts'),
        RemediationSuggestion(action=SuggestionAction.RUN_FIX_SCRIPT,
                              title='Clean HNS State',
                              description='Remove orphaned endpoints and NAT mappings, then restart services',
                              automated=True,
                              script_reference=scripts.fix),
        RemediationSuggestion(action=SuggestionAction.CHANGE_PORTS,
                              title='Change Port Assignment',
                              description='Deploy the container on ports that are not reserved by another '
                                          'container or host service'),
        _retry(),
    ]


def _endpoint_creation_failure(scripts: RemediationScripts) -> list[RemediationSuggestion]:
    return [
        _run_diagnostics(scripts, 'Check for orphaned HNS endpoints'),
        RemediationSuggestion(action=SuggestionAction.RUN_FIX_SCRIPT,
                              title='Clean HNS Endpoints',
                              description='Remove all orphaned endpoints and restart HNS service',
                              automated=True,
                              script_reference=scripts.fix),
        _retry(),
    ]


def _nat_mapping_conflict(scripts: RemediationScripts) -> list[RemediationSuggestion]:
    return [
        _run_diagnostics(scripts, 'List the NAT static mappings that collide with the container ports'),
        RemediationSuggestion(action=SuggestionAction.RUN_FIX_SCRIPT,
                              title='Clear NAT Mappings',
                              description='Remove conflicting NAT static mappings in BC port range',
                              automated=True,
                              script_reference=scripts.fix),
    ]


def _service_failure(scripts: RemediationScripts) -> list[RemediationSuggestion]:
    return [
        RemediationSuggestion(action=SuggestionAction.RESTART_SERVICE,
                              title='Restart HNS and Docker',
                              description='Restart the Host Network Service and Docker Engine',
                              automated=True,
                              script_reference=scripts.fix),
        RemediationSuggestion(action=SuggestionAction.RESTART_SERVICE,
                              title='Start Docker Service',
                              description='Ensure Docker Desktop is running and responsive',
                              automated=False),
    ]


def _unknown_network_failure(scripts: RemediationScripts) -> list[RemediationSuggestion]:
    return [_run_diagnostics(scripts, 'Analyze the network state to identify the issue')]


_SUGGESTIONS = {
    ErrorType.PORT_CONFLICT: _port_conflict,
    ErrorType.ENDPOINT_CREATION_FAILURE: _endpoint_creation_failure,
    ErrorType.NAT_MAPPING_CONFLICT: _nat_mapping_conflict,
    ErrorType.SERVICE_FAILURE: _service_failure,
    ErrorType.UNKNOWN_NETWORK_FAILURE: _unknown_network_failure,
}


def suggestions_for(error_type: ErrorType | str,
                    scripts: RemediationScripts | None = None) -> tuple[RemediationSuggestion, ...]:
    """
    Args:
        error_type: kind of failure
        scripts: where the remediation scripts live, defaults to the bundled scripts directory

    Returns: the ordered remediation steps for the failure type

    """
    return tuple(_SUGGESTIONS[ErrorType(error_type)](scripts or RemediationScripts()))
