"""
Deployment output tracking

Accumulates the output streamed by a deployment and, when it ends with a non-zero exit status, looks for a known
network failure in the whole output.
"""
import logging

from strenum import StrEnum

from bcmanager.common.bcmanager_logging import get_bcmanager_logger
from bcmanager.diagnostics.classifier import NetworkErrorClassifier
from bcmanager.diagnostics.data import ErrorDiagnosis

logger: logging.Logger = get_bcmanager_logger(__name__)


class DeploymentStatus(StrEnum):
    IDLE = 'idle'
    RUNNING = 'running'
    SUCCESS = 'success'
    ERROR = 'error'


class DeploymentTracker:
    def __init__(self, container_name: str, classifier: NetworkErrorClassifier | None = None):
        self.container_name: str = container_name
        self.classifier: NetworkErrorClassifier = classifier or NetworkErrorClassifier()

        self.status: DeploymentStatus = DeploymentStatus.IDLE
        self.output: list[str] = []
        self.exit_code: int | None = None
        self.diagnosis: ErrorDiagnosis | None = None

    def start(self):
        """ Resets the output and the previous diagnosis """
        self.output = []
        self.exit_code = None
        self.diagnosis = None
        self.status = DeploymentStatus.RUNNING
        logger.info(f'Deployment of {self.container_name} started')

    def add_output(self, line: str):
        self.output.append(line.rstrip('\r\n'))

    def finish(self, exit_code: int) -> ErrorDiagnosis | None:
        """
        Args:
            exit_code: exit status of the deployment process

        Returns: the network failure diagnosis when the deployment failed with a known failure, else None

        """
        self.exit_code = exit_code

        if exit_code == 0:
            self.status = DeploymentStatus.SUCCESS
            logger.info(f'Deployment of {self.container_name} succeeded')
            return None

        self.status = DeploymentStatus.ERROR
        if self.output:
            self.diagnosis = self.classifier.classify(self.output)

        if self.diagnosis:
            logger.warning(f'Deployment of {self.container_name} failed ({exit_code}) with '
                           f'{self.diagnosis.type}: {self.diagnosis.message}')
        else:
            logger.warning(f'Deployment of {self.container_name} failed ({exit_code}), no known network failure')

        return self.diagnosis
