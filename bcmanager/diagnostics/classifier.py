"""
Network failure classification

Looks at the captured output of a failed deployment and recognises the known failures of the host networking
stack (HNS port conflicts, endpoint creation failures, NAT mapping conflicts, services down). Produces at most
one ErrorDiagnosis with the error code, the container ports involved and the remediation steps.
"""
import logging
import re
from typing import Iterable

from bcmanager.common.bcmanager_logging import get_bcmanager_logger
from bcmanager.common.constants import CTE
from bcmanager.diagnostics.data import ErrorDiagnosis
from bcmanager.diagnostics.patterns import ERROR_PATTERNS, ErrorPattern
from bcmanager.diagnostics.suggestions import RemediationScripts, suggestions_for

logger: logging.Logger = get_bcmanager_logger(__name__)

ERROR_CODE_REGEX: re.Pattern = re.compile(r'(?<![0-9a-z])0x[0-9a-f]{8}(?![0-9a-f])', re.IGNORECASE)
PORT_TOKEN_REGEX: re.Pattern = re.compile(r'\b\d{1,5}\b')
LOG_TAG_PREFIX_REGEX: re.Pattern = re.compile(r'^\s*(?:\[[^\]]*\]\s*)+')

DEFAULT_PORT_RANGE: range = range(CTE.PORT_RANGE_START, CTE.PORT_RANGE_END + 1)


def strip_log_prefix(line: str) -> str:
    """ Removes the leading bracketed tags of a log line, e.g. '[ERROR] ' or '[10:00:01] [WARN] ' """
    return LOG_TAG_PREFIX_REGEX.sub('', line).strip()


def matched_region(text: str, match: re.Match) -> str:
    """ Returns the full line(s) of text covering the match """
    start = text.rfind('\n', 0, match.start()) + 1
    end = text.find('\n', match.end())
    return text[start:] if end < 0 else text[start:end]


def extract_error_code(text: str) -> str | None:
    match = ERROR_CODE_REGEX.search(text)
    return match.group(0).lower() if match else None


def extract_ports(text: str, port_range: range = DEFAULT_PORT_RANGE) -> tuple[int, ...]:
    """
    Collects the integers of the text that fall inside the port range, in order of appearance and without
    duplicates. Hex codes and digit runs longer than a port number are not tokens.
    """
    ports: dict[int, None] = {}
    for token in PORT_TOKEN_REGEX.findall(text):
        port = int(token)
        if port in port_range:
            ports.setdefault(port)
    return tuple(ports)


def extract_message(region: str) -> str:
    lines = [strip_log_prefix(line) for line in region.splitlines()]
    message = ' '.join(line for line in lines if line)
    return message or CTE.DEFAULT_ERROR_MESSAGE


class NetworkErrorClassifier:
    """
    Stateless classifier, safe to share between threads.

    Args:
        port_range: inclusive band of container ports reported in affected_ports
        scripts: remediation scripts referenced by the suggestions
        patterns: ordered failure signatures, first match wins
    """

    def __init__(self,
                 port_range: range = DEFAULT_PORT_RANGE,
                 scripts: RemediationScripts | None = None,
                 patterns: tuple[ErrorPattern, ...] = ERROR_PATTERNS):
        self.port_range = port_range
        self.scripts = scripts or RemediationScripts()
        self.patterns = patterns

    def classify(self, lines: Iterable[str]) -> ErrorDiagnosis | None:
        """
        Args:
            lines: captured output, in order

        Returns: the diagnosis of the first known failure found, None when the output shows no known failure

        """
        if isinstance(lines, str):
            lines = lines.splitlines()

        text = '\n'.join(line for line in lines if line is not None)
        if not text.strip():
            return None

        for pattern in self.patterns:
            match = pattern.search(text)
            if match is None:
                continue

            logger.debug(f'Output matches {pattern.error_type} signature: {match.group(0)!r}')
            return self._build_diagnosis(pattern, text, matched_region(text, match))

        return None

    def _build_diagnosis(self, pattern: ErrorPattern, text: str, region: str) -> ErrorDiagnosis:
        return ErrorDiagnosis(type=pattern.error_type,
                              severity=pattern.severity,
                              message=extract_message(region),
                              error_code=extract_error_code(region),
                              affected_ports=extract_ports(text, self.port_range),
                              suggestions=suggestions_for(pattern.error_type, self.scripts))


_default_classifier = NetworkErrorClassifier()


def classify(lines: Iterable[str]) -> ErrorDiagnosis | None:
    return _default_classifier.classify(lines)
