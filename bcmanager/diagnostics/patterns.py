"""
Known network stack failure signatures, most specific first.

ERROR_PATTERNS is evaluated in order and the first signature found in the output wins, so a line like
"network error - port already exists" is a port conflict and not a generic network failure.
"""
import re
from dataclasses import dataclass

from bcmanager.diagnostics.data import ErrorType, Severity


@dataclass(frozen=True)
class ErrorPattern:
    error_type: ErrorType
    severity: Severity
    regex: re.Pattern

    def search(self, text: str) -> re.Match | None:
        return self.regex.search(text)


def _pattern(error_type: ErrorType, severity: Severity, expression: str) -> ErrorPattern:
    return ErrorPattern(error_type, severity, re.compile(expression, re.IGNORECASE | re.MULTILINE))


_FAILURE_WORDS = r'(?:error|fail|exception)'
_NETWORK_WORDS = r'\b(?:ports?|networks?|networking|nat|hns|endpoints?)\b'

ERROR_PATTERNS: tuple[ErrorPattern, ...] = (
    _pattern(ErrorType.PORT_CONFLICT, Severity.CRITICAL,
             r'\bport\s+already\s+exists(?:\s*\(?\s*0x[0-9a-f]{8}\s*\)?)?'),
    _pattern(ErrorType.ENDPOINT_CREATION_FAILURE, Severity.CRITICAL,
             r'failed\s+to\s+create\s+(?:network\s+)?endpoint'),
    _pattern(ErrorType.NAT_MAPPING_CONFLICT, Severity.CRITICAL,
             r'\bnat\b.*?mapping.*?already.*?exists'),
    # Host network service down
    _pattern(ErrorType.SERVICE_FAILURE, Severity.CRITICAL,
             r'host\s+network\s+service|\bhns\b.*?not.*?running|\bhns\b.*?service'),
    # Container engine unreachable
    _pattern(ErrorType.SERVICE_FAILURE, Severity.CRITICAL,
             r'docker.*?not.*?running|cannot\s+connect.*?docker|is\s+the\s+docker\s+daemon\s+running'),
    # Any single line mentioning both a failure and the network
    _pattern(ErrorType.UNKNOWN_NETWORK_FAILURE, Severity.WARNING,
             rf'^(?=.*{_FAILURE_WORDS})(?=.*{_NETWORK_WORDS}).*$'),
)
