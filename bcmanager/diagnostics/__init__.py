from bcmanager.diagnostics.data import (ErrorDiagnosis, ErrorType, RemediationSuggestion, Severity,
                                        SuggestionAction)
from bcmanager.diagnostics.classifier import NetworkErrorClassifier, classify
from bcmanager.diagnostics.suggestions import RemediationScripts, suggestions_for
from bcmanager.diagnostics.formatting import error_type_description, format_ports

__all__ = ['ErrorDiagnosis', 'ErrorType', 'RemediationSuggestion', 'Severity', 'SuggestionAction',
           'NetworkErrorClassifier', 'classify', 'RemediationScripts', 'suggestions_for',
           'error_type_description', 'format_ports']
