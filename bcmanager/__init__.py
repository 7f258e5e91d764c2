"""
bcmanager - container telemetry normalization and network failure diagnosis for Business Central containers
"""

__version__ = "0.1.0"
