"""
bcmanager logging

Every module gets its own logger writing to stdout and, unless disabled, warnings and errors to a rotating
`<module>.log` file in the log directory.
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Only modified through set_logging_configuration. Loggers created before a change keep their handlers until
# recompute_bcmanager_loggers() is called
_DEBUG: bool = False
_LOG_LEVEL: int = logging.INFO
_DISABLE_FILE_LOGGING: bool = False

_MAX_LOG_FILE_SIZE: int = 5 * 1024 * 1024

if os.getenv('TOX_TESTENV'):
    _LOG_PATH: Path = Path('/tmp/bcmanager/')
else:
    _LOG_PATH: Path = Path.home() / '.bcmanager' / 'logs'

COMMON_LOG_FORMATTER: logging.Formatter = \
    logging.Formatter('[%(asctime)s - %(levelname)s - %(name)s/%(funcName)s]: %(message)s')


def set_logging_configuration(debug: bool,
                              log_path: str | Path = _LOG_PATH,
                              log_level: int | None = _LOG_LEVEL,
                              disable_file_logging: bool = _DISABLE_FILE_LOGGING) -> None:
    global _DEBUG, _LOG_LEVEL, _LOG_PATH, _DISABLE_FILE_LOGGING
    _DEBUG = debug
    _LOG_LEVEL = log_level if log_level is not None else logging.INFO
    _DISABLE_FILE_LOGGING = disable_file_logging
    _LOG_PATH = Path(log_path)

    if not _DISABLE_FILE_LOGGING and not _LOG_PATH.exists():
        logging.warning(f"Log directory {log_path} doesn't exist, creating it.")
        _LOG_PATH.mkdir(parents=True)


def _module_file_name(logger_name: str) -> str:
    """ 'bcmanager.stats.normalizer' -> 'normalizer', 'bcmanager.monitor.__init__' -> 'monitor_init' """
    *parents, last = logger_name.split('.')
    if last in ('__init__', '__main__') and parents:
        return f'{parents[-1]}_{last.strip("_")}'
    return last


def _file_handler(file_name: str) -> RotatingFileHandler | None:
    try:
        _LOG_PATH.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(_LOG_PATH / f'{file_name}.log', maxBytes=_MAX_LOG_FILE_SIZE)
    except OSError as ex:
        logging.warning(f"Cannot write logs to {_LOG_PATH}, file logging disabled for {file_name}: {ex}")
        return None

    handler.setFormatter(COMMON_LOG_FORMATTER)
    handler.setLevel(_LOG_LEVEL if _DEBUG else logging.WARNING)
    return handler


def _console_handler() -> logging.StreamHandler:
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(COMMON_LOG_FORMATTER)
    handler.setLevel(logging.DEBUG if _DEBUG else _LOG_LEVEL)
    return handler


def get_bcmanager_logger(name: str | None = None) -> logging.Logger:
    """
    Returns the logger `name` (usually the module `__name__`, the root logger when None) configured with the
    current settings. Existing handlers of that logger are replaced.
    """
    configured = logging.getLogger(name)
    configured.propagate = False
    configured.setLevel(logging.DEBUG if _DEBUG else _LOG_LEVEL)
    configured.handlers.clear()
    configured.addHandler(_console_handler())

    if not _DISABLE_FILE_LOGGING:
        handler = _file_handler(_module_file_name(name) if name else 'bcmanager')
        if handler is not None:
            configured.addHandler(handler)

    return configured


def recompute_bcmanager_loggers():
    """ Re-applies the current configuration to the already created bcmanager loggers """
    for name, existing in list(logging.root.manager.loggerDict.items()):
        if isinstance(existing, logging.Logger) and name.startswith(('bcmanager.', '__main__')):
            get_bcmanager_logger(name)
