"""
Formatting and parsing helpers shared by the bcmanager modules
"""
import math
import logging

from datetime import datetime

logger: logging.Logger = logging.getLogger(__name__)

_BYTE_UNITS: tuple[str, ...] = ('B', 'KB', 'MB', 'GB')


def format_bytes(size_bytes: float | None) -> str:
    """
    Formats a number of bytes with one decimal and the largest fitting unit (base 1024)
    :param size_bytes: amount of bytes
    :return: human readable size. Anything that is not a positive finite number, or that is beyond GB, is '0 B'
    """
    if not size_bytes or not isinstance(size_bytes, (int, float)) \
            or not math.isfinite(size_bytes) or size_bytes < 1:
        return '0 B'

    size = float(size_bytes)
    for unit in _BYTE_UNITS:
        if size < 1024.0:
            return f'{size:.1f} {unit}'
        size /= 1024.0
    return '0 B'


def format_uptime(started_at: datetime, now: datetime | None = None) -> str:
    """
    Formats the time elapsed since a container started
    :param started_at: start time of the container
    :param now: reference time, defaults to the current time
    :return: '{days}d {hours}h', '{hours}h {minutes}m' or '{minutes}m'
    """
    if now is None:
        now = datetime.now(started_at.tzinfo)

    total_minutes = max(int((now - started_at).total_seconds() // 60), 0)
    days, remainder = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(remainder, 60)

    if days > 0:
        return f'{days}d {hours}h'
    if hours > 0:
        return f'{hours}h {minutes}m'
    return f'{minutes}m'


def parse_engine_timestamp(value: str | datetime | None) -> datetime | None:
    """
    Parses the RFC 3339 timestamps returned by the container engine. The engine reports nanoseconds,
    which datetime can't hold, so the fraction is truncated to microseconds.
    :param value: timestamp string
    :return: datetime, or None when missing or malformed
    """
    if value is None or isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip().replace('Z', '+00:00')
    if '.' in text:
        head, _, rest = text.partition('.')
        offset = rest.lstrip('0123456789')
        digits = rest[:len(rest) - len(offset)]
        text = f'{head}.{digits[:6].ljust(6, "0")}{offset}'

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f'Ignoring malformed timestamp {value!r}')
        return None
