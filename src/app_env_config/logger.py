"""
Console logging for configuration loading and resolution.

Level and prefix come from ENV_CONFIG_LOG_LEVEL and ENV_CONFIG_LOG_PREFIX.
Errors and warnings go to stderr, everything else to stdout.
"""
import os
import sys
from typing import Dict, Literal, TextIO

LogLevel = Literal['silent', 'error', 'warn', 'info', 'debug', 'trace']

LOG_LEVELS: Dict[str, int] = {
    'silent': 0,
    'error': 1,
    'warn': 2,
    'info': 3,
    'debug': 4,
    'trace': 5
}

DEFAULT_LEVEL: LogLevel = 'info'
DEFAULT_PREFIX = '[env-config]'


def _check_level(level: str) -> LogLevel:
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}, expected one of {list(LOG_LEVELS)}")
    return level  # type: ignore


class EnvConfigLogger:
    def __init__(self, level: LogLevel = DEFAULT_LEVEL, prefix: str = DEFAULT_PREFIX):
        self.level = _check_level(level)
        self.prefix = prefix

    @classmethod
    def from_environment(cls) -> 'EnvConfigLogger':
        # An unrecognised ENV_CONFIG_LOG_LEVEL falls back to the default
        level = os.getenv('ENV_CONFIG_LOG_LEVEL', '').lower()
        return cls(
            level=level if level in LOG_LEVELS else DEFAULT_LEVEL,  # type: ignore
            prefix=os.getenv('ENV_CONFIG_LOG_PREFIX', DEFAULT_PREFIX),
        )

    def is_enabled(self, level: LogLevel) -> bool:
        return 0 < LOG_LEVELS[level] <= LOG_LEVELS[self.level]

    def _emit(self, level: LogLevel, message: str, stream: TextIO) -> None:
        if self.is_enabled(level):
            print(f"{self.prefix} {message}", file=stream)

    def error(self, message: str) -> None:
        self._emit('error', message, sys.stderr)

    def warn(self, message: str) -> None:
        self._emit('warn', message, sys.stderr)

    def info(self, message: str) -> None:
        self._emit('info', message, sys.stdout)

    def debug(self, message: str) -> None:
        self._emit('debug', message, sys.stdout)

    def trace(self, message: str) -> None:
        self._emit('trace', message, sys.stdout)


_logger = EnvConfigLogger.from_environment()


def get_logger() -> EnvConfigLogger:
    return _logger


def get_log_level() -> LogLevel:
    return _logger.level


def set_log_level(level: LogLevel) -> None:
    """Raises ValueError for anything but silent/error/warn/info/debug/trace."""
    _logger.level = _check_level(level)
