"""Process environment snapshot and runtime context."""
import os
from types import MappingProxyType
from typing import Mapping, Optional

from .domain import RuntimeContext
from .logger import get_logger

logger = get_logger()

APP_ENV_VAR = "APP_ENV"
PRODUCTION_MARKER = RuntimeContext.PRODUCTION.value

_environment_source: Optional[Mapping[str, str]] = None


def get_environment_source() -> Mapping[str, str]:
    """
    Read-only copy of os.environ, taken on first use.

    Later changes to os.environ are not reflected until
    reset_environment_source_for_testing() is called.
    """
    global _environment_source
    if _environment_source is None:
        _environment_source = MappingProxyType(dict(os.environ))
        logger.debug(f"Environment snapshot taken: {len(_environment_source)} vars")
    return _environment_source


def reset_environment_source_for_testing() -> None:
    # Test isolation only
    global _environment_source
    _environment_source = None


def resolve_context(environment: Optional[Mapping[str, str]] = None) -> RuntimeContext:
    """Production iff APP_ENV is exactly 'production'."""
    if environment is None:
        environment = get_environment_source()
    return RuntimeContext.from_value(environment.get(APP_ENV_VAR))
