"""Data models for app_env_config."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Union


class RuntimeContext(str, Enum):
    PRODUCTION = "production"
    DEVELOPMENT = "development"

    @classmethod
    def from_value(cls, value: Union['RuntimeContext', str, None]) -> 'RuntimeContext':
        """Anything other than the exact production marker is development."""
        if value == cls.PRODUCTION:
            return cls.PRODUCTION
        return cls.DEVELOPMENT


# A flat map of variable name -> raw string value
ConfigSource = Mapping[str, str]

# Read-only map of variable name -> typed value, in declaration order
ResolvedConfiguration = Mapping[str, Any]

LoggerFn = Callable[[str], None]


@dataclass
class LoadResult:
    """Result of loading the file-based configuration source."""
    files_loaded: List[str] = field(default_factory=list)
    files_missing: List[str] = field(default_factory=list)
    defaults_file: Optional[str] = None
    defaults_applied: bool = False
    total_vars_loaded: int = 0


@dataclass
class ApplicationConfigurationOptions:
    include_defaults_on_missing_file: bool = True
    logger_fn: Optional[LoggerFn] = None
    # Overrides for the process environment snapshot and the derived context
    environment: Optional[Mapping[str, str]] = None
    context: Optional[RuntimeContext] = None
    base_dir: Optional[str] = None
