"""Build immutable configuration classes from declarations."""

import keyword
from dataclasses import field, fields, make_dataclass
from typing import Any, Mapping, Optional, Sequence, Union

from .domain import ApplicationConfigurationOptions, LoadResult, RuntimeContext
from .env_snapshot import get_environment_source, resolve_context
from .file_source import DEFAULTS_FILE, default_config_files, load_file_source
from .logger import get_logger
from .resolver import Declarations, ParseFunction, parse_variables
from .sensitive import mask_value
from .validators import ConfigurationDeclarationError

logger = get_logger()


def _check_field_names(keys: Sequence[str]) -> None:
    for key in keys:
        if not key.isidentifier() or keyword.iskeyword(key):
            raise ConfigurationDeclarationError(f"{key!r} cannot be used as a configuration field name")
        if key.startswith("_") or key in ("load_result", "context", "declarations"):
            raise ConfigurationDeclarationError(f"{key!r} is reserved")


def make_application_configuration(
    parse_function: Union[ParseFunction, Declarations],
    config_files: Optional[Sequence[str]] = None,
    defaults_file: Optional[str] = DEFAULTS_FILE,
    options: Optional[ApplicationConfigurationOptions] = None,
    class_name: str = "ApplicationConfiguration"
) -> type:
    """
    Create a configuration class for a declaration table.

    The class is a frozen dataclass with one field per declared variable.
    Values are resolved when an instance is created; a resolution failure
    raises CombinedParseVariableError from the constructor.

    Args:
        parse_function: Result of parse_variables(), or the declaration mapping itself
        config_files: .env files to read, most authoritative first.
            Defaults to ['.env.<APP_ENV>', '.env']
        defaults_file: Fallback values for keys missing from every file
        options: Loading options
        class_name: Name of the generated class
    """
    if not isinstance(parse_function, ParseFunction):
        parse_function = parse_variables(parse_function)
    opts = options or ApplicationConfigurationOptions()

    keys = parse_function.keys()
    _check_field_names(keys)

    def __post_init__(self) -> None:
        environment: Mapping[str, str] = (
            opts.environment if opts.environment is not None else get_environment_source()
        )
        context = (
            RuntimeContext.from_value(opts.context)
            if opts.context is not None
            else resolve_context(environment)
        )
        files = list(config_files) if config_files is not None else default_config_files(environment)

        file_source, load_result = load_file_source(
            files,
            defaults_file,
            include_defaults_on_missing_file=opts.include_defaults_on_missing_file,
            logger_fn=opts.logger_fn,
            base_dir=opts.base_dir,
        )
        resolved = parse_function(environment, file_source, context)

        # Frozen dataclass: bind through object.__setattr__
        for key in keys:
            object.__setattr__(self, key, resolved[key])
        object.__setattr__(self, "_load_result", load_result)
        object.__setattr__(self, "_context", context)

        logger.debug(f"{class_name} resolved {len(keys)} variables (context: {context.value})")

    def __repr__(self) -> str:
        values = ", ".join(
            f"{f.name}={mask_value(f.name, getattr(self, f.name))}" for f in fields(self)
        )
        return f"{class_name}({values})"

    def load_result(self) -> LoadResult:
        return self._load_result

    def context(self) -> RuntimeContext:
        return self._context

    return make_dataclass(
        class_name,
        [(key, Any, field(init=False)) for key in keys],
        namespace={
            "__post_init__": __post_init__,
            "__repr__": __repr__,
            "load_result": property(load_result),
            "context": property(context),
            "declarations": parse_function.declarations,
        },
        repr=False,
        frozen=True,
    )
