from .domain import (
    RuntimeContext,
    ConfigSource,
    ResolvedConfiguration,
    LoadResult,
    ApplicationConfigurationOptions
)
from .validators import (
    ParseVariableError,
    CombinedParseVariableError,
    ConfigurationDeclarationError
)
from .variables import (
    Rule,
    Declaration,
    VariableParser,
    declare,
    maybe,
    defined,
    optional,
    required,
    production,
    string,
    boolean,
    number,
    url,
    urlstring
)
from .resolver import resolve, candidate_sources, parse_variables, ParseFunction
from .env_snapshot import (
    get_environment_source,
    reset_environment_source_for_testing,
    resolve_context
)
from .file_source import load_file_source, default_config_files
from .application_configuration import make_application_configuration
from .logger import EnvConfigLogger, get_logger, set_log_level, get_log_level
from .sensitive import mask_value, set_log_mask

__all__ = [
    "RuntimeContext",
    "ConfigSource",
    "ResolvedConfiguration",
    "LoadResult",
    "ApplicationConfigurationOptions",
    "ParseVariableError",
    "CombinedParseVariableError",
    "ConfigurationDeclarationError",
    "Rule",
    "Declaration",
    "VariableParser",
    "declare",
    "maybe",
    "defined",
    "optional",
    "required",
    "production",
    "string",
    "boolean",
    "number",
    "url",
    "urlstring",
    "resolve",
    "candidate_sources",
    "parse_variables",
    "ParseFunction",
    "get_environment_source",
    "reset_environment_source_for_testing",
    "resolve_context",
    "load_file_source",
    "default_config_files",
    "make_application_configuration",
    "EnvConfigLogger",
    "get_logger",
    "set_log_level",
    "get_log_level",
    "mask_value",
    "set_log_mask"
]
