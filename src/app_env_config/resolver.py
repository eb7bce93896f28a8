"""Resolve declared variables against the environment and file sources."""

from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from .domain import ConfigSource, ResolvedConfiguration, RuntimeContext
from .logger import get_logger
from .sensitive import mask_value
from .validators import (
    CombinedParseVariableError,
    ConfigurationDeclarationError,
    ParseVariableError,
)
from .variables import Declaration, Rule

logger = get_logger()

Declarations = Mapping[str, Declaration]
Context = Union[RuntimeContext, str, None]


def candidate_sources(
    rule: Rule,
    environment: ConfigSource,
    file: ConfigSource,
    context: Context = None
) -> List[ConfigSource]:
    """
    Sources to consult for a rule, from most to least authoritative.

    In production, production-rule variables must come from the environment
    only, never from (version controlled) files.
    """
    if rule == Rule.PRODUCTION and RuntimeContext.from_value(context) == RuntimeContext.PRODUCTION:
        return [environment]
    return [environment, file]


def resolve(
    declarations: Declarations,
    environment: ConfigSource,
    file: ConfigSource,
    context: Context = None
) -> ResolvedConfiguration:
    """
    Resolve every declared variable.

    Raises CombinedParseVariableError listing every variable that failed.
    Exceptions other than ParseVariableError raised by a parser propagate as-is.
    """
    result: Dict[str, Any] = {}
    errors: List[ParseVariableError] = []

    for key, (rule, parse) in declarations.items():
        sources = candidate_sources(rule, environment, file, context)

        # First source containing the key; an empty string is a value
        value: Optional[str] = None
        origin = "none"
        for index, source in enumerate(sources):
            if key in source:
                value = source[key]
                origin = "environment" if index == 0 else "file"
                break

        try:
            result[key] = parse(value)
        except ParseVariableError as e:
            logger.debug(f"INVALID: {key} ({e.reason})")
            errors.append(ParseVariableError(f"{key} is invalid: {e.reason}", key=key, reason=e.reason))
            continue

        if logger.is_enabled("trace"):
            logger.trace(f"RESOLVED: {key} = {mask_value(key, result[key])} (source: {origin}, rule: {rule})")

    if errors:
        raise CombinedParseVariableError(errors)

    return MappingProxyType(result)


class ParseFunction:
    """A declaration table bound to ``resolve``.

    Call it with ``(environment, file, context)`` to resolve the table.
    """

    def __init__(self, declarations: Declarations):
        if not isinstance(declarations, Mapping):
            raise ConfigurationDeclarationError(
                f"Declarations must be a mapping, got {type(declarations).__name__}"
            )
        checked: Dict[str, Declaration] = {}
        for key, declaration in declarations.items():
            if not isinstance(key, str):
                raise ConfigurationDeclarationError(f"Variable name must be a string: {key!r}")
            if not isinstance(declaration, Declaration):
                raise ConfigurationDeclarationError(
                    f"{key} is not declared with optional(), required(), production() or declare()"
                )
            try:
                rule = Rule(declaration.rule)
            except ValueError:
                raise ConfigurationDeclarationError(f"{key} has an unknown rule: {declaration.rule!r}")
            checked[key] = Declaration(rule, declaration.parser)
        self._declarations: Declarations = MappingProxyType(checked)

    @property
    def declarations(self) -> Declarations:
        return self._declarations

    def keys(self) -> List[str]:
        return list(self._declarations)

    def __iter__(self) -> Iterator[str]:
        return iter(self._declarations)

    def __call__(
        self,
        environment: ConfigSource,
        file: ConfigSource,
        context: Context = None
    ) -> ResolvedConfiguration:
        return resolve(self._declarations, environment, file, context)


def parse_variables(declarations: Declarations) -> ParseFunction:
    return ParseFunction(declarations)
