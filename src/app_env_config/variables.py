"""Variable declarations and the built-in value parsers.

A declaration pairs a requirement rule with a parser::

    DECLARATIONS = {
        "DATABASE_URL": production(url),
        "PORT": required(number),
        "DEBUG": optional(boolean),
    }
"""
import math
import re
from enum import Enum
from typing import Any, Callable, NamedTuple, Optional, TypeVar
from urllib.parse import ParseResult, urlparse, urlunparse

from .validators import ParseVariableError

T = TypeVar("T")

NOT_SET_MESSAGE = "environment variable is not set properly"

NUMBER_PATTERN = re.compile(
    r"^(?:(?P<int>[+-]?\d+)|[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?)$",
    re.ASCII,
)


class Rule(str, Enum):
    PRODUCTION = "production"
    DEFAULT = "default"


VariableParser = Callable[[Optional[str]], Any]


class Declaration(NamedTuple):
    rule: Rule
    parser: VariableParser


def declare(rule: Rule, parser: VariableParser) -> Declaration:
    return Declaration(Rule(rule), parser)


def maybe(f: Callable[[str], T]) -> Callable[[Optional[str]], Optional[T]]:
    """Absent values resolve to None, present values go through ``f``."""
    def parse(value: Optional[str]) -> Optional[T]:
        return None if value is None else f(value)
    return parse


def defined(f: Callable[[str], T]) -> Callable[[Optional[str]], T]:
    """Absent values are an error, present values go through ``f``."""
    def parse(value: Optional[str]) -> T:
        if value is None:
            raise ParseVariableError(NOT_SET_MESSAGE)
        return f(value)
    return parse


def production(f: Callable[[str], T]) -> Declaration:
    """
    Mark the variable as required in production.

    In production the value must come from the process environment; config
    files are not consulted. In other contexts files act as a fallback, so the
    variable behaves like ``required``.
    """
    return Declaration(Rule.PRODUCTION, defined(f))


def optional(f: Callable[[str], T]) -> Declaration:
    """Mark the variable as optional in all contexts."""
    return Declaration(Rule.DEFAULT, maybe(f))


def required(f: Callable[[str], T]) -> Declaration:
    """Mark the variable as required in all contexts."""
    return Declaration(Rule.DEFAULT, defined(f))


def string(value: str) -> str:
    return value


def boolean(value: str) -> bool:
    if value == "true" or value == "false":
        return value == "true"
    raise ParseVariableError(f"Non-boolean value found: {value}")


def number(value: str) -> Any:
    """Cast to int for integer literals, float otherwise. Must be finite.

    Only plain ASCII decimal notation is accepted, surrounding whitespace
    aside: no digit separators, no hex, no inf/nan spellings.
    """
    match = NUMBER_PATTERN.match(value.strip())
    if not match:
        raise ParseVariableError(f"Non-number value found: {value}")
    if match.group("int"):
        return int(match.group("int"))
    n = float(match.group(0))
    if not math.isfinite(n):
        raise ParseVariableError(f"Non-number value found: {value}")
    return n


def _parse_url(value: str) -> ParseResult:
    try:
        parsed = urlparse(value)
        # Accessing port validates it
        parsed.port
    except ValueError:
        raise ParseVariableError(f"Value is not a valid URL: {value}")
    if not parsed.scheme or not parsed.netloc or any(c.isspace() for c in value):
        raise ParseVariableError(f"Value is not a valid URL: {value}")
    return parsed


def url(value: str) -> ParseResult:
    return _parse_url(value)


def urlstring(value: str) -> str:
    """Validate as ``url`` and return the normalized URL string."""
    parsed = _parse_url(value)
    normalized = parsed._replace(scheme=parsed.scheme.lower(), path=parsed.path or "/")
    return urlunparse(normalized)
