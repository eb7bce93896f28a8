"""Custom exceptions for variable parsing and resolution."""
from typing import List, Optional, Sequence


class ParseVariableError(Exception):
    """Raised when a single variable is missing or cannot be cast.

    Parsers raise it with a bare reason. The resolver re-raises it in the
    aggregate as ``"<key> is invalid: <reason>"`` with ``key`` set.
    """

    def __init__(self, message: str, key: Optional[str] = None, reason: Optional[str] = None):
        super().__init__(message)
        self.key = key
        self.reason = message if reason is None else reason

    @property
    def message(self) -> str:
        return str(self)


class CombinedParseVariableError(Exception):
    """Raised once per resolution run, carrying every failed variable."""

    def __init__(self, errors: Sequence[ParseVariableError]):
        self.causes: List[ParseVariableError] = list(errors)
        joined = ", ".join(e.message for e in self.causes)
        super().__init__(f"There were {len(self.causes)} errors while parsing. [{joined}]")

    @property
    def keys(self) -> List[Optional[str]]:
        return [e.key for e in self.causes]


class ConfigurationDeclarationError(Exception):
    """Raised when a declaration table is malformed."""
    pass
