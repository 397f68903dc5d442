"""
cmdtree faults: codes, statement fault records and invariant errors.

Scope
- FaultCode: canonical, stable numeric identifiers for every way a statement can
  fail. Codes are grouped by domain so logs and searches stay predictable.
- CommandException: base type carrying a message, a code and free-form options.
  Statement faults are *recorded*, never raised: the parser reports them through
  the output sink, returns False and keeps the fault on Parser.fault so hosts
  and tests can inspect why a statement failed.
- TokenOrderError: raised; signals a broken invariant of the token stream, which
  is a programming error rather than a user mistake.

Integration
- The parser builds a fault at each failure point with the context a host may
  want (input token, candidates, suggestions, statement) and records it.
- FaultCode.normalize() lets the host remap numeric codes to friendlier labels
  through a __codes__ mapping in __main__.
"""
from enum import IntEnum
from types import MappingProxyType

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - resolution (1110x)
      • UNKNOWN_COMMAND, AMBIGUOUS_COMMAND
    - session (1110x)
      • EMPTY_HISTORY, STATEMENT_FAILED
    - delegated (1113x)
      • DELEGATED_ERROR: a command body reported failure
    - invariants (1119x)
      • TOKEN_ORDER
    """
    # --- resolution ---
    UNKNOWN_COMMAND    = 11101
    AMBIGUOUS_COMMAND  = 11103

    # --- session ---
    EMPTY_HISTORY      = 11104
    STATEMENT_FAILED   = 11105

    # --- delegated ---
    DELEGATED_ERROR    = 11131

    # --- invariants ---
    TOKEN_ORDER        = 11191

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels; otherwise the numeric value
        is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    Base fault: message + code + read-only options.

    Options are free-form context (e.g. input, candidates, suggestions,
    statement); they are exposed through a MappingProxyType.
    """
    code = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.code = options.pop("code", type(self).code)
        self.options = MappingProxyType(options)

    def __repr__(self):
        return "%s(%r, code=%s)" % (type(self).__name__, self.message, self.code)


class UnknownCommandError(CommandException):
    code = FaultCode.UNKNOWN_COMMAND


class AmbiguousCommandError(CommandException):
    code = FaultCode.AMBIGUOUS_COMMAND


class EmptyHistoryError(CommandException):
    code = FaultCode.EMPTY_HISTORY


class StatementFailedError(CommandException):
    code = FaultCode.STATEMENT_FAILED


class DelegatedCommandError(CommandException):
    code = FaultCode.DELEGATED_ERROR


class TokenOrderError(CommandException):
    code = FaultCode.TOKEN_ORDER


__all__ = (
    "FaultCode",
    "CommandException",
    "UnknownCommandError",
    "AmbiguousCommandError",
    "EmptyHistoryError",
    "StatementFailedError",
    "DelegatedCommandError",
    "TokenOrderError",
)
