"""
Arglet faults (user-input errors and warnings) and their rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue, grouped by
  domain so logs and tests can match on them.
- ParserException / ParserWarning: base types carrying a message plus a read-only
  options mapping (code, input, parser, shell, colorful, ...).
- trigger(): single entry point that surfaces a fault with runtime options.

Behavior
- Shell mode (the default for parsers): an exception prints one line
  "error: <message>" to stderr and terminates the process with status 1; a warning
  prints "warning: <message>" and parsing carries on.
- Embedded mode (shell=False): exceptions are raised to the caller and warnings go
  through the warnings module.

Styling
- Output is plain unless colorful=True. Hosts can override the palette with a
  __styles__ mapping in __main__ (keys: error-label, error-message,
  warning-label, warning-message).
"""
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True, highlight=False)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the parser (stable identifiers).

    grouping
    - routing (1110x): UNKNOWN_COMMAND, MISSING_HELP_TARGET
    - switches (1111x): UNKNOWN_SWITCH, FLAG_ASSIGNMENT, MISSING_INLINE_VALUE,
      OPTION_VALUE_REQUIRED
    - values (1112x): MALFORMED_NUMBER, NUMBER_OUT_OF_RANGE
    - host errors (1115x): UNREGISTERED_NAME
    - warnings (12xxx): SHADOWED_NAME
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND       = 11101
    MISSING_HELP_TARGET   = 11102

    # --- switch/flag/option errors (11xxx) ---
    UNKNOWN_SWITCH        = 11112
    FLAG_ASSIGNMENT       = 11113
    MISSING_INLINE_VALUE  = 11114
    OPTION_VALUE_REQUIRED = 11117

    # --- value conversion errors (11xxx) ---
    MALFORMED_NUMBER      = 11126
    NUMBER_OUT_OF_RANGE   = 11127

    # --- host programming errors (11xxx) ---
    UNREGISTERED_NAME     = 11151

    # --- warnings (12xxx) ---
    SHADOWED_NAME         = 12113


def _palette(defaults, /):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


class ParserException(Exception):
    """
    Base class of every fatal user-input error raised while parsing or inspecting.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        styles = _palette({
            "error-label": "bold #FF4DA6",
            "error-message": "#C8C8D0",
        })

        def styler(style):
            return styles[style] if self.options.get("colorful", False) else ""

        return Text.assemble(
            ("error:", styler("error-label")),
            " ",
            (coalesce(self.message, ""), styler("error-message")),
        )

    def __trigger__(self) -> None:
        if not self.options.get("shell", True):
            raise self from None
        console.print(self, soft_wrap=True)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownSwitchError(ParserException): ...
class FlagAssignmentError(ParserException): ...
class MissingInlineValueError(ParserException): ...
class OptionValueRequiredError(ParserException): ...
class UnknownCommandError(ParserException): ...
class MissingCommandError(ParserException): ...
class MalformedNumberError(ParserException): ...
class NumberRangeError(ParserException): ...
class UnregisteredNameError(ParserException): ...


class ParserWarning(Warning):
    """
    Base class of non-fatal diagnostics; rendered with a "warning:" label.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        styles = _palette({
            "warning-label": "bold #FFB400",
            "warning-message": "#D6D6DE",
        })

        def styler(style):
            return styles[style] if self.options.get("colorful", False) else ""

        return Text.assemble(
            ("warning:", styler("warning-label")),
            " ",
            (coalesce(self.message, ""), styler("warning-message")),
        )

    def __trigger__(self) -> None:
        if not self.options.get("shell", True):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self, soft_wrap=True)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ShadowedNameWarning(ParserWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault through __replace__ before triggering.
    - shell=False raises exceptions (and warns through the warnings module);
      otherwise the fault is printed to stderr and exceptions exit with status 1.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "ParserException",
    "UnknownSwitchError",
    "FlagAssignmentError",
    "MissingInlineValueError",
    "OptionValueRequiredError",
    "UnknownCommandError",
    "MissingCommandError",
    "MalformedNumberError",
    "NumberRangeError",
    "UnregisteredNameError",
    "ParserWarning",
    "ShadowedNameWarning",
    "FaultCode",
    "trigger",
)
