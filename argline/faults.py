"""
Argline faults and rendering.

Scope
- FaultCode: stable numeric identifiers for the failures the parser reports.
- ParseException: base type carrying a message + options; knows how to render
  itself (rich) and how to surface itself (__trigger__).
- MissingArgumentError: a required spec had no value after the token scan.
- ParseExit: exception group used when every missing spec is reported at once.
- trigger(): central entry point to surface a fault with runtime options.

Surfacing rules (options merged into the fault before triggering)
- shell=False: the fault is raised to the caller (embeddable use).
- shell=True: the fault is printed as one line on standard error and the
  process exits with status 1 (classic CLI behaviour).
- deferred=True: in shell mode, print but do not exit; the caller batches
  faults and triggers a ParseExit afterwards.
- colorful: style the line with the "error-message" palette entry.
- styles: explicit palette overrides (layered over the defaults and over a
  host-level __styles__ mapping in __main__).
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset, UnsetType

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers, searchable in logs).

    - 111xx: parse-time failures
    """
    MISSING_ARGUMENT = 11101


def _palette(options):
    return defaultdict(str, {
        "error-message": "bold #FF4DA6",
    } | getattr(__import__("__main__"), "__styles__", {}) | dict(options.get("styles") or {}))


class ParseException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | UnsetType)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        if not self.options.get("colorful", False):
            return Text(str(self.message))
        return Text(str(self.message), _palette(self.options)["error-message"])

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self, soft_wrap=True)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingArgumentError(ParseException):
    """
    a required argument was never given a value.

    options
    - name: the declared name of the missing argument.
    - code: FaultCode.MISSING_ARGUMENT.
    """

    @property
    def name(self):
        return self.options.get("name")


class ParseExit(ExceptionGroup):
    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", exceptions)

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    def derive(self, exceptions):
        return type(self)(exceptions, **self.options)

    def __rich__(self):
        return Group(*(exception.__replace__(
            colorful=self.options.get("colorful", False),
            styles=self.options.get("styles"),
        ) for exception in self.exceptions))

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self, soft_wrap=True)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.

    typical options
    - parser, shell, deferred, colorful, styles, code, name.
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
    "FaultCode",
    "ParseException",
    "MissingArgumentError",
    "ParseExit",
    "trigger",
)
