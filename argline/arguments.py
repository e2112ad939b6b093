r"""
Argline argument specifications.

Overview
- ArgumentKind: FLAG (presence switch), KEY_VALUE (named option carrying a
  value), POSITIONAL (bare name appearing literally in the token stream).
- ArgumentSpec: one declared argument (name, symbol, kind, required, arity,
  default, help) plus the value resolved by the last parse pass.
- Single / Multiple: tagged storage for the resolved value, discriminated by
  arity (Single when arity <= 1, Multiple otherwise).

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
    the fields declared in __introspectable__ as read-only properties.

Metadata (sanitized on construction)
- name: str, stored as given; blank names are rejected.
- symbol: None | single-character str ("0" is read as None).
- required: bool (always False for flags).
- arity: int, stored as-is (positivity is not checked; only single-value
  matching is performed by the parser).
- default: None | str (always None for flags).
- help: None | str | Text.

Value states
- never matched   → spec.matched is False, spec.value is None
- matched, bare   → spec.matched is True,  spec.value is None  (e.g. "--name")
- matched, valued → spec.matched is True,  spec.value is the payload

Quick example:
    >>> spec = ArgumentSpec(ArgumentKind.KEY_VALUE, "output", "o", default="out.txt")
    >>> spec.assign("result.txt")
    >>> spec.value
    'result.txt'
"""
import functools
import operator
import re
from enum import Enum
from typing import NamedTuple

from rich.text import Text

from .utils import *


class ArgumentKind(Enum):
    """
    kind of a declared argument (drives matching, retrieval and help layout).
    """
    FLAG = "flag"
    KEY_VALUE = "key-value"
    POSITIONAL = "positional"

    @property
    def label(self):
        """
        human label used in help headings and diagnostics ("key value").
        """
        return self.value.replace("-", " ")

    def __repr__(self):
        return f"{type(self).__name__}.{self.name}"


class Single(NamedTuple):
    """
    storage for a single-valued spec.
    """
    value: str | None

    @property
    def first(self):
        return self.value

    @property
    def slots(self):
        return (self.value,)


class Multiple(NamedTuple):
    """
    storage for a spec declared with arity > 1 (one slot per expected value).
    """
    values: tuple[str | None, ...]

    @property
    def first(self):
        return self.values[0] if self.values else None

    @property
    def slots(self):
        return self.values


class ArgumentType(type):
    """
    Metaclass that turns spec classes into introspectable records.

    Responsibilities
    - derive __typename__ from the class name (camel-case split with hyphens).
    - wire read-only properties (via mirror) for every name in __introspectable__.
    - provide stable __repr__/__rich_repr__ for diagnostics and rich pretty printing.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())),
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
            yield "value", self.value
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize spec metadata in place.

    Only shape is checked here (types, non-empty name, one-character symbol).
    Name and symbol collisions and arity positivity are deliberately left to
    the caller: duplicates are resolved by declaration order at match time.

    Raises
    - TypeError: wrong type for kind/name/symbol/arity/default/help.
    - ValueError: empty name or a symbol that is not exactly one character.
    """
    if not isinstance(metadata["kind"], ArgumentKind):
        raise TypeError(f"{cls.__typename__} 'kind' must be an argument kind")

    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not name.strip():
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")

    if not isinstance(symbol := metadata["symbol"], str | None):
        raise TypeError(f"{cls.__typename__} 'symbol' must be a string")
    elif isinstance(symbol, str) and len(symbol) != 1:
        raise ValueError(f"{cls.__typename__} 'symbol' must be a single character")
    elif symbol == "0":
        # "0" declares no symbol
        metadata["symbol"] = None

    if not isinstance(arity := metadata["arity"], int) or isinstance(arity, bool):
        raise TypeError(f"{cls.__typename__} 'arity' must be an integer")

    if not isinstance(metadata["default"], str | None):
        raise TypeError(f"{cls.__typename__} 'default' must be a string")

    if not isinstance(metadata["help"], str | Text | None):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")

    # flags are presence-only: never required, never defaulted
    if metadata["kind"] is ArgumentKind.FLAG:
        metadata["required"] = False
        metadata["default"] = None


class ArgumentSpec(metaclass=ArgumentType):
    """
    Declared argument and its resolved value.

    Specs are created by the Parser declaration methods and mutated only by
    Parser.parse; the metadata fields are read-only properties.

    Properties
    - name, symbol, kind, required, arity, default, help (read-only metadata).
    - value: first resolved slot (None when unresolved).
    - values: every slot as a tuple (one entry for single-valued specs).
    - matched: whether any token matched this spec during the last parse.
    """

    __introspectable__ = (
        "name",
        "symbol",
        "kind",
        "required",
        "arity",
        "default",
        "help",
    )

    def __init__(self, kind, name, symbol=None, /, required=False, arity=1, default=None, help=None):
        metadata = {
            "kind": kind,
            "name": name,
            "symbol": symbol,
            "required": bool(required),
            "arity": arity,
            "default": default,
            "help": help,
        }
        _sanitize_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._storage = Unset
        self._matched = False

    @property
    def value(self):
        if self._storage is Unset:
            return None
        return self._storage.first

    @property
    def values(self):
        if self._storage is Unset:
            return (None,) * max(self._arity, 1)
        return self._storage.slots

    @property
    def matched(self):
        return self._matched

    @property
    def resolved(self):
        """
        True when a non-None value is stored (for flags: the flag is set).
        """
        return self.value is not None

    def _store(self, value):
        if self._arity > 1:
            self._storage = Multiple((value,) + (None,) * (self._arity - 1))
        else:
            self._storage = Single(value)

    def assign(self, value, /):
        """
        Record a token match; a later match overwrites an earlier one.
        """
        self._store(value)
        self._matched = True

    def substitute(self):
        """
        Fill an unresolved spec with its default (which may itself be None).

        Does not count as a match.
        """
        if self.value is None:
            self._store(self._default)

    def reset(self):
        """
        Forget any value from a previous parse pass.
        """
        self._storage = Unset
        self._matched = False


__all__ = (
    "ArgumentKind",
    "ArgumentSpec",
    "Single",
    "Multiple",
)

# The metaclass is an implementation detail of the specs.
del ArgumentType
