"""
Argline utilities (small helpers shared by the parser and the specs)

Overview
- UnsetType / Unset
  • Singleton sentinel for "never provided", distinct from None (which is a
    legitimate resolved value: a bare `--name` resolves to None).
  • Falsey, printable as "Unset", not subclassable.

- coalesce(value, default=None)
  • Materialize Unset into a concrete default; None and other falsey values pass through.

- rename(callable, name) / @rename("name")
  • Give generated properties a readable __name__/__qualname__.

- mirror("attr")
  • Read-only property over a private backing field (self._attr); containers
    come back as immutable snapshots.

- pluralize(text)
  • Tiny English pluralizer used for help group headings ("key value" → "key values").

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> pluralize("positional")
    'positionals'
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Sentinel type for a value that was never provided.

    The parser keeps three states per spec: never matched (Unset), matched
    without a payload (None) and matched with a payload (str). Unset keeps the
    first two apart without inventing a magic string.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, otherwise `object` unchanged.

    None is preserved, it is not treated as missing.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable, or return a decorator doing so.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            callable.__qualname__ = name
            callable.__name__ = name
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    # shallow snapshot, enough for the flat containers the specs hold
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property exposing the backing attribute "_{name}".

    Containers are returned as immutable snapshots (tuple, MappingProxyType,
    frozenset) so callers cannot mutate parser state through the public view.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def pluralize(text, /):
    """
    Pluralize the last word of `text`, preserving the rest of the phrase.

    Only the regular English rules are covered; headings in this package are
    built from kind names, which are all regular.

    Examples
    - pluralize("flag")       -> "flags"
    - pluralize("key value")  -> "key values"
    - pluralize("Entry")      -> "Entries"
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    if not (match := re.search(r"(\S+)(\s*)$", text)):
        return text

    head, last, trail = text[:match.start(1)], match.group(1), match.group(2)
    lower = last.lower()

    if lower.endswith(("s", "sh", "ch", "x", "z")):
        plural = lower + "es"
    elif lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        plural = lower[:-1] + "ies"
    else:
        plural = lower + "s"

    if last.isupper():
        plural = plural.upper()
    elif last[:1].isupper():
        plural = plural[:1].upper() + plural[1:]

    return head + plural + trail


Unset = UnsetType()
"""
Sentinel for "never provided" (see UnsetType).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "pluralize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
