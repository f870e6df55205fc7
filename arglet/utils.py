"""
Arglet utilities (small building blocks shared by every layer).

Overview
- UnsetType / Unset
  • Sentinel for "argument not supplied", kept apart from None because None is a
    legitimate fallback for string options.
  • Falsey, printable as "Unset", sealed against subclassing.

- coalesce(value, default=None)
  • Swap Unset for a default while keeping every other value (None, 0, "") intact.

- rename(callable, name) / @rename("name")
  • Give generated callables readable __name__/__qualname__ values.

- mirror("attr")
  • Build a read-only property over the private field "_attr". Containers are
    handed out as fresh copies so callers cannot reach the parser's own state.

Quick examples
    >>> coalesce(Unset, 8)
    8
    >>> coalesce(None, 8) is None
    True
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel.

    Only one instance ever exists; UnsetType() returns it again. The instance is
    falsey, so "if not helptext:" treats a missing value like an empty one.
    """

    def __or__(self, other, /):
        """
        Allow isinstance() checks such as isinstance(x, str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return object, or default when object is the Unset sentinel.

    Falsey values are not replaced: coalesce(0, 5) is 0 and coalesce(None, 5) is None.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Assign __name__ and __qualname__ on a callable.

    Forms
    - rename(callable, name) renames in place and returns the callable.
    - rename(name) returns a decorator doing the same.

    Raises
    - TypeError on wrong arity, non-callable targets, non-string names, or
      callables whose names cannot be updated (built-ins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Copy containers recursively: sequences become lists, mappings dicts, sets sets.

    Strings and every other value are returned unchanged. Mapping keys are kept
    as they are; only the values are copied.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    else:
        return object


def mirror(name, /):
    """
    Read-only property returning a copy of self._{name}.

    Example
        class Parser:
            options = mirror("options")   # exposes self._options as a dict copy
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()
"""
The "not supplied" sentinel. Compare with `is`; materialize with coalesce().
"""


__all__ = (
    # Internal helpers re-used by every arglet module; not re-exported by the package.

    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
