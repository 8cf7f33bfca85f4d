"""
Helpers shared by every optlong module.

- Unset: "no argument given", for parameters where None is a real value
  (a destination of None is rejected, not ignored).
- coalesce(): swap Unset for a default.
- rename(): give generated functions readable names.
- mirror(): publish a private "_name" field as a read-only property.
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset singleton.

    Unset is falsy, prints as "Unset" and compares equal only to itself.
    The type joins unions on either side (str | Unset), so it can be used
    directly in isinstance checks, and it refuses subclasses.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """return `default` if `object` is Unset; None, 0 and "" pass through."""
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(function, name) sets __name__ and __qualname__ and returns function;
    rename(name) returns a decorator doing the same.
    """
    if len(parameters) == 1:
        name, = parameters
        if not isinstance(name, str):
            raise TypeError("@rename() argument must be a string")

        def decorator(function):
            if not builtins.callable(function):
                raise TypeError("@rename() must be applied to a callable")
            return rename(function, name)

        return rename(decorator, "rename")

    if len(parameters) != 2:
        raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))

    function, name = parameters
    if not builtins.callable(function):
        raise TypeError("rename() first argument must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() second argument must be a string")
    try:
        function.__name__ = function.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() cannot update the names of %r" % function) from None
    return function


def _detach(object):
    # strings are scalars; nested containers are copied all the way down
    if isinstance(object, str):
        return object
    if isinstance(object, Mapping):
        return {key: _detach(value) for key, value in object.items()}
    if isinstance(object, Sequence):
        return [_detach(item) for item in object]
    if isinstance(object, Set):
        return {_detach(item) for item in object}
    return object


def mirror(name, /):
    """
    Property reading "_{name}". Lists, dicts and sets come back as fresh
    copies, so the parser's action table and leftovers cannot be edited
    through the public attribute.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    return property(rename(lambda self: _detach(getattr(self, "_" + name)), name))


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "Unset",
)
