"""
Result store for dictionary-mode parsing.

Results is a read-only mapping from result name to value, seeded with a zero
value for every declared option before any token is parsed, so an option that
never appears on the command line still has a well-defined value:

    counter ("+")       0
    list ("@", "[]")    []
    map ("%", "{}")     {}
    "=s" / "=i" / "=f"  "" / 0 / 0.0
    presence flag       False

The store is closed: every name is bound to its descriptor's kind, and the
typed accessors (getstr, getint, getfloat, getbool, getlist, getmap) raise
TypeError instead of handing back a value of the wrong kind.
"""
from collections.abc import Mapping

from .utils import Unset
from .values import Action, Kind, zero


class Results(Mapping):
    __slots__ = ("_descriptors", "_values")

    def __init__(self, actions, /):
        self._descriptors = {}
        for descriptor in actions.values():
            self._descriptors.setdefault(descriptor.name, descriptor)
        self._values = {name: zero(descriptor.action, descriptor.kind) for name, descriptor in self._descriptors.items()}

    def __getitem__(self, name, /):
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self._values)

    def __rich_repr__(self):
        yield from self._values.items()

    def _apply(self, descriptor, value, /):
        """
        Fold one decoded value into the result of `descriptor`.

        INCREMENT bumps the counter, APPEND appends, MAP inserts (last value
        for a key wins), ASSIGN overwrites.
        """
        match descriptor.action:
            case Action.INCREMENT:
                self._values[descriptor.name] += 1
            case Action.APPEND:
                self._values[descriptor.name].append(value)
            case Action.MAP:
                self._values[descriptor.name][value.key] = value.value
            case Action.ASSIGN:
                self._values[descriptor.name] = value

    def _lookup(self, name, accessor, actions, kinds):
        descriptor = self._descriptors[name]
        if descriptor.action not in actions or descriptor.kind not in kinds:
            raise TypeError("%s() cannot read %r: it holds %s %s values" % (
                accessor, name, descriptor.action.name.lower(), descriptor.kind.name.lower()
            ))
        return self._values[name]

    def getstr(self, name, /):
        return self._lookup(name, "getstr", (Action.ASSIGN,), (Kind.STRING,))

    def getint(self, name, /):
        """read an integer option or a counter."""
        return self._lookup(name, "getint", (Action.ASSIGN, Action.INCREMENT), (Kind.INTEGER,))

    def getfloat(self, name, /):
        return self._lookup(name, "getfloat", (Action.ASSIGN,), (Kind.FLOAT,))

    def getbool(self, name, /):
        return self._lookup(name, "getbool", (Action.ASSIGN,), (Kind.BOOLEAN,))

    def getlist(self, name, /, type=Unset):
        """
        read an append option; `type` (str, int or float) additionally checks
        the element kind.
        """
        return self._lookup(name, "getlist", (Action.APPEND,), _kinds(type))

    def getmap(self, name, /, type=Unset):
        """
        read a map option; `type` (str, int or float) additionally checks the
        value kind.
        """
        return self._lookup(name, "getmap", (Action.MAP,), _kinds(type))


def _kinds(type):
    if type is Unset:
        return (Kind.STRING, Kind.INTEGER, Kind.FLOAT)
    for kind in (Kind.STRING, Kind.INTEGER, Kind.FLOAT):
        if kind.type is type:
            return (kind,)
    raise TypeError("element type must be str, int or float")


__all__ = (
    "Results",
)
