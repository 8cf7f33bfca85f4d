"""
Caller-owned destinations for direct-assignment parsing.

Python has no variable references, so a caller hands over one of:
- Slot(value): a mutable box read and written through .value,
- Attribute(object, name): a slot bound to an attribute of an existing object,
- a mutable sequence (list, array.array, ...) for append options,
- a mutable mapping (dict, ...) for map options,
- a callable with 0, 1 or 2 positional parameters for assign options.

resolve() turns that object into one of a closed set of tagged variants once,
at compile time:

    ScalarSlot      assign: slot.value = value
    CounterSlot     increment: slot.value += 1
    CollectionSlot  append: collection.append(value)
    MapSlot         map: mapping[pair.key] = pair.value
    Callback0       assign: callback()
    Callback1       assign: callback(value)
    Callback2       assign: callback(name, value)

so dispatch never re-inspects the caller's object. Every variant exposes
prepare(value), which may reject a decoded value with ValueError before
anything is written, and deliver(name, value).

A Slot still holding None when it is resolved for a counter or an assign
option is set to that option's zero value (0, False, "", 0 or 0.0).
"""
import inspect
from array import array
from collections.abc import MutableMapping, MutableSequence
from inspect import Parameter

from .faults import FaultCode, InvalidDestinationError, getdoc
from .values import Action, Kind, narrow, zero


class Slot:
    """A mutable box standing in for a variable the parser writes into."""
    __slots__ = ("value",)

    def __init__(self, value=None, /):
        self.value = value

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.value)

    def __rich_repr__(self):
        yield self.value


class Attribute(Slot):
    """
    A slot whose value lives on another object's attribute.

    >>> settings = types.SimpleNamespace(verbose=0)
    >>> OptionParser({"v|verbose+": Attribute(settings, "verbose")})
    """
    __slots__ = ("object", "name")

    def __init__(self, object, name, /):
        if not isinstance(name, str):
            raise TypeError("Attribute() second argument must be a string")
        self.object = object
        self.name = name

    @property
    def value(self):
        return getattr(self.object, self.name)

    @value.setter
    def value(self, value):
        setattr(self.object, self.name, value)

    def __repr__(self):
        return "%s(%r, %r)" % (type(self).__name__, self.object, self.name)

    def __rich_repr__(self):
        yield self.object
        yield self.name


class Destination:
    __slots__ = ("target",)

    def __init__(self, target, /):
        self.target = target

    def prepare(self, value, /):
        return value

    def deliver(self, name, value, /):
        raise NotImplementedError

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.target)

    def __rich_repr__(self):
        yield self.target


class ScalarSlot(Destination):
    __slots__ = ()

    def deliver(self, name, value, /):
        self.target.value = value


class CounterSlot(Destination):
    __slots__ = ()

    def deliver(self, name, value, /):
        self.target.value += 1


class CollectionSlot(Destination):
    __slots__ = ()

    def prepare(self, value, /):
        # typed arrays take their own element type, within their range
        return narrow(value, self.target)

    def deliver(self, name, value, /):
        self.target.append(value)


class MapSlot(Destination):
    __slots__ = ()

    def deliver(self, name, value, /):
        self.target[value.key] = value.value


class Callback0(Destination):
    __slots__ = ()

    def deliver(self, name, value, /):
        self.target()


class Callback1(Destination):
    __slots__ = ()

    def deliver(self, name, value, /):
        self.target(value)


class Callback2(Destination):
    __slots__ = ()

    def deliver(self, name, value, /):
        self.target(name, value)


# typecodes an array must have to receive values of a given kind
# "u"/"w" arrays hold single characters, so no array takes string values
_TYPECODES = {
    Kind.STRING: frozenset(),
    Kind.INTEGER: frozenset("bBhHiIlLqQ") | frozenset("fd"),
    Kind.FLOAT: frozenset("fd"),
}


def _arity(callback):
    """
    Count the required positional parameters of a callback.

    A callback accepting only *args counts as one; signatures that cannot be
    inspected (some builtins) are treated as taking the value.
    """
    try:
        parameters = inspect.signature(callback).parameters.values()
    except (TypeError, ValueError):
        return 1
    required = [
        parameter for parameter in parameters
        if parameter.kind in (Parameter.POSITIONAL_ONLY, Parameter.POSITIONAL_OR_KEYWORD)
        and parameter.default is Parameter.empty
    ]
    if not required and any(parameter.kind is Parameter.VAR_POSITIONAL for parameter in parameters):
        return 1
    return len(required)


def _reject(spec, destination, expected):
    raise InvalidDestinationError(
        "destination %r does not fit spec %r (expected %s)" % (destination, spec, expected),
        title="invalid destination",
        code=FaultCode.INVALID_DESTINATION,
        hint="pass %s for %r" % (expected, spec),
        spec=spec,
        destination=destination,
        docs=getdoc(FaultCode.INVALID_DESTINATION)
    )


def _seed(slot, action, kind):
    if slot.value is None:
        slot.value = zero(action, kind)


def resolve(spec, destination, action, kind, /):
    """
    Resolve a caller-supplied destination into its tagged variant.

    Raises InvalidDestinationError when the object does not fit the action:
    counters need a Slot, append needs a mutable sequence (a typed array must
    accept the spec's kind), map needs a mutable mapping, and assign needs a
    Slot or a callable of arity 0, 1 or 2.
    """
    match action:
        case Action.INCREMENT:
            if not isinstance(destination, Slot):
                _reject(spec, destination, "a Slot or an Attribute")
            _seed(destination, action, kind)
            return CounterSlot(destination)
        case Action.APPEND:
            if not isinstance(destination, MutableSequence | array) or isinstance(destination, str):
                _reject(spec, destination, "a mutable sequence")
            if isinstance(destination, array) and destination.typecode not in _TYPECODES[kind]:
                if kind is Kind.STRING:
                    _reject(spec, destination, "a list")
                _reject(spec, destination, "an array of %s values" % kind.name.lower())
            return CollectionSlot(destination)
        case Action.MAP:
            if not isinstance(destination, MutableMapping):
                _reject(spec, destination, "a mutable mapping")
            return MapSlot(destination)

    if isinstance(destination, Slot):
        _seed(destination, action, kind)
        return ScalarSlot(destination)
    if not callable(destination):
        _reject(spec, destination, "a Slot, an Attribute or a callable")

    match _arity(destination):
        case 0:
            return Callback0(destination)
        case 1:
            return Callback1(destination)
        case 2:
            return Callback2(destination)
    _reject(spec, destination, "a callable taking at most two positional arguments")


__all__ = (
    "Slot",
    "Attribute",
    "Destination",
    "ScalarSlot",
    "CounterSlot",
    "CollectionSlot",
    "MapSlot",
    "Callback0",
    "Callback1",
    "Callback2",
    "resolve",
)
