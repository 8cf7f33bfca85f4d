"""
Shared value coercion and accumulation helpers.

- Action / Kind: the two axes a compiled spec carries besides its aliases.
- Pair: decoded form of a "key=value" token for map options.
- decode(): raw token -> typed value (or Pair) for a descriptor.
- zero(): the value a result starts at before any token is seen.
- narrow(): convert a decoded value to the element type of a typed array.

Numeric syntax
- Integers are ASCII base 10 with an optional sign and must fit a signed
  64-bit integer.
- Floats follow float(): "nan", "inf" and exponents are accepted, hex
  literals ("0x1p-2") are not, nor are digit underscores or surrounding
  whitespace.
"""
import re
from array import array
from collections import namedtuple
from enum import Enum


class Action(Enum):
    """how repeated occurrences of an option combine."""
    INCREMENT = "+"
    APPEND = "@"
    ASSIGN = "="
    MAP = "%"


class Kind(Enum):
    """the type a raw value token is decoded into."""
    STRING = "s"
    INTEGER = "i"
    FLOAT = "f"
    BOOLEAN = ""

    @property
    def type(self):
        return {
            Kind.STRING: str,
            Kind.INTEGER: int,
            Kind.FLOAT: float,
            Kind.BOOLEAN: bool,
        }[self]


Pair = namedtuple("Pair", ("key", "value"))

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64 = range(-2 ** 63, 2 ** 63)


def _decode_integer(raw):
    if not _INTEGER.fullmatch(raw):
        raise ValueError("invalid literal for int() with base 10: %r" % raw)
    if (value := int(raw)) not in _INT64:
        raise ValueError("%s is out of the 64-bit integer range" % raw)
    return value


def _decode_float(raw):
    if "_" in raw or raw != raw.strip():
        raise ValueError("could not convert string to float: %r" % raw)
    return float(raw)


def decode(descriptor, raw, /):
    """
    Decode a raw value token according to the descriptor's kind and action.

    - STRING passes through, INTEGER/FLOAT are parsed strictly (ValueError on
      failure, with the underlying parse message).
    - MAP options expect "key=value"; the token is split once on the first "="
      and the right-hand side is decoded, yielding a Pair.
    """
    key = None
    if descriptor.action is Action.MAP:
        key, separator, raw = raw.partition("=")
        if not separator:
            raise ValueError("expected a key=value pair, got %r" % key)

    match descriptor.kind:
        case Kind.STRING:
            value = raw
        case Kind.INTEGER:
            value = _decode_integer(raw)
        case Kind.FLOAT:
            value = _decode_float(raw)
        case _:
            raise ValueError("unable to parse value: %r" % raw)

    if descriptor.action is Action.MAP:
        return Pair(key, value)
    return value


def zero(action, kind, /):
    """
    Return a fresh zero value for an option's result.

    INCREMENT → 0, APPEND → [], MAP → {}, and for ASSIGN the zero of its kind
    ("" / 0 / 0.0 / False).
    """
    match action:
        case Action.INCREMENT:
            return 0
        case Action.APPEND:
            return []
        case Action.MAP:
            return {}
    return kind.type()


def narrow(value, collection, /):
    """
    Convert a decoded value to the element type of `collection`.

    Only typed arrays declare an element type: "f"/"d" take float(), integer
    typecodes take int() and must hold the value ("b" stops at 127, "I" at
    zero). A value the array cannot store raises ValueError. Any other
    collection receives the value as-is.
    """
    if not isinstance(collection, array):
        return value
    convert = float if collection.typecode in "fd" else int
    try:
        value = convert(value)
        array(collection.typecode, (value,))
    except OverflowError as exception:
        raise ValueError("%r does not fit an array of typecode %r: %s" % (
            value, collection.typecode, exception
        )) from None
    return value


__all__ = (
    "Action",
    "Kind",
    "Pair",
    "decode",
    "zero",
    "narrow",
)
