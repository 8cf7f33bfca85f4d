r"""
optlong spec compiler.

Overview
- A spec string declares one option: its aliases, the type of its value and
  how repeated occurrences combine.

      spec      := alias ('|' alias)* [ '=' typechar ] [ aritymark ]
      typechar  := 's' | 'i' | 'f'
      aritymark := '+' | '@' | '[]' | '%' | '{}'

- compile_spec() turns one spec into an OptionDescriptor and registers it under
  every alias's flag ("-x" for one-letter aliases, "--name" otherwise).
- compile() does so for a whole declaration (an iterable of specs, or a mapping
  of spec to destination for direct assignment) and returns the action table.

Semantics
- "+"         counter, integer, takes no value token ("=i+" is accepted too).
- "@" / "[]"  append each value to a list; a type is mandatory.
- "%" / "{}"  insert "key=value" pairs into a map; a type is mandatory.
- no marker   assign; without a type the option is a boolean presence flag.
- The result name is the last alias: "v|verbose+" stores under "verbose".

Validation
- Aliases must match r"[^\W_][\w-]*" (unicode letters allowed, no leading
  dash, underscore or other punctuation).
- Every flag is unique across the whole table; a collision names the flag,
  the spec it came from and the spec that already owns it.

Quick example:
    >>> actions = compile(["v|verbose+", "S|string-list=s@"])
    >>> actions["-v"] is actions["--verbose"]
    True
    >>> actions["--string-list"].action
    <Action.APPEND: '@'>
"""
import functools
import operator
import re
from collections.abc import Iterable, Mapping

from .destinations import resolve
from .faults import (
    FaultCode,
    MalformedSpecError,
    UntypedAccumulatorError,
    AliasCollisionError,
    getdoc,
)
from .utils import *
from .values import Action, Kind

_ALIAS = re.compile(r"[^\W_][\w-]*")

_MARKERS = (
    ("+", Action.INCREMENT),
    ("@", Action.APPEND),
    ("[]", Action.APPEND),
    ("%", Action.MAP),
    ("{}", Action.MAP),
)


class DescriptorType(type):
    """
    Metaclass for compiled option descriptors.

    - Exposes every name in __introspectable__ as a read-only property backed
      by "_{name}" (see mirror()).
    - Provides a stable __repr__ and a __rich_repr__ for pretty printers.
    - Seals the class: descriptors are not meant to be specialized.
    """

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
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__init_subclass__")
        def __init_subclass__(cls, **options):  # NOQA: F-841
            raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
        self.__init_subclass__ = classmethod(__init_subclass__)

        return self


class OptionDescriptor(metaclass=DescriptorType):
    """
    Compiled unit of one spec, shared by all of the spec's aliases.

    Fields
    - name: result name (the last alias).
    - niladic: True when the option consumes no value token.
    - destination: tagged destination (direct mode) or Unset (dictionary mode).
    - action: Action (INCREMENT, APPEND, ASSIGN, MAP).
    - kind: Kind (STRING, INTEGER, FLOAT, BOOLEAN).
    - spec: the original spec string.
    """
    __introspectable__ = (
        "name",
        "niladic",
        "destination",
        "action",
        "kind",
        "spec",
    )

    def __init__(self, name, niladic, destination, action, kind, spec, /):
        self._name = name
        self._niladic = niladic
        self._destination = destination
        self._action = action
        self._kind = kind
        self._spec = spec


def _malformed(spec, reason, hint):
    raise MalformedSpecError(
        "malformed option spec %r: %s" % (spec, reason),
        title="malformed option spec",
        code=FaultCode.MALFORMED_SPEC,
        hint=hint,
        spec=spec,
        docs=getdoc(FaultCode.MALFORMED_SPEC)
    )


def _flag(alias):
    return "-" + alias if len(alias) == 1 else "--" + alias


def compile_spec(spec, destination=Unset, /, actions=Unset):
    """
    Compile one spec string into `actions` and return its descriptor.

    Parameters
    - spec: str, e.g. "i|inc|increment+" or "stropt=s%".
    - destination: Unset for dictionary mode, otherwise the caller-owned object
      the option writes into (see optlong.destinations).
    - actions: the action table to register into (a new dict when Unset).

    Raises
    - MalformedSpecError, UntypedAccumulatorError, AliasCollisionError,
      InvalidDestinationError. Nothing is registered when any of them is raised.
    """
    if not isinstance(spec, str):
        _malformed(spec, "not a string", "declare options as strings such as 'v|verbose+'")
    if not spec:
        _malformed(spec, "empty spec", "declare at least one alias, for example 'v|verbose'")
    actions = coalesce(actions, {})

    body, action = spec, Action.ASSIGN
    for marker, candidate in _MARKERS:
        if body.endswith(marker):
            body, action = body[:-len(marker)], candidate
            break

    body, separator, letter = body.partition("=")
    if separator:
        try:
            kind = Kind(letter) if letter else None
        except ValueError:
            kind = None
        if kind is None or kind is Kind.BOOLEAN:
            _malformed(spec, "unknown value type %r" % letter, "use '=s' (string), '=i' (integer) or '=f' (float)")
    else:
        kind = Kind.BOOLEAN

    if action is Action.INCREMENT:
        if kind not in (Kind.BOOLEAN, Kind.INTEGER):
            _malformed(spec, "a counter cannot hold %s values" % kind.name.lower(), "drop the type or use '=i+'")
        kind = Kind.INTEGER
        niladic = True
    else:
        niladic = not separator

    if niladic and action in (Action.APPEND, Action.MAP):
        raise UntypedAccumulatorError(
            "option spec %r collects values but does not declare their type" % spec,
            title="untyped accumulator",
            code=FaultCode.UNTYPED_ACCUMULATOR,
            hint="add '=s', '=i' or '=f' before the '%s' marker" % spec[len(body):],
            spec=spec,
            docs=getdoc(FaultCode.UNTYPED_ACCUMULATOR)
        )

    aliases = body.split("|")
    flags = []
    for alias in aliases:
        if not alias:
            _malformed(spec, "empty alias", "remove the stray '|'")
        if not _ALIAS.fullmatch(alias):
            _malformed(spec, "invalid alias %r" % alias, "aliases use letters, digits, '_' and '-', without leading dashes")
        flag = _flag(alias)
        if flag in actions or flag in flags:
            owner = actions[flag].spec if flag in actions else spec
            raise AliasCollisionError(
                "option %s from spec %r is not unique: already declared by spec %r" % (flag, spec, owner),
                title="duplicated option",
                code=FaultCode.ALIAS_COLLISION,
                hint="rename or drop the %r alias in one of the specs" % alias,
                flag=flag,
                spec=spec,
                owner=owner,
                docs=getdoc(FaultCode.ALIAS_COLLISION)
            )
        flags.append(flag)

    if destination is not Unset:
        destination = resolve(spec, destination, action, kind)

    descriptor = OptionDescriptor(aliases[-1], niladic, destination, action, kind, spec)
    actions.update(dict.fromkeys(flags, descriptor))
    return descriptor


def compile(specs, /):
    """
    Compile a whole declaration into an action table (flag -> descriptor).

    - An iterable of spec strings compiles for dictionary mode.
    - A mapping of spec string to destination compiles for direct mode.
    """
    if isinstance(specs, str):
        raise TypeError("compile() argument must be an iterable of specs, not a string")
    if not isinstance(specs, Iterable):
        raise TypeError("compile() argument must be an iterable of specs or a mapping of specs to destinations")

    actions = {}
    if isinstance(specs, Mapping):
        for spec, destination in specs.items():
            compile_spec(spec, destination, actions=actions)
    else:
        for spec in specs:
            compile_spec(spec, actions=actions)
    return actions


__all__ = (
    "Action",
    "Kind",
    "OptionDescriptor",
    "compile_spec",
    "compile",
)

# Keep the metaclass out of star-imports and autocompletion.
del DescriptorType
