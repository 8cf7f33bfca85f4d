"""
optlong faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault, grouped by
  domain (spec compilation vs. token parsing).
- OptionException: base type carrying a message plus read-only options; it
  knows how to render itself with rich and how to surface itself (raise or
  print-and-exit) depending on the runtime options.
- trigger(): central entry point to surface a fault with runtime options.
- getdoc(): optional description lookup for a code from the host application.

Taxonomy
- SpecCompileError and its subclasses are construction-time faults. They are
  raised directly by the compiler and never recovered internally.
- MissingValueError, ValueParseError (and UnexpectedValueError) and
  UnknownOptionError are parse-time faults. The parser routes them through
  OptionParser.trigger(), which honors shell/fancy/colorful and an optional
  fallback hook.

UX
- Position-first, lowercase messages ("at third position") with a single hint.
- Host overrides on __main__: __prog__, __styles__, __codes__, __docs__.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - spec compilation (2110x)
      • MALFORMED_SPEC, UNTYPED_ACCUMULATOR, ALIAS_COLLISION, INVALID_DESTINATION
    - token parsing (2111x)
      • MISSING_VALUE, VALUE_PARSE, UNEXPECTED_VALUE, UNKNOWN_OPTION

    normalize() lets the host remap codes to its own labels.
    """
    # --- spec compilation (211 0x) ---
    MALFORMED_SPEC          = 21101
    UNTYPED_ACCUMULATOR     = 21102
    ALIAS_COLLISION         = 21103
    INVALID_DESTINATION     = 21104

    # --- token parsing (211 1x) ---
    MISSING_VALUE           = 21111
    VALUE_PARSE             = 21112
    UNEXPECTED_VALUE        = 21113
    UNKNOWN_OPTION          = 21114

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class OptionException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if isinstance(self.message, str) else ""

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        try:
            name = self.options["tool"].prog
        except KeyError:
            name = __package__
        prog = text(getattr(main, "__prog__", name), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.options["code"].normalize(), styler("code")),
            " | ",
            text(self.options["title"].title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint"), styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left", width=console.width - 4)

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class SpecCompileError(OptionException): ...
class MalformedSpecError(SpecCompileError): ...
class UntypedAccumulatorError(SpecCompileError): ...
class AliasCollisionError(SpecCompileError): ...
class InvalidDestinationError(SpecCompileError): ...

class MissingValueError(OptionException): ...
class ValueParseError(OptionException): ...
class UnexpectedValueError(ValueParseError): ...
class UnknownOptionError(OptionException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see OptionException).
    - options are merged into a copy of the fault via copy.replace() before triggering.
    - in shell mode the fault is printed with rich and the process exits with 1;
      otherwise it is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ keyed by
    FaultCode; when absent or missing the code, None is returned.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "OptionException",
    "SpecCompileError",
    "MalformedSpecError",
    "UntypedAccumulatorError",
    "AliasCollisionError",
    "InvalidDestinationError",
    "MissingValueError",
    "ValueParseError",
    "UnexpectedValueError",
    "UnknownOptionError",
    "FaultCode",
    "trigger",
    "getdoc",
)
