"""
optlong argument engine: match raw tokens against compiled specs.

What this module provides
- OptionParser: owns the action table (see optlong.specs) and either a
  Results store (dictionary mode) or the caller's destinations (direct mode).
  • process_some(tokens): apply every known option, keep everything else.
  • process_all(tokens): same, then fail on any leftover that looks like an option.
- getoptions(specs, tokens): one-shot convenience over process_all.

Token forms
- "-x", "--name"              option (flags take no value; others take the next token)
- "-x VALUE", "--name VALUE"  option with a separate value token
- "-xVALUE", "--name=VALUE"   option with an inline value
- "--"                        end of options; the rest goes to .args unparsed
- anything else               positional, kept in order in .args

Lifecycle
- The action table and the results/destinations are built once. Every parse
  call rebuilds .args but folds values into the same results/destinations, so
  repeated calls accumulate (counters keep counting, lists keep growing). This
  is what makes staged parsing work: a global parser runs process_some(), and
  a subcommand parser takes the leftovers.

Faults
- MissingValueError, ValueParseError (UnexpectedValueError) and
  UnknownOptionError go through OptionParser.trigger(): a registered fallback
  receives them, otherwise they are raised (or rendered with rich and the
  process exits, in shell mode). The failing call stops at the failing token;
  effects of earlier tokens stand.

Quick start
    from optlong import OptionParser

    parser = OptionParser(["v|verbose+", "o|output=s", "D|define=s%"])
    parser.process_all("-v --verbose --output=out.txt -D mode=fast input.txt")
    parser.results["verbose"]   # 2
    parser.results["define"]    # {"mode": "fast"}
    parser.args                 # ["input.txt"]
"""
import copy
import difflib
import functools
import os.path
import shlex
import sys
from collections import deque
from collections.abc import Iterable, Mapping

from .faults import *
from .results import Results
from .specs import compile
from .utils import *
from .values import Action, Kind, decode


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _tokenize(tokens):
    """
    Normalize the accepted token inputs into a list of strings.

    - Unset: sys.argv[1:].
    - str: shell-like string, split with shlex.split.
    - Iterable[str]: used as-is (tokens are never trimmed).
    """
    if tokens is Unset:
        return sys.argv[1:]
    if isinstance(tokens, str):
        return shlex.split(tokens)
    if isinstance(tokens, Iterable):
        tokens = list(tokens)
        if all(isinstance(token, str) for token in tokens):
            return tokens
    raise TypeError("tokens must be a string or an iterable of strings")


class OptionParser:
    """
    Parser over a fixed set of option specs.

    Construction
    - OptionParser(["v|verbose+", "S|string-list=s@"]) → dictionary mode;
      values land in .results (a Results mapping keyed by result name).
    - OptionParser({"v|verbose+": Slot(0), "h|help": usage}) → direct mode;
      values are written into the given destinations and .results is None.
    - Invalid specs raise a SpecCompileError subclass; no parser is returned.

    Runtime options (keyword-only)
    - prog: program name shown in rendered faults (defaults to argv[0]'s basename).
    - shell: render faults with rich and exit(1) instead of raising them.
    - fancy: render faults inside a rich panel.
    - colorful: style rendered faults.
    """

    actions = mirror("actions")
    args = mirror("args")
    prog = mirror("prog")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __init__(self, specs, /, *, prog=Unset, shell=False, fancy=False, colorful=True):
        if not isinstance(prog, str | UnsetType):
            raise TypeError("%s 'prog' must be a string" % type(self).__name__)
        for name, value in (("shell", shell), ("fancy", fancy), ("colorful", colorful)):
            if not isinstance(value, bool):
                raise TypeError("%s %r must be a boolean" % (type(self).__name__, name))

        self._actions = compile(specs)
        self._results = None if isinstance(specs, Mapping) else Results(self._actions)
        self._args = []
        self._positions = []
        self._fallback = Unset
        self._prog = coalesce(prog, os.path.basename(sys.argv[0]) or __package__)
        self._shell = shell
        self._fancy = fancy
        self._colorful = colorful

    @property
    def results(self):
        """
        Parsed values by result name (dictionary mode), or None (direct mode).

        The mapping is live: it reflects every parse call made so far.
        """
        return self._results

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join(map(repr, dict.fromkeys(
            descriptor.spec for descriptor in self._actions.values()
        ))))

    def __rich_repr__(self):
        yield "actions", self.actions
        yield "results", self._results
        yield "args", self.args

    def fallback(self, fallback, /):
        """
        Register a fault handler used instead of raising/rendering.

        - fallback is called with the fault (runtime options already merged).
        - It can be set only once per parser.
        - Returns the callable, enabling decorator-style usage: @parser.fallback
        """
        if not callable(fallback):
            raise TypeError("%s fallback must be callable" % type(self).__name__)
        if self._fallback is not Unset:
            raise TypeError("%s fallback cannot be overridden" % type(self).__name__)
        self._fallback = fallback
        return fallback

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime options merged in.
        """
        if (
                not hasattr(fault, "__trigger__") or
                not callable(fault.__trigger__) or
                not hasattr(fault, "__replace__") or
                not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        fault = copy.replace(fault, **options, tool=self, shell=self.shell, fancy=self.fancy, colorful=self.colorful)
        if self._fallback is not Unset:
            return self._fallback(fault)
        trigger(fault)

    def process_some(self, tokens=Unset, /):
        """
        Apply every recognized option in `tokens`; return the leftovers.

        Unknown option-like tokens are kept in .args untouched, so a later
        parser (e.g. for a subcommand) can pick them up.
        """
        self._parseargs(_tokenize(tokens))
        return self.args

    def process_all(self, tokens=Unset, /):
        """
        Like process_some(), then fail with UnknownOptionError on the first
        leftover token that starts with a dash (a lone "-" is a positional),
        including tokens passed after "--". The check runs after the whole
        list has been applied.
        """
        if not self._parseargs(_tokenize(tokens)):
            return self.args

        for token, index in zip(self._args, self._positions):
            if token.startswith("-") and token != "-":
                input = token.partition("=")[0] if token.startswith("--") else token
                suggestions = difflib.get_close_matches(input, self._actions.keys(), 5)
                try:
                    hint = "did you mean %r? use process_some() to keep %r for another parser" % (suggestions[0], token)
                except IndexError:
                    hint = "check the spelling or use process_some() to keep %r for another parser" % token
                self.trigger(UnknownOptionError(
                    "unknown option %r at %s position" % (token, _ordinal(index)),
                    title="unknown option",
                    code=FaultCode.UNKNOWN_OPTION,
                    token=token,
                    index=index,
                    suggestions=suggestions,
                    hint=hint,
                    docs=getdoc(FaultCode.UNKNOWN_OPTION)
                ))
                break
        return self.args

    def _decode(self, descriptor, input, raw):
        """
        decode a raw value for `descriptor` and let its destination narrow it;
        on failure trigger ValueParseError and return Unset.
        """
        try:
            value = decode(descriptor, raw)
            if descriptor.destination is not Unset:
                value = descriptor.destination.prepare(value)
            return value
        except ValueError as exception:
            self.trigger(ValueParseError(
                "cannot decode value %r of option %s at %s position: %s" % (
                    raw, input, _ordinal(self._index), exception
                ),
                title="invalid value",
                code=FaultCode.VALUE_PARSE,
                input=input,
                value=raw,
                index=self._index,
                descriptor=descriptor,
                exception=exception,
                hint="%s expects %s" % (input, _expectation(descriptor)),
                docs=getdoc(FaultCode.VALUE_PARSE)
            ))
            return Unset

    def _missing(self, descriptor, input):
        self.trigger(MissingValueError(
            "missing value for option %s at %s position" % (input, _ordinal(self._index)),
            title="missing value",
            code=FaultCode.MISSING_VALUE,
            input=input,
            index=self._index,
            descriptor=descriptor,
            hint="pass %s after it (for example: %s VALUE or %s)" % (
                _expectation(descriptor), input, input + ("=VALUE" if input.startswith("--") else "VALUE")
            ),
            docs=getdoc(FaultCode.MISSING_VALUE)
        ))

    def _dispatch(self, descriptor, value):
        if descriptor.destination is Unset:
            self._results._apply(descriptor, value)
        else:
            descriptor.destination.deliver(descriptor.name, value)

    def _keep(self, token):
        self._args.append(token)
        self._positions.append(self._index)

    def _parseargs(self, tokens):
        """
        walk the tokens left to right; return False when a fault stopped the walk.

        per token
        - "--": the rest goes to .args unparsed, the walk stops.
        - exact flag: niladic → True; otherwise the next token is the value.
        - "-xVALUE" / "--name=VALUE": inline value for a known flag.
        - unknown dash token or positional: kept in .args.

        self._index is the 1-based position of the token being read; it
        advances past a separate value token as well.
        """
        self._args = []
        self._positions = []

        self._tokens = deque(tokens)
        self._index = 1

        while self._tokens:
            token = self._tokens.popleft()

            if token == "--":
                self._positions.extend(range(self._index + 1, self._index + 1 + len(self._tokens)))
                self._args.extend(self._tokens)
                self._tokens.clear()
                return True

            if token in self._actions:
                descriptor = self._actions[token]
                if descriptor.niladic:
                    value = True
                else:
                    try:
                        raw = self._tokens.popleft()
                    except IndexError:
                        self._missing(descriptor, token)
                        return False
                    self._index += 1
                    if (value := self._decode(descriptor, token, raw)) is Unset:
                        return False
                self._dispatch(descriptor, value)

            elif token.startswith("-") and token != "-":
                if token.startswith("--"):
                    input, separator, raw = token.partition("=")
                else:
                    input, separator, raw = token[:2], "", token[2:]

                if (separator or not token.startswith("--")) and input in self._actions:
                    descriptor = self._actions[input]
                    if descriptor.niladic:
                        self.trigger(UnexpectedValueError(
                            "option %s at %s position does not take a value" % (input, _ordinal(self._index)),
                            title="unexpected value",
                            code=FaultCode.UNEXPECTED_VALUE,
                            input=input,
                            value=raw,
                            index=self._index,
                            descriptor=descriptor,
                            hint="remove the inline value (for example: %s)" % input,
                            docs=getdoc(FaultCode.UNEXPECTED_VALUE)
                        ))
                        return False
                    if not raw:
                        self._missing(descriptor, input)
                        return False
                    if (value := self._decode(descriptor, input, raw)) is Unset:
                        return False
                    self._dispatch(descriptor, value)
                else:
                    self._keep(token)

            else:
                self._keep(token)

            self._index += 1

        return True


def _expectation(descriptor):
    kind = {Kind.STRING: "a string", Kind.INTEGER: "an integer", Kind.FLOAT: "a number"}[descriptor.kind]
    if descriptor.action is Action.MAP:
        return "a key=value pair with %s value" % kind
    return kind


def getoptions(specs, tokens=Unset, /, **options):
    """
    Build a parser for `specs`, run process_all(tokens) and return
    (results, args). results is None when `specs` maps to destinations.
    """
    parser = OptionParser(specs, **options)
    args = parser.process_all(tokens)
    return parser.results, args


__all__ = (
    "OptionParser",
    "getoptions",
)
