"""
Fault behavioral tests.

Scope
- Validate FaultCode normalization and getdoc() host lookups on __main__.
- Validate OptionException options, copy.replace() support and trigger()
  (raise vs. render-and-exit).
- Validate rich rendering: header, message, hint, fancy panel and plain mode.

Conventions
- Test method names follow CamelCase per project convention.
- Host attributes set on __main__ are removed again in tearDown.
"""
import copy
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from optlong import faults
from optlong.faults import *

HOST_ATTRIBUTES = ("__codes__", "__docs__", "__prog__", "__styles__")


def sample(**options):
    return ValueParseError(
        "cannot decode value 'abc' of option -i at second position: bad literal",
        **{
            "title": "invalid value",
            "code": FaultCode.VALUE_PARSE,
            "hint": "-i expects an integer",
        } | options
    )


def render(fault, width=120):
    console = Console(file=io.StringIO(), width=width)
    console.print(fault)
    return console.file.getvalue()


class HostTestCase(TestCase):

    def setUp(self):
        self.main = __import__("__main__")
        self.saved = {name: getattr(self.main, name) for name in HOST_ATTRIBUTES if hasattr(self.main, name)}

    def tearDown(self):
        for name in HOST_ATTRIBUTES:
            if hasattr(self.main, name):
                delattr(self.main, name)
        for name, value in self.saved.items():
            setattr(self.main, name, value)


class TestFaultCode(HostTestCase):

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.MALFORMED_SPEC, 21101)
        self.assertEqual(FaultCode.UNKNOWN_OPTION, 21114)
        self.assertEqual(len({code.value for code in FaultCode}), len(FaultCode))

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "21111")

    def testNormalizeUsesHostCodes(self):
        self.main.__codes__ = {FaultCode.MISSING_VALUE: "E-MISSING"}
        self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "E-MISSING")
        self.assertEqual(FaultCode.VALUE_PARSE.normalize(), "21112")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.ALIAS_COLLISION))
        self.main.__docs__ = {FaultCode.ALIAS_COLLISION: "https://example.invalid/collisions"}
        self.assertEqual(getdoc(FaultCode.ALIAS_COLLISION), "https://example.invalid/collisions")

    def testGetdocRequiresFaultCode(self):
        with self.assertRaises(TypeError):
            getdoc(21101)


class TestOptionException(TestCase):

    def testMessageAndOptions(self):
        fault = sample()
        self.assertEqual(str(fault), fault.message)
        self.assertIs(fault.options["code"], FaultCode.VALUE_PARSE)
        with self.assertRaises(TypeError):
            fault.options["code"] = FaultCode.MISSING_VALUE

    def testReplaceMergesOptions(self):
        fault = sample()
        replaced = copy.replace(fault, shell=True)
        self.assertIsInstance(replaced, ValueParseError)
        self.assertIsNot(replaced, fault)
        self.assertEqual(replaced.message, fault.message)
        self.assertIs(replaced.options["shell"], True)
        self.assertNotIn("shell", fault.options)

    def testHierarchy(self):
        self.assertTrue(issubclass(UnexpectedValueError, ValueParseError))
        for error in (SpecCompileError, MissingValueError, ValueParseError, UnknownOptionError):
            with self.subTest(error=error.__name__):
                self.assertTrue(issubclass(error, OptionException))


class TestTrigger(TestCase):

    def testRaisesByDefault(self):
        with self.assertRaises(ValueParseError):
            trigger(sample())

    def testRaisedFaultCarriesOptions(self):
        with self.assertRaises(ValueParseError) as context:
            trigger(sample(), fancy=True)
        self.assertIs(context.exception.options["fancy"], True)

    def testShellRendersAndExits(self):
        console = Console(file=io.StringIO(), width=120)
        with mock.patch.object(faults, "console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(sample(), shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("Invalid Value", console.file.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestRendering(HostTestCase):

    def testHeaderMessageAndHint(self):
        output = render(sample(colorful=False))
        self.assertIn("[ optlong — 21112 | Invalid Value ]", output)
        self.assertIn("at second position", output)
        self.assertIn("→ -i expects an integer", output)

    def testProgFromTool(self):
        tool = mock.Mock(prog="mytool")
        self.assertIn("[ mytool — 21112", render(sample(tool=tool, colorful=False)))

    def testHostOverrides(self):
        self.main.__prog__ = "host"
        self.main.__codes__ = {FaultCode.VALUE_PARSE: "E12"}
        self.assertIn("[ host — E12 | Invalid Value ]", render(sample(colorful=False)))

    def testFancyPanel(self):
        output = render(sample(fancy=True, colorful=False))
        self.assertIn("╭", output)
        self.assertIn("Invalid Value", output)


if __name__ == "__main__":
    unittest.main()
