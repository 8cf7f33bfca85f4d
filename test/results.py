"""
Result store behavioral tests.

Scope
- Validate zero seeding, the read-only Mapping surface and the typed
  accessors (getstr, getint, getfloat, getbool, getlist, getmap).
- Validate that accessors refuse names bound to another kind.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from optlong import OptionParser, Results, compile


SPECS = [
    "v|verbose+",
    "b|bool",
    "s|string=s",
    "i|int=i",
    "f|float=f",
    "S|strings=s@",
    "I|ints=i[]",
    "F|floats=f@",
    "D|define=s%",
    "L|limits=i{}",
]


class TestAccessors(TestCase):
    """Typed accessors hand back values of the declared kind only."""

    def setUp(self):
        self.parser = OptionParser(SPECS)
        self.parser.process_all([
            "-v", "-v", "-b",
            "-s", "text", "-i", "7", "-f", "2.5",
            "-S", "a", "-I", "1", "-F", "0.5",
            "-D", "k=v", "-L", "max=9",
        ])
        self.results = self.parser.results

    def testScalars(self):
        self.assertEqual(self.results.getstr("string"), "text")
        self.assertEqual(self.results.getint("int"), 7)
        self.assertEqual(self.results.getfloat("float"), 2.5)
        self.assertIs(self.results.getbool("bool"), True)

    def testCounterReadsAsInteger(self):
        self.assertEqual(self.results.getint("verbose"), 2)

    def testCollections(self):
        self.assertEqual(self.results.getlist("strings"), ["a"])
        self.assertEqual(self.results.getlist("ints", int), [1])
        self.assertEqual(self.results.getlist("floats", float), [0.5])
        self.assertEqual(self.results.getmap("define"), {"k": "v"})
        self.assertEqual(self.results.getmap("limits", int), {"max": 9})

    def testKindMismatch(self):
        cases = (
            (self.results.getstr, "int"),
            (self.results.getint, "string"),
            (self.results.getint, "float"),
            (self.results.getfloat, "int"),
            (self.results.getbool, "verbose"),
            (self.results.getstr, "strings"),
            (self.results.getlist, "define"),
            (self.results.getmap, "strings"),
        )
        for accessor, name in cases:
            with self.subTest(accessor=accessor.__name__, name=name):
                with self.assertRaises(TypeError):
                    accessor(name)

    def testElementTypeMismatch(self):
        with self.assertRaises(TypeError):
            self.results.getlist("strings", int)
        with self.assertRaises(TypeError):
            self.results.getmap("limits", float)

    def testUnsupportedElementType(self):
        with self.assertRaises(TypeError):
            self.results.getlist("strings", bytes)

    def testUnknownName(self):
        with self.assertRaises(KeyError):
            self.results.getstr("missing")
        with self.assertRaises(KeyError):
            self.results["missing"]


class TestMapping(TestCase):
    """Results behaves as a read-only mapping keyed by result name."""

    def testOneEntryPerOption(self):
        results = Results(compile(SPECS))
        self.assertEqual(len(results), len(SPECS))
        self.assertEqual(list(results), [
            "verbose", "bool", "string", "int", "float",
            "strings", "ints", "floats", "define", "limits",
        ])

    def testZeroValues(self):
        results = Results(compile(SPECS))
        self.assertEqual(dict(results), {
            "verbose": 0,
            "bool": False,
            "string": "",
            "int": 0,
            "float": 0.0,
            "strings": [],
            "ints": [],
            "floats": [],
            "define": {},
            "limits": {},
        })

    def testCollectionsAreNotShared(self):
        results = Results(compile(["a=s@", "b=s@"]))
        self.assertIsNot(results["a"], results["b"])

    def testReadOnly(self):
        results = Results(compile(SPECS))
        with self.assertRaises(TypeError):
            results["verbose"] = 3

    def testRepr(self):
        results = Results(compile(["v|verbose+"]))
        self.assertEqual(repr(results), "Results({'verbose': 0})")


if __name__ == "__main__":
    unittest.main()
