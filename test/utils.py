"""
Tests for the internal helpers.

This module verifies semantic guarantees of optlong.utils:
- The `Unset` sentinel: singleton identity, falsy semantics, finality and
  union support for isinstance checks.
- coalesce(): only the sentinel is replaced.
- rename(): both call forms and their argument validation.
- mirror(): read-only properties handing out detached copies.
"""
import copy
import unittest
from unittest import TestCase

from optlong.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testFalsyButDistinct(self) -> None:
        """
        Unset is falsy but not equal to other falsy values.
        """
        self.assertFalse(Unset)
        for value in (None, 0, "", [], False):
            self.assertNotEqual(Unset, value)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testUnion(self) -> None:
        """
        `str | Unset` builds a union usable with isinstance.
        """
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("name", Unset | str)
        self.assertNotIsInstance(1, str | Unset)

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            class Derived(UnsetType):  # NOQA: F-841
                pass


class CoalesceTest(TestCase):

    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalsyValues(self) -> None:
        for value in (None, 0, "", []):
            self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):

    def testFunctionForm(self) -> None:
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testDecoratorForm(self) -> None:
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testInvalidArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename(print, 42)
        with self.assertRaises(TypeError):
            rename(42)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename("name")(42)

    def testBuiltinCannotBeRenamed(self) -> None:
        with self.assertRaises(TypeError):
            rename(len, "size")


class MirrorTest(TestCase):
    """
    Test suite for mirror(): read-only, detached views of private state.
    """

    def setUp(self) -> None:
        class Holder:
            items = mirror("items")
            table = mirror("table")
            label = mirror("label")

            def __init__(self):
                self._items = [1, [2, 3]]
                self._table = {"key": {"nested": ["value"]}}
                self._label = "label"

        self.holder = Holder()

    def testReadsBackingField(self) -> None:
        self.assertEqual(self.holder.items, [1, [2, 3]])
        self.assertEqual(self.holder.table, {"key": {"nested": ["value"]}})
        self.assertEqual(self.holder.label, "label")

    def testReadOnly(self) -> None:
        with self.assertRaises(AttributeError):
            self.holder.items = []

    def testDetached(self) -> None:
        """
        Mutating a returned container (at any depth) leaves the holder intact.
        """
        self.holder.items[1].append(4)
        self.holder.table["key"]["nested"].clear()
        self.assertEqual(self.holder.items, [1, [2, 3]])
        self.assertEqual(self.holder.table, {"key": {"nested": ["value"]}})

    def testPropertyName(self) -> None:
        self.assertEqual(type(self.holder).items.fget.__name__, "items")

    def testNameMustBeString(self) -> None:
        with self.assertRaises(TypeError):
            mirror(42)


if __name__ == "__main__":
    unittest.main()
