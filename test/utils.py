"""
Tests for the utility helpers.

This module verifies:
- Unset: singleton identity, falsy semantics, representation, copy/pickle
  identity, finality.
- coalesce: only Unset is replaced.
- rename: function and decorator forms.
- mirror: read-only properties returning immutable snapshots.
- pluralize: regular English rules used for help headings.
"""
import copy
import pickle
import unittest
from types import MappingProxyType
from unittest import TestCase

from argline.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyAndPickleKeepIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})


class CoalesceTest(TestCase):
    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalsyValues(self) -> None:
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertEqual(coalesce(0, 1), 0)


class RenameTest(TestCase):
    def testFunctionForm(self) -> None:
        def work():
            pass

        self.assertIs(rename(work, "do_work"), work)
        self.assertEqual(work.__name__, "do_work")
        self.assertEqual(work.__qualname__, "do_work")

    def testDecoratorForm(self) -> None:
        @rename("do_work")
        def work():
            pass

        self.assertEqual(work.__name__, "do_work")

    def testInvalidArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename()


class MirrorTest(TestCase):
    def setUp(self) -> None:
        class Holder:
            items = mirror("items")
            mapping = mirror("mapping")
            name = mirror("name")

            def __init__(self):
                self._items = [1, 2]
                self._mapping = {"a": 1}
                self._name = "holder"

        self.holder = Holder()

    def testSnapshots(self) -> None:
        self.assertEqual(self.holder.items, (1, 2))
        self.assertIsInstance(self.holder.mapping, MappingProxyType)
        self.assertEqual(self.holder.name, "holder")

    def testReadOnly(self) -> None:
        with self.assertRaises(AttributeError):
            self.holder.items = []

    def testRejectsNonString(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


class PluralizeTest(TestCase):
    def testRegularWords(self) -> None:
        self.assertEqual(pluralize("flag"), "flags")
        self.assertEqual(pluralize("positional"), "positionals")
        self.assertEqual(pluralize("box"), "boxes")
        self.assertEqual(pluralize("entry"), "entries")
        self.assertEqual(pluralize("day"), "days")

    def testPhraseKeepsHead(self) -> None:
        self.assertEqual(pluralize("key value"), "key values")
        self.assertEqual(pluralize("key value  "), "key values  ")

    def testCasing(self) -> None:
        self.assertEqual(pluralize("Entry"), "Entries")
        self.assertEqual(pluralize("FLAG"), "FLAGS")

    def testEmptyAndBlank(self) -> None:
        self.assertEqual(pluralize(""), "")
        self.assertEqual(pluralize("   "), "   ")

    def testRejectsNonString(self) -> None:
        with self.assertRaises(TypeError):
            pluralize(1)


if __name__ == '__main__':
    unittest.main()
