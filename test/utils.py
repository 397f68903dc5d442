"""
Utility tests (sentinel, coalesce, rename, mirror).

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from cmdtree.utils import *


class TestUtils(TestCase):
    def testUnset(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))

    def testRename(self):
        def original():
            pass

        self.assertIs(rename(original, "renamed"), original)
        self.assertEqual((original.__name__, original.__qualname__), ("renamed", "renamed"))

        @rename("decorated")
        def other():
            pass

        self.assertEqual(other.__name__, "decorated")

    def testRenameErrors(self):
        with self.assertRaises(TypeError):
            rename(1, "x")
        with self.assertRaises(TypeError):
            rename(len, "x")
        with self.assertRaises(TypeError):
            rename()

    def testMirror(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [1, [2]]

        holder = Holder()
        copy = holder.items
        copy[1].append(3)
        self.assertEqual(holder.items, [1, [2]])
        with self.assertRaises(AttributeError):
            holder.items = []


if __name__ == '__main__':
    unittest.main()
