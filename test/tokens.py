"""
Token model tests (integer conversion, classification, tokenizing, statements).

Scope
- Token.as_int grammar and 64-bit wrapping.
- Tokens classification into positionals, flags and pairs; flush handling.
- "$name" identifier substitution.
- Consumption API (front, take, take_int, find, pop) and the pop invariant.
- tokenize() whitespace handling and split_statements().

Conventions
- Test method names follow CamelCase per project convention.
- Tokens are built through tokenize() unless a test targets push() itself.
"""
import unittest
from unittest import TestCase

from cmdtree.faults import TokenOrderError
from cmdtree.tokens import *


def build(statement, idents=None):
    tokens = Tokens(idents)
    tokenize(statement, tokens)
    return tokens


class TestToken(TestCase):
    def testIsPlainString(self):
        token = Token("mount")
        self.assertIsInstance(token, str)
        self.assertEqual(token, "mount")
        self.assertEqual(hash(token), hash("mount"))

    def testDecimal(self):
        self.assertEqual(Token("42").as_int(), 42)
        self.assertEqual(Token("-7").as_int(), -7)
        self.assertEqual(Token("0").as_int(), 0)

    def testHexadecimal(self):
        self.assertEqual(Token("0x1f").as_int(), 31)
        self.assertEqual(Token("0x1F").as_int(), 31)
        self.assertEqual(Token("-0x10").as_int(), -16)

    def testMalformedReturnsNone(self):
        for text in ["", "-", "0x", "-0x", "abc", "1.5", "+5", "12a", "0xg", " 1", "0X10"]:
            with self.subTest(text=text):
                self.assertIsNone(Token(text).as_int())

    def testUnsignedWrapsNegatives(self):
        self.assertEqual(Token("-1").as_int(signed=False), 2 ** 64 - 1)
        self.assertEqual(Token("0xffffffffffffffff").as_int(signed=False), 2 ** 64 - 1)

    def testSignedWraps(self):
        self.assertEqual(Token("0xffffffffffffffff").as_int(), -1)
        self.assertEqual(Token("0x8000000000000000").as_int(), -2 ** 63)
        self.assertEqual(Token(str(2 ** 64)).as_int(), 0)


class TestClassification(TestCase):
    def testFlagsPairsAndPositionals(self):
        tokens = build("cmd -v -x 10 pos1")
        self.assertEqual(tokens.positionals, ("cmd", "pos1"))
        self.assertEqual(tokens.flags, {"-v"})
        self.assertEqual(tokens.pairs, {"-x": "10"})
        self.assertEqual(tokens.raw, ("cmd", "-v", "-x", "10", "pos1"))

    def testTrailingFlagIsFlushed(self):
        tokens = build("cmd -v")
        self.assertTrue(tokens.flag("-v"))
        self.assertEqual(tokens.pairs, {})

    def testPendingFlagNeedsFlush(self):
        tokens = Tokens()
        tokens.push("-v")
        self.assertFalse(tokens.flag("-v"))
        tokens.push("")
        self.assertTrue(tokens.flag("-v"))

    def testFlushMarkerIsNotRecorded(self):
        tokens = Tokens()
        tokens.push("")
        tokens.push("")
        self.assertEqual(tokens.raw, ())
        self.assertEqual(len(tokens), 0)

    def testPairConsumesOnlyOneValue(self):
        tokens = build("-n 1 2")
        self.assertEqual(tokens.pair("-n"), "1")
        self.assertEqual(tokens.positionals, ("2",))

    def testConsecutiveSwitchesAreFlags(self):
        tokens = build("-a -b -c value")
        self.assertEqual(tokens.flags, {"-a", "-b"})
        self.assertEqual(tokens.pairs, {"-c": "value"})

    def testNegativeNumberOpensFlag(self):
        tokens = build("seek -5")
        self.assertEqual(tokens.positionals, ("seek",))
        self.assertTrue(tokens.flag("-5"))

    def testViewsAreCopies(self):
        tokens = build("cmd -x 1")
        pairs = tokens.pairs
        pairs["-x"] = "2"
        self.assertEqual(tokens.pair("-x"), "1")


class TestIdentifiers(TestCase):
    def testKnownIdentifierIsSubstituted(self):
        tokens = build("read $addr", {"addr": 4096})
        self.assertEqual(tokens.positionals, ("read", "4096"))
        self.assertEqual(tokens.take(), "read")
        self.assertEqual(tokens.take_int(), 4096)

    def testSubstitutionHappensBeforeClassification(self):
        tokens = build("read -n $count $neg", {"count": 3, "neg": -1})
        self.assertEqual(tokens.pair("-n"), "3")
        self.assertTrue(tokens.flag("-1"))

    def testUnknownIdentifierStaysLiteral(self):
        tokens = build("read $nope", {"addr": 1})
        self.assertEqual(tokens.positionals, ("read", "$nope"))

    def testNoTableNoSubstitution(self):
        tokens = build("read $addr")
        self.assertEqual(tokens.positionals, ("read", "$addr"))


class TestConsumption(TestCase):
    def testTakeInOrder(self):
        tokens = build("a b")
        self.assertEqual(tokens.front, "a")
        self.assertEqual(tokens.take(), "a")
        self.assertEqual(tokens.take(), "b")
        self.assertIsNone(tokens.take())
        self.assertIsNone(tokens.front)
        self.assertFalse(tokens)

    def testTakeInt(self):
        tokens = build("0x10 -3 zz")
        self.assertEqual(tokens.take_int(), 16)
        self.assertEqual(tokens.positionals, ("-3", "zz"))

    def testTakeIntFailureLeavesQueue(self):
        tokens = build("zz 1")
        self.assertIsNone(tokens.take_int())
        self.assertEqual(tokens.front, "zz")
        self.assertIsNone(Tokens().take_int())

    def testTakeIntUnsigned(self):
        tokens = build("0xffffffffffffffff")
        self.assertEqual(tokens.take_int(signed=False), 2 ** 64 - 1)

    def testFind(self):
        tokens = build("copy -f src dst")
        self.assertFalse(tokens.find("src"))
        self.assertTrue(tokens.find("dst"))
        self.assertFalse(tokens.find("-f"))

    def testIterationAndLength(self):
        tokens = build("a -v b c")
        self.assertEqual(len(tokens), 2)
        self.assertEqual(list(tokens), ["a", "c"])


class TestPop(TestCase):
    def testPopAdvancesBothViews(self):
        tokens = build("disk mount vol")
        self.assertTrue(tokens.aligned())
        self.assertEqual(tokens.pop(), "disk")
        self.assertEqual(tokens.raw, ("mount", "vol"))
        self.assertEqual(tokens.positionals, ("mount", "vol"))

    def testPopAfterSwitchRaises(self):
        tokens = build("-v 1 cmd")
        self.assertFalse(tokens.aligned())
        with self.assertRaises(TokenOrderError) as context:
            tokens.pop()
        self.assertEqual(context.exception.options["token"], "cmd")

    def testPopEmptyRaises(self):
        with self.assertRaises(TokenOrderError):
            Tokens().pop()
        self.assertFalse(Tokens().aligned())

    def testAlignedWithTrailingSwitches(self):
        tokens = build("cmd -v -x 10 pos1")
        self.assertEqual(tokens.pop(), "cmd")
        self.assertFalse(tokens.aligned())


class TestTokenize(TestCase):
    def testWhitespaceRunsCollapse(self):
        tokens = Tokens()
        self.assertEqual(tokenize("  a\t\tb   c  ", tokens), 3)
        self.assertEqual(tokens.raw, ("a", "b", "c"))
        for token in tokens.raw:
            self.assertFalse(any(char.isspace() for char in token))

    def testTrailingTokenWithoutSpace(self):
        tokens = Tokens()
        self.assertEqual(tokenize("a b", tokens), 2)
        self.assertEqual(tokens.positionals, ("a", "b"))

    def testBlankInput(self):
        tokens = Tokens()
        self.assertEqual(tokenize(" \t ", tokens), 0)
        self.assertEqual(tokenize("", tokens), 0)
        self.assertEqual(len(tokens), 0)

    def testCountIncludesSwitches(self):
        self.assertEqual(tokenize("cmd -v -x 10", Tokens()), 4)


class TestSplitStatements(TestCase):
    def testEmptyStatementsAreDropped(self):
        self.assertEqual(split_statements("a;b;;c;"), ["a", "b", "c"])
        self.assertEqual(split_statements(""), [])
        self.assertEqual(split_statements(";;"), [])

    def testStatementsKeepSurroundingSpaces(self):
        self.assertEqual(split_statements("badcmd ; status"), ["badcmd ", " status"])

    def testCustomDelimiter(self):
        self.assertEqual(split_statements("a|b;c", "|"), ["a", "b;c"])


if __name__ == '__main__':
    unittest.main()
