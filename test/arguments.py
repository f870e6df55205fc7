"""
Arguments module behavioral tests (Option and numeric conversion).

Scope
- Validate Option construction rules per kind (fallback typing, greedy only for strings).
- Validate occurrence bookkeeping: count/found/value/value_at/values and snapshots.
- Validate strict integer parsing (bases, whitespace, 32-bit range, trailing garbage).
- Validate strict float parsing (decimal, hex, inf/nan, overflow/underflow).
- Validate the debug string form used by the parser dump.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import math
import unittest
from unittest import TestCase, mock

from arglet import (
    CapacityError,
    FaultCode,
    Kind,
    MalformedNumberError,
    NumberRangeError,
    Option,
    Vector,
    parse_float,
    parse_integer,
)


class TestOptionConstruction(TestCase):
    """Construction and metadata validation for Option."""

    def testFlagHasNoFallback(self):
        with self.assertRaises(TypeError):
            Option(Kind.FLAG, True)

    def testFlagCannotBeGreedy(self):
        with self.assertRaises(TypeError):
            Option(Kind.FLAG, greedy=True)

    def testOnlyStringsCanBeGreedy(self):
        with self.assertRaises(TypeError):
            Option(Kind.INTEGER, 0, greedy=True)
        self.assertTrue(Option(Kind.STRING, greedy=True).greedy)

    def testKindMustBeKind(self):
        with self.assertRaises(TypeError):
            Option("flag")

    def testDefaultFallbacks(self):
        self.assertIsNone(Option(Kind.STRING).fallback)
        self.assertEqual(Option(Kind.INTEGER).fallback, 0)
        self.assertEqual(Option(Kind.FLOAT).fallback, 0.0)

    def testStringFallbackTyped(self):
        with self.assertRaises(TypeError):
            Option(Kind.STRING, 5)

    def testIntegerFallbackTyped(self):
        with self.assertRaises(TypeError):
            Option(Kind.INTEGER, "5")
        with self.assertRaises(TypeError):
            Option(Kind.INTEGER, True)

    def testIntegerFallbackRange(self):
        with self.assertRaises(ValueError):
            Option(Kind.INTEGER, 2 ** 31)
        self.assertEqual(Option(Kind.INTEGER, -2 ** 31).fallback, -2 ** 31)

    def testFloatFallbackAcceptsIntegers(self):
        option = Option(Kind.FLOAT, 2)
        self.assertIsInstance(option.fallback, float)
        self.assertEqual(option.fallback, 2.0)

    def testKindIsReadOnly(self):
        option = Option(Kind.STRING)
        with self.assertRaises(AttributeError):
            option.kind = Kind.FLAG

    def testReprMentionsKind(self):
        self.assertIn("kind=", repr(Option(Kind.FLAG)))


class TestOptionOccurrences(TestCase):
    """Occurrence bookkeeping for Option."""

    def testFallbackWhenNeverMatched(self):
        option = Option(Kind.INTEGER, -1)
        self.assertEqual(option.value(), -1)
        self.assertEqual(option.count, 0)
        self.assertFalse(option.found)
        self.assertEqual(option.values(), [])

    def testFlagCountsOccurrences(self):
        option = Option(Kind.FLAG)
        option.append()
        option.append()
        self.assertEqual(option.count, 2)
        self.assertTrue(option.value())
        self.assertEqual(option.values(), [True, True])

    def testFlagRejectsToken(self):
        with self.assertRaises(TypeError):
            Option(Kind.FLAG).append("x")

    def testLastOccurrenceWins(self):
        option = Option(Kind.STRING, "none")
        for token in ("a", "b", "c"):
            option.append(token)
        self.assertEqual(option.value(), "c")
        self.assertEqual(option.values(), ["a", "b", "c"])
        self.assertEqual(option.value_at(1), "b")

    def testValueAtOutOfRange(self):
        option = Option(Kind.STRING)
        option.append("a")
        with self.assertRaises(IndexError):
            option.value_at(1)
        with self.assertRaises(IndexError):
            Option(Kind.FLAG).value_at(0)

    def testTokensAreConverted(self):
        integer = Option(Kind.INTEGER)
        integer.append("42")
        floating = Option(Kind.FLOAT)
        floating.append("2.5")
        self.assertEqual(integer.value(), 42)
        self.assertEqual(floating.value(), 2.5)

    def testBadTokenRaisesWithoutRecording(self):
        option = Option(Kind.INTEGER, 7)
        with self.assertRaises(MalformedNumberError):
            option.append("abc")
        self.assertEqual(option.count, 0)
        self.assertEqual(option.value(), 7)

    def testValuesIsSnapshot(self):
        option = Option(Kind.STRING)
        option.append("a")
        snapshot = option.values()
        snapshot.append("mutated")
        option.append("b")
        self.assertEqual(snapshot, ["a", "mutated"])
        self.assertEqual(option.values(), ["a", "b"])
        self.assertEqual(option.values(), option.values())

    def testOccurrencesPropertyIsCopy(self):
        option = Option(Kind.STRING)
        option.append("a")
        option.occurrences.append("b")
        self.assertEqual(option.occurrences, ["a"])

    def testGrowthFailureKeepsCount(self):
        option = Option(Kind.STRING)
        for token in "abcd":
            option.append(token)
        with mock.patch.object(Vector, "_grow", side_effect=MemoryError):
            with self.assertRaises(CapacityError):
                option.append("e")
        self.assertEqual(option.count, 4)

    def testDebugStringForFlag(self):
        option = Option(Kind.FLAG)
        option.append()
        self.assertEqual(str(option), "1")

    def testDebugStringForValues(self):
        integer = Option(Kind.INTEGER, -1)
        integer.append("1")
        integer.append("2")
        self.assertEqual(str(integer), "(-1) [1, 2]")
        floating = Option(Kind.FLOAT, 1.5)
        self.assertEqual(str(floating), "(1.500000) []")
        string = Option(Kind.STRING, "x")
        string.append("y")
        self.assertEqual(str(string), "(x) [y]")


class TestParseInteger(TestCase):
    """Strict integer conversion."""

    def testDecimal(self):
        self.assertEqual(parse_integer("123"), 123)
        self.assertEqual(parse_integer("-5"), -5)
        self.assertEqual(parse_integer("+5"), 5)
        self.assertEqual(parse_integer("0"), 0)

    def testHexadecimal(self):
        self.assertEqual(parse_integer("0x1F"), 31)
        self.assertEqual(parse_integer("-0X10"), -16)

    def testOctal(self):
        self.assertEqual(parse_integer("010"), 8)

    def testLeadingWhitespace(self):
        self.assertEqual(parse_integer("  7"), 7)

    def testBounds(self):
        self.assertEqual(parse_integer("2147483647"), 2 ** 31 - 1)
        self.assertEqual(parse_integer("-2147483648"), -2 ** 31)

    def testOutOfRange(self):
        for token in ("2147483648", "-2147483649", "99999999999999999999"):
            with self.assertRaises(NumberRangeError) as context:
                parse_integer(token)
            self.assertEqual(context.exception.message, "'%s' is out of range" % token)
            self.assertEqual(context.exception.code, FaultCode.NUMBER_OUT_OF_RANGE)

    def testRangeReportedBeforeTrailingGarbage(self):
        with self.assertRaises(NumberRangeError):
            parse_integer("99999999999x")

    def testMalformed(self):
        for token in ("abc", "12abc", "", " ", "0x", "08", "1.5", "5 "):
            with self.assertRaises(MalformedNumberError) as context:
                parse_integer(token)
            self.assertEqual(context.exception.message, "cannot parse '%s' as an integer" % token)

    def testUnicodeDigitsRejected(self):
        with self.assertRaises(MalformedNumberError):
            parse_integer("٣")


class TestParseFloat(TestCase):
    """Strict floating-point conversion."""

    def testDecimalForms(self):
        self.assertEqual(parse_float("1"), 1.0)
        self.assertEqual(parse_float("-2.5"), -2.5)
        self.assertEqual(parse_float(".5"), 0.5)
        self.assertEqual(parse_float("5."), 5.0)
        self.assertEqual(parse_float("1e3"), 1000.0)
        self.assertEqual(parse_float(" 1E-2"), 0.01)

    def testHexadecimal(self):
        self.assertEqual(parse_float("0x1.8p1"), 3.0)
        self.assertEqual(parse_float("0x10"), 16.0)

    def testInfinityAndNan(self):
        self.assertEqual(parse_float("inf"), math.inf)
        self.assertEqual(parse_float("-Infinity"), -math.inf)
        self.assertTrue(math.isnan(parse_float("nan")))
        self.assertTrue(math.isnan(parse_float("NAN(123)")))

    def testZeroIsNotUnderflow(self):
        self.assertEqual(parse_float("0.0e-999"), 0.0)

    def testOverflow(self):
        with self.assertRaises(NumberRangeError) as context:
            parse_float("1e999")
        self.assertEqual(context.exception.message, "'1e999' is out of range")

    def testUnderflow(self):
        with self.assertRaises(NumberRangeError):
            parse_float("1e-999")

    def testMalformed(self):
        for token in ("abc", "1.5x", "", "e5", "1e", "--1", "infinite"):
            with self.assertRaises(MalformedNumberError) as context:
                parse_float(token)
            self.assertEqual(
                context.exception.message,
                "cannot parse '%s' as a floating-point value" % token,
            )


if __name__ == "__main__":
    unittest.main()
