"""
Faults module behavioral tests (codes, rendering, trigger dispatch).

Scope
- Validate that shell mode prints a single "error:" line and exits with status 1.
- Validate that embedded mode (shell=False) raises exceptions and emits warnings.
- Validate option merging through __replace__ and host palette overrides.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import contextlib
import io
import sys
import unittest
from unittest import TestCase, mock

from arglet import (
    FaultCode,
    ParserException,
    ShadowedNameWarning,
    UnknownSwitchError,
    trigger,
)


class TestFaultCode(TestCase):
    """Stable identifiers."""

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.UNKNOWN_COMMAND, 11101)
        self.assertEqual(FaultCode.UNKNOWN_SWITCH, 11112)
        self.assertEqual(FaultCode.SHADOWED_NAME, 12113)


class TestExceptions(TestCase):
    """Rendering and triggering of ParserException."""

    def testMessageAndOptions(self):
        fault = UnknownSwitchError("-x is not a recognised flag or option name", code=FaultCode.UNKNOWN_SWITCH)
        self.assertEqual(str(fault), "-x is not a recognised flag or option name")
        self.assertEqual(fault.code, FaultCode.UNKNOWN_SWITCH)
        with self.assertRaises(TypeError):
            fault.options["code"] = None  # NOQA: read-only mapping

    def testReplaceKeepsTypeAndMergesOptions(self):
        fault = UnknownSwitchError("boom", code=FaultCode.UNKNOWN_SWITCH)
        replaced = fault.__replace__(shell=False)
        self.assertIsInstance(replaced, UnknownSwitchError)
        self.assertIsNot(replaced, fault)
        self.assertEqual(replaced.options["code"], FaultCode.UNKNOWN_SWITCH)
        self.assertFalse(replaced.options["shell"])

    def testEmbeddedModeRaises(self):
        with self.assertRaises(UnknownSwitchError) as context:
            trigger(UnknownSwitchError("boom"), shell=False)
        self.assertEqual(context.exception.message, "boom")

    def testShellModePrintsAndExits(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            trigger(UnknownSwitchError("--nope is not a recognised flag or option name"))
        self.assertEqual(context.exception.code, 1)
        self.assertEqual(stderr.getvalue().rstrip("\n"), "error: --nope is not a recognised flag or option name")

    def testPlainRenderingHasNoStyle(self):
        text = ParserException("boom").__rich__()
        self.assertEqual(text.plain, "error: boom")
        self.assertTrue(all(not span.style for span in text.spans))

    def testColorfulRenderingUsesHostPalette(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__styles__", {"error-label": "red"}, create=True):
            text = ParserException("boom", colorful=True).__rich__()
        self.assertEqual(text.plain, "error: boom")
        self.assertIn("red", [span.style for span in text.spans])

    def testTriggerRequiresProtocol(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("not a fault"))


class TestWarnings(TestCase):
    """Rendering and triggering of ParserWarning."""

    def testEmbeddedModeWarns(self):
        with self.assertWarns(ShadowedNameWarning):
            trigger(ShadowedNameWarning("option 'v' is already registered"), shell=False)

    def testShellModePrintsAndContinues(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            trigger(ShadowedNameWarning("option 'v' is already registered"))
        self.assertEqual(stderr.getvalue().rstrip("\n"), "warning: option 'v' is already registered")


if __name__ == "__main__":
    unittest.main()
