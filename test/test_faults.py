# python
"""
Fault behavioral tests (codes, rendering, triggering, host hooks).

Scope
- Validate FaultCode grouping and host-side normalization through __main__.__codes__.
- Validate getdoc() lookups through __main__.__docs__.
- Validate rendering of errors and warnings (plain, colorful, fancy).
- Validate trigger(): option merging, raising, warning, and shell-mode exit.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured with a file-backed rich Console; no terminal is required.
"""

from __future__ import annotations

import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

import pennant.faults
from pennant import (
    FaultCode,
    ParseError,
    InvalidArgumentError,
    MissingValueError,
    OutOfMemoryError,
    FlagWarning,
    UnknownFlagWarning,
    DetachedValueWarning,
    trigger,
    getdoc,
)


def _console(**options):
    return Console(file=io.StringIO(), width=100, color_system=None, **options)


def _missing(**options):
    return MissingValueError(
        "missing value for flag '--port' at first position",
        title="missing value",
        code=FaultCode.MISSING_VALUE,
        hint="pass a int value after it (for example: --port <value>)",
        **options
    )


class TestFaultCode(TestCase):
    """Codes are stable and grouped by severity."""

    def testErrorsAndWarningsAreGrouped(self):
        for code in (FaultCode.INVALID_ARGUMENT, FaultCode.MISSING_VALUE, FaultCode.OUT_OF_MEMORY):
            self.assertEqual(code // 1000, 13)
        for code in (
            FaultCode.UNKNOWN_FLAG,
            FaultCode.UNKNOWN_ALIAS,
            FaultCode.UNCASTABLE_VALUE,
            FaultCode.DETACHED_VALUE,
        ):
            self.assertEqual(code // 1000, 14)

    def testNormalizeDefaultsToNumber(self):
        with mock.patch.object(sys.modules["__main__"], "__codes__", {}, create=True):
            self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "13102")

    def testNormalizeUsesHostLabels(self):
        with mock.patch.object(
                sys.modules["__main__"], "__codes__", {FaultCode.MISSING_VALUE: "E-MISSING"}, create=True
        ):
            self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "E-MISSING")
            self.assertEqual(FaultCode.UNKNOWN_FLAG.normalize(), "14101")


class TestGetDoc(TestCase):

    def testReturnsHostDocumentation(self):
        docs = {FaultCode.UNKNOWN_FLAG: "the flag is not declared"}
        with mock.patch.object(sys.modules["__main__"], "__docs__", docs, create=True):
            self.assertEqual(getdoc(FaultCode.UNKNOWN_FLAG), "the flag is not declared")
            self.assertIsNone(getdoc(FaultCode.UNKNOWN_ALIAS))

    def testRejectsPlainIntegers(self):
        with self.assertRaises(TypeError):
            getdoc(13101)


class TestHierarchy(TestCase):
    """Errors keep their builtin bases so callers can catch them broadly."""

    def testErrorBases(self):
        self.assertTrue(issubclass(InvalidArgumentError, ParseError))
        self.assertTrue(issubclass(InvalidArgumentError, ValueError))
        self.assertTrue(issubclass(MissingValueError, ParseError))
        self.assertTrue(issubclass(OutOfMemoryError, MemoryError))

    def testWarningBases(self):
        self.assertTrue(issubclass(UnknownFlagWarning, FlagWarning))
        self.assertTrue(issubclass(UnknownFlagWarning, Warning))

    def testMessageAndOptions(self):
        fault = _missing(index=3)
        self.assertEqual(str(fault), "missing value for flag '--port' at first position")
        self.assertIs(fault.options["code"], FaultCode.MISSING_VALUE)
        self.assertEqual(fault.options["index"], 3)
        with self.assertRaises(TypeError):
            fault.options["index"] = 4  # type: ignore[index]

    def testEmptyMessage(self):
        self.assertEqual(str(ParseError()), "")


class TestRendering(TestCase):
    """Faults render as header, message, and hint."""

    def setUp(self) -> None:
        patcher = mock.patch.object(sys.modules["__main__"], "__prog__", "demo", create=True)
        patcher.start()
        self.addCleanup(patcher.stop)

    def render(self, fault, **options):
        console = _console(**options)
        console.print(fault)
        return console.file.getvalue()

    def testPlainLayout(self):
        output = self.render(_missing())
        self.assertIn("[ demo — 13102 | Missing Value ]", output)
        self.assertIn("missing value for flag '--port' at first position", output)
        self.assertIn("→ pass a int value after it", output)
        self.assertNotIn("╭", output)

    def testFancyLayout(self):
        output = self.render(_missing(fancy=True))
        self.assertIn("╭", output)
        self.assertIn("demo — 13102 | Missing Value", output)
        self.assertIn("missing value for flag '--port'", output)

    def testWarningLayout(self):
        output = self.render(UnknownFlagWarning(
            "unknown flag '--nope' at second position",
            title="unknown flag",
            code=FaultCode.UNKNOWN_FLAG,
        ))
        self.assertIn("[ demo — 14101 | Unknown Flag ]", output)
        self.assertIn("unknown flag '--nope' at second position", output)

    def testMissingCodeRendersPlaceholder(self):
        output = self.render(ParseError("boom"))
        self.assertIn("[ demo — ? | Parse Error ]", output)

    def testColorfulEmitsStyles(self):
        console = Console(file=io.StringIO(), width=100, force_terminal=True, color_system="truecolor")
        console.print(_missing())
        self.assertIn("\x1b[", console.file.getvalue())

    def testColorlessEmitsNoStyles(self):
        console = Console(file=io.StringIO(), width=100, force_terminal=True, color_system="truecolor")
        console.print(_missing(colorful=False))
        self.assertNotIn("\x1b[", console.file.getvalue())


class TestTrigger(TestCase):
    """trigger() merges options and dispatches on the fault's protocol."""

    def testReplaceMergesOptions(self):
        fault = _missing()
        replaced = copy.replace(fault, shell=True)
        self.assertIsInstance(replaced, MissingValueError)
        self.assertIsNot(replaced, fault)
        self.assertTrue(replaced.options["shell"])
        self.assertIs(replaced.options["code"], FaultCode.MISSING_VALUE)
        self.assertNotIn("shell", fault.options)
        self.assertEqual(replaced.message, fault.message)

    def testRaisesErrors(self):
        with self.assertRaises(MissingValueError) as context:
            trigger(_missing(), strict=False, shell=False)
        self.assertFalse(context.exception.options["strict"])

    def testWarnsWarnings(self):
        with self.assertWarns(UnknownFlagWarning):
            trigger(UnknownFlagWarning("unknown flag '--nope'", code=FaultCode.UNKNOWN_FLAG))

    def testRejectsForeignObjects(self):
        with self.assertRaises(TypeError):
            trigger(object())
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testShellErrorExits(self):
        console = _console()
        with mock.patch.object(pennant.faults, "console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(_missing(), shell=True)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("missing value", console.file.getvalue())

    def testShellWarningPrints(self):
        console = _console()
        with mock.patch.object(pennant.faults, "console", console):
            self.assertIsNone(trigger(DetachedValueWarning(
                "alias 'p' in '-pv' at first position cannot take a value",
                title="detached value",
                code=FaultCode.DETACHED_VALUE,
            ), shell=True))
        self.assertIn("Detached Value", console.file.getvalue())


if __name__ == "__main__":
    unittest.main()
