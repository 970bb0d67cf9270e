"""
Faults module behavioral tests (error values, exceptions, warnings, rendering).

Scope
- Validate Issue / ParseError shape and the failure() shorthand.
- Validate fault() mapping from codes to exception types, titles and hints.
- Validate trigger() for exceptions (raise vs. shell print + exit) and warnings.
- Validate CommandExit grouping and its rendering of the offending input.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
from contextlib import redirect_stderr
from unittest import TestCase

from rich.console import Console

from argosy.faults import (
    AmbiguousSwitchWarning,
    CommandExit,
    FaultCode,
    InvalidInputError,
    Issue,
    MissingValueError,
    ParseError,
    UnknownSubcommandError,
    failure,
    fault,
    trigger,
)
from argosy.tokens import tokenize


def render(renderable):
    console = Console(file=io.StringIO(), width=100)
    console.print(renderable)
    return console.file.getvalue()


class TestParseError(TestCase):
    """Behavioral tests for the error payload."""

    def testErrorsBecomeTuple(self):
        error = ParseError([Issue("a"), Issue("b")], {})
        self.assertEqual(error.errors, (Issue("a"), Issue("b")))
        self.assertEqual(error.messages, ("a", "b"))

    def testRejectsNonIssues(self):
        with self.assertRaises(TypeError):
            ParseError(["a"])

    def testFailureShorthand(self):
        result = failure("boom", code=FaultCode.MISSING_VALUE, partial={"x": 1})
        self.assertEqual(result.error.messages, ("boom",))
        self.assertEqual(result.error.errors[0].code, FaultCode.MISSING_VALUE)
        self.assertEqual(result.error.partial, {"x": 1})

    def testIssueDefaults(self):
        issue = Issue("boom")
        self.assertEqual((issue.nodes, issue.code, issue.hint), ((), FaultCode.INVALID_INPUT, None))


class TestFault(TestCase):
    """Behavioral tests for fault() and exception rendering."""

    def testMapsCodeToType(self):
        exception = fault(Issue("no value provided for name", (), FaultCode.MISSING_VALUE), route="tool build")
        self.assertIsInstance(exception, MissingValueError)
        self.assertEqual(str(exception), "no value provided for name")
        self.assertEqual(exception.options["title"], "missing value")
        self.assertIn("tool build --help", exception.options["hint"])

    def testIssueHintWins(self):
        exception = fault(Issue("nope", (), FaultCode.UNKNOWN_SUBCOMMAND, "did you mean 'build'?"))
        self.assertIsInstance(exception, UnknownSubcommandError)
        self.assertEqual(exception.options["hint"], "did you mean 'build'?")

    def testUnmappedCodeFallsBack(self):
        self.assertIsInstance(fault(Issue("odd", (), FaultCode.NO_INTERCEPTION)), InvalidInputError)

    def testRejectsNonIssues(self):
        with self.assertRaises(TypeError):
            fault("boom")

    def testRendering(self):
        exception = fault(Issue("no value provided for name", (), FaultCode.MISSING_VALUE), prog="tool", route="tool")
        output = render(exception)
        self.assertIn("[ tool: 11117 | Missing Value ]", output)
        self.assertIn("no value provided for name", output)
        self.assertIn("→ add the missing value", output)

    def testNormalize(self):
        self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "11117")


class TestTrigger(TestCase):
    """Behavioral tests for trigger()."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(MissingValueError) as caught:
            trigger(MissingValueError("missing"), hint="add it")
        self.assertEqual(caught.exception.options["hint"], "add it")

    def testShellPrintsAndExits(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(SystemExit) as caught:
            trigger(MissingValueError("missing", code=FaultCode.MISSING_VALUE), shell=True, prog="tool")
        self.assertEqual(caught.exception.code, 1)
        self.assertIn("missing", stderr.getvalue())

    def testWarningGoesThroughWarnings(self):
        with self.assertWarns(AmbiguousSwitchWarning):
            trigger(AmbiguousSwitchWarning("careful"))

    def testWarningInShellPrints(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            trigger(AmbiguousSwitchWarning("careful"), shell=True)
        self.assertIn("careful", stderr.getvalue())

    def testRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))


class TestCommandExit(TestCase):
    """Behavioral tests for the grouped report."""

    def testOneExceptionPerIssue(self):
        error = ParseError([Issue("a", (), FaultCode.MISSING_VALUE), Issue("b", (), FaultCode.UNKNOWN_ARGUMENTS)])
        group = CommandExit.from_error(error, route="tool")
        self.assertEqual(len(group.exceptions), 2)
        self.assertIsInstance(group.exceptions[0], MissingValueError)

    def testEmptyErrorStillReports(self):
        self.assertEqual(len(CommandExit.from_error(ParseError(())).exceptions), 1)

    def testRejectsNonParseErrors(self):
        with self.assertRaises(TypeError):
            CommandExit.from_error("boom")

    def testRendersUnderlinedInput(self):
        argv = ("build", "--jobs", "x")
        option = tokenize(argv)[1]
        error = ParseError([Issue("not an integer", (option, option.value), FaultCode.UNCONVERTIBLE_VALUE)])
        output = render(CommandExit.from_error(error, prog="tool", argv=argv))
        self.assertIn("build --jobs x", output)
        self.assertIn("      ^^^^^^ ^", output)
        self.assertIn("not an integer", output)

    def testTriggerRaisesOutsideShell(self):
        with self.assertRaises(CommandExit):
            trigger(CommandExit.from_error(ParseError([Issue("a")])))

    def testReplaceKeepsExceptions(self):
        group = CommandExit.from_error(ParseError([Issue("a")]))
        replaced = group.__replace__(fancy=True)
        self.assertEqual(replaced.exceptions, group.exceptions)
        self.assertTrue(replaced.options["fancy"])


if __name__ == "__main__":
    unittest.main()
