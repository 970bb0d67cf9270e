"""
Commands module behavioral tests (parsing, running, help, construction).

Scope
- Validate that parse() gathers every issue, reports unconsumed input and keeps the
  successfully parsed keys as the partial value.
- Validate run(): handler invocation (sync and async) and help / version interception.
- Validate the command() factory in direct and decorator modes.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (command, positional, option, flag, ...).
"""

from __future__ import annotations

import io
import unittest
from contextlib import redirect_stdout
from unittest import IsolatedAsyncioTestCase, TestCase

from rich.text import Text

from argosy import Command, command, flag, integer, option, positional, rest_positionals
from argosy.context import ParseContext
from argosy.faults import FaultCode
from argosy.tokens import Registry


def prepare(unit, argv, hotpath=None):
    registry = Registry()
    unit.register(registry)
    return ParseContext.from_argv(argv, registry, hotpath=[unit.name] if hotpath is None else hotpath)


def build(target, jobs, fast):
    """Build a target.

    Longer explanation that stays out of listings.
    """
    return target, jobs, fast


def make():
    return command("build", {
        "target": positional("target"),
        "jobs": option("--jobs", "-j", type=integer, default=lambda: 1),
        "fast": flag("--fast", "-f"),
    }, build, version="1.4.0")


class TestCommandParse(IsolatedAsyncioTestCase):
    """Behavioral tests for Command.parse()."""

    async def testParsesEveryArgument(self):
        app = make()
        result = await app.parse(prepare(app, ["app", "--jobs", "3", "--fast"]))
        self.assertEqual(result.value, {"target": "app", "jobs": 3, "fast": True})

    async def testGathersAllIssuesInDeclarationOrder(self):
        app = make()
        result = await app.parse(prepare(app, ["--jobs", "many"]))
        self.assertEqual(result.error.messages, ("no value provided for target", "not an integer"))

    async def testPartialValueKeepsParsedKeys(self):
        app = make()
        result = await app.parse(prepare(app, ["app", "--jobs", "many"]))
        self.assertEqual(result.error.partial, {"target": "app", "fast": False})

    async def testUnknownArguments(self):
        app = make()
        result = await app.parse(prepare(app, ["app", "extra", "--color"]))
        issue, = result.error.errors
        self.assertEqual(issue.message, "unknown arguments")
        self.assertEqual(issue.code, FaultCode.UNKNOWN_ARGUMENTS)
        self.assertEqual([node.raw for node in issue.nodes], ["extra", "--color"])

    async def testDelimiterIsNotUnknown(self):
        app = command("echo", {"words": rest_positionals("words")}, lambda words: words)
        result = await app.parse(prepare(app, ["--", "-n", "hi"]))
        self.assertEqual(result.value, {"words": ["-n", "hi"]})

    async def testParseNeverExitsOnHelp(self):
        app = make()
        result = await app.parse(prepare(app, ["app", "--help"]))
        self.assertEqual(result.error.messages, ("unknown arguments",))


class TestCommandRun(IsolatedAsyncioTestCase):
    """Behavioral tests for Command.run()."""

    async def testRunsHandlerWithKeywords(self):
        app = make()
        result = await app.run(prepare(app, ["app", "-f"]))
        self.assertEqual(result.value, ("app", 1, True))

    async def testAwaitsCoroutineHandler(self):
        async def greet(name):
            return "hello " + name

        app = command("greet", {"name": positional("name")}, greet)
        self.assertEqual((await app.run(prepare(app, ["ada"]))).value, "hello ada")

    async def testRunReturnsParseError(self):
        calls = []
        app = command("noop", {}, lambda: calls.append(1))
        result = await app.run(prepare(app, ["stray"]))
        self.assertEqual(result.error.messages, ("unknown arguments",))
        self.assertEqual(calls, [])

    async def testHelpWinsOverParseErrors(self):
        app = make()
        stdout = io.StringIO()
        with redirect_stdout(stdout), self.assertRaises(SystemExit) as caught:
            await app.run(prepare(app, ["--help", "--jobs", "many"], hotpath=["tool", "build"]))
        self.assertEqual(caught.exception.code, 1)
        output = stdout.getvalue()
        self.assertIn("tool build", output)
        self.assertIn("> Build a target.", output)
        self.assertIn("--jobs, -j <integer>", output)
        self.assertIn("--help, -h", output)
        self.assertNotIn("Longer explanation", output)

    async def testVersion(self):
        app = make()
        stdout = io.StringIO()
        with redirect_stdout(stdout), self.assertRaises(SystemExit) as caught:
            await app.run(prepare(app, ["--version"]))
        self.assertEqual(caught.exception.code, 0)
        self.assertEqual(stdout.getvalue().strip(), "1.4.0")

    async def testHandlerForwardsValues(self):
        self.assertEqual(make().handler({"target": "x", "jobs": 2, "fast": False}), ("x", 2, False))


class TestCommandConstruction(TestCase):
    """Construction-time validation and the factory."""

    def testDecoratorMode(self):
        @command("hello", {"name": positional("name")}, aliases=["hi"])
        def hello(name):
            """Say hello."""
            return name

        self.assertIsInstance(hello, Command)
        self.assertEqual((hello.name, hello.aliases, hello.description), ("hello", ("hi",), "Say hello."))

    def testExplicitDescriptionWins(self):
        app = command("build", {}, build, description="compile things")
        self.assertEqual(app.description, "compile things")

    def testRegistersArgumentsAndBreaker(self):
        registry = Registry()
        make().register(registry)
        self.assertEqual(registry.options, frozenset({"--jobs", "-j"}))
        self.assertTrue({"--fast", "-f", "--help", "--version"} <= registry.flags)

    def testInvalidConstruction(self):
        with self.assertRaises(ValueError):
            command("two words", {}, build)
        with self.assertRaises(TypeError):
            command("build", {"target": "nope"}, build)
        with self.assertRaises(TypeError):
            command("build", {"not-an-identifier": positional()}, build)
        with self.assertRaises(TypeError):
            command("build", [], build)
        with self.assertRaises(TypeError):
            Command("build", {}, "handler")
        with self.assertRaises(ValueError):
            command("build", {}, build, aliases=["build"])
        with self.assertRaises(TypeError):
            command("build", {}, build, aliases="b")
        with self.assertRaises(TypeError):
            command("build", {}, build, version=Text("1.4.0"))

    def testRepr(self):
        self.assertTrue(repr(make()).startswith("command(name='build', aliases=(), version='1.4.0'"))


if __name__ == "__main__":
    unittest.main()
