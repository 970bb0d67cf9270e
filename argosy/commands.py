"""
Argosy commands: a named set of leaf parsers bound to a handler.

A Command is both a parser and a runner:
- parse(context) runs every argument parser in declaration order, gathers all of
  their issues, then reports any node nobody consumed as "unknown arguments". On
  failure the partial value is the mapping of the keys that did parse.
- run(context) checks the circuit breaker first (so "--help" / "--version" are
  consumed), parses, lets the breaker intercept, and finally calls the handler with
  the parsed values as keyword arguments. The handler may be a coroutine function.
- print_help(context) renders usage for the route matched so far and exits with
  status 1.

The command() factory works both directly and as a decorator:

    @command("build", {"fast": flag("--fast")}, description="build the project")
    def build(fast): ...

    build = command("build", {"fast": flag("--fast")}, handler)

When no description is given, the first paragraph of the handler's docstring is used.
"""
import inspect
import sys
from collections.abc import Mapping

from .breaker import circuitbreaker
from .capabilities import ArgParser, ParserType, sanitize_unit_metadata
from .faults import FaultCode, Issue, ParseError
from .helpdoc import echo, render_command_help
from .result import Err, Ok, err, ok
from .tokens import DelimiterNode
from .utils import Unset, coalesce, rename, resolve


class Command(metaclass=ParserType):
    __introspectable__ = ("name", "aliases", "version", "description", "args")

    def __init__(self, name, args, handler, /, version=Unset, description=Unset, aliases=()):
        sanitize_unit_metadata(type(self), metadata := {
            "name": name,
            "version": version,
            "description": description,
            "aliases": aliases,
        })

        if not isinstance(args, Mapping):
            raise TypeError(f"{type(self).__typename__} 'args' must be a mapping")
        for key, parser in args.items():
            if not isinstance(key, str) or not key.isidentifier():
                raise TypeError(f"{type(self).__typename__} argument keys must be identifiers")
            if not isinstance(parser, ArgParser):
                raise TypeError(f"{type(self).__typename__} argument {key!r} must be a parser")

        if not callable(handler):
            raise TypeError(f"{type(self).__typename__} 'handler' must be callable")

        self._name = metadata["name"]
        self._version = metadata["version"]
        self._description = metadata["description"]
        self._aliases = metadata["aliases"]
        self._args = dict(args)
        self._handler = handler

    async def parse(self, context, /):
        values, errors = {}, []
        for key, parser in self._args.items():
            match await parser.parse(context):
                case Ok(value):
                    values[key] = value
                case Err(error):
                    errors.extend(error.errors)

        if unknown := [node for node in context.remaining() if not isinstance(node, DelimiterNode)]:
            errors.append(Issue("unknown arguments", tuple(unknown), FaultCode.UNKNOWN_ARGUMENTS))

        if errors:
            return err(ParseError(errors, values))
        return ok(values)

    def register(self, registry, /):
        for parser in self._args.values():
            parser.register(registry)
        circuitbreaker.register(registry)

    def handler(self, values, /):
        return self._handler(**values)

    async def run(self, context, /):
        breaker = await circuitbreaker.parse(context)
        parsed = await self.parse(context)
        circuitbreaker.intercept(breaker, self, context)

        if isinstance(parsed, Err):
            return parsed
        return ok(await resolve(self.handler(parsed.value)))

    def help_topics(self):
        topics = []
        for parser in self._args.values():
            topics.extend(getattr(parser, "help_topics", list)())
        return topics + circuitbreaker.help_topics()

    def print_help(self, context, /):
        echo(render_command_help(
            " ".join(context.hotpath) or self._name,
            topics=self.help_topics(),
            description=self._description,
            version=self._version,
            aliases=self._aliases,
        ))
        sys.exit(1)


def command(name, /, args=Unset, handler=Unset, **metadata):
    """
    Build a Command, or return a decorator building one around the decorated handler.

    Keyword metadata: version, description, aliases.
    """
    if handler is Unset:

        def wrapper(handler, /):
            return command(name, args, handler, **metadata)

        return rename(wrapper, "command")

    if "description" not in metadata and (docstring := inspect.getdoc(handler)):
        metadata["description"] = docstring.partition("\n\n")[0]
    return Command(name, coalesce(args, {}), handler, **metadata)


__all__ = (
    "Command",
    "command",
)
