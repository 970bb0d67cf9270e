"""
Argosy subcommand groups: dispatch to one of several named units.

A group is built from a mapping of key to unit (a Command or another group, or
anything with parse / register / print_help / handler / run). Its first positional
token picks the branch:

- Selector: a Positional over a converter testing the token against each unit's
  key and aliases, in mapping order (first match wins, overlapping aliases are not
  rejected). No match fails with "not a valid subcommand name".
- parse(context): selector failure → Err(selector issues, partial {}), with no
  circuit breaker involved; otherwise the key is appended to context.hotpath, the
  unit parses the rest, and its failure is wrapped as
  Err(unit issues, partial {"command": key, "args": unit partial}). Success is
  Ok(Selection(command=key, args=value)).
- run(context): same dispatch, but a selector failure first consults the circuit
  breaker on the same context (help → print_help, exit 1; version → print the
  version or "0.0.0", exit 0). When the breaker recognizes nothing, the selector
  error is returned unchanged with a {} partial. Unit failure is wrapped as
  Err(unit issues, partial {"command": key, "value": unit partial}); success is
  Ok(Outcome(command=key, value=value)).
- register(registry): every unit, plus the circuit breaker.
- print_help(context): lists every key with description and aliases, under the
  route matched so far ("cli" when nothing matched yet), and exits with status 1.

parse never terminates the process, so groups nest freely inside other groups;
run is where help / version interception happens.
"""
import difflib
import logging
import sys
from collections.abc import Mapping
from typing import NamedTuple

from .arguments import Positional
from .breaker import circuitbreaker
from .capabilities import ParserType, isunit, sanitize_unit_metadata
from .converters import Type
from .faults import FaultCode, ParseError, UnknownSubcommandError
from .helpdoc import echo, render_subcommands_help
from .result import Err, Ok, err, ok
from .utils import Unset

logger = logging.getLogger(__name__)


class Selection(NamedTuple):
    command: str
    args: object


class Outcome(NamedTuple):
    command: str
    value: object


class Subcommands(metaclass=ParserType):
    __introspectable__ = ("name", "aliases", "version", "description", "commands")

    def __init__(self, name, commands, /, version=Unset, description=Unset, aliases=()):
        sanitize_unit_metadata(type(self), metadata := {
            "name": name,
            "version": version,
            "description": description,
            "aliases": aliases,
        })

        if not isinstance(commands, Mapping):
            raise TypeError(f"{type(self).__typename__} 'commands' must be a mapping")
        elif not commands:
            raise ValueError(f"{type(self).__typename__} 'commands' cannot be empty")
        for key, unit in commands.items():
            if not isinstance(key, str) or not key.strip() or any(character.isspace() for character in key):
                raise TypeError(f"{type(self).__typename__} command keys must be non-empty words")
            if not isunit(unit):
                raise TypeError(f"{type(self).__typename__} command {key!r} must provide parse, register, print_help, handler and run")

        self._name = metadata["name"]
        self._version = metadata["version"]
        self._description = metadata["description"]
        self._aliases = metadata["aliases"]
        self._commands = dict(commands)
        self._selector = Positional(
            "subcommand",
            type=Type(self._select, display_name="subcommand", description="one of " + ", ".join(self._commands)),
        )

    def _select(self, token, /):
        for key, unit in self._commands.items():
            if token == key or token in (getattr(unit, "aliases", None) or ()):
                return key

        names = [*self._commands]
        names.extend(alias for unit in self._commands.values() for alias in getattr(unit, "aliases", None) or ())
        hint = None
        if suggestions := difflib.get_close_matches(token, names, n=3):
            hint = "did you mean " + " or ".join(f"'{suggestion}'" for suggestion in suggestions) + "?"
        raise UnknownSubcommandError("not a valid subcommand name", code=FaultCode.UNKNOWN_SUBCOMMAND, hint=hint)

    async def parse(self, context, /):
        selected = await self._selector.parse(context)
        if isinstance(selected, Err):
            return err(ParseError(selected.error.errors, {}))

        key = selected.value
        context.hotpath.append(key)
        logger.debug("%s: parsing %r", self._name, key)

        match await self._commands[key].parse(context):
            case Err(error):
                return err(ParseError(error.errors, {"command": key, "args": error.partial}))
            case Ok(value):
                return ok(Selection(key, value))

    async def run(self, context, /):
        selected = await self._selector.parse(context)
        if isinstance(selected, Err):
            breaker = await circuitbreaker.parse(context)
            circuitbreaker.intercept(breaker, self, context)
            return err(ParseError(selected.error.errors, {}))

        key = selected.value
        context.hotpath.append(key)
        logger.debug("%s: running %r", self._name, key)

        match await self._commands[key].run(context):
            case Err(error):
                return err(ParseError(error.errors, {"command": key, "value": error.partial}))
            case Ok(value):
                return ok(Outcome(key, value))

    def register(self, registry, /):
        for unit in self._commands.values():
            unit.register(registry)
        circuitbreaker.register(registry)

    def handler(self, selection, /):
        command, args = selection
        return self._commands[command].handler(args)

    def print_help(self, context, /):
        entries = [
            (key, getattr(unit, "description", None), tuple(getattr(unit, "aliases", None) or ()))
            for key, unit in self._commands.items()
        ]
        echo(render_subcommands_help(
            " ".join(context.hotpath) or "cli",
            entries=entries,
            description=self._description,
        ))
        sys.exit(1)


def subcommands(name, commands, /, version=Unset, description=Unset, aliases=()):
    return Subcommands(name, commands, version=version, description=description, aliases=aliases)


__all__ = (
    "Selection",
    "Outcome",
    "Subcommands",
    "subcommands",
)
