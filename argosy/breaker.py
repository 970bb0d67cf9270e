"""
Argosy circuit breaker: the reserved help / version switches.

circuitbreaker.parse(context) looks for "--help" / "-h" and "--version" / "-v"
among the remaining nodes and answers Ok(HELP), Ok(VERSION) or an Err ("neither
help nor version"). Help wins when both are present.

Every subcommand layer registers it, so the reserved switches are always known to be
flags. It is consulted:
- by a subcommand group's run(), only after its selector failed;
- by a command's run(), before its own arguments are parsed, so the reserved nodes
  are visited and never reported as unknown arguments.

intercept() turns a recognized request into the process-level outcome: help is
rendered by the unit and exits with status 1; the version (or "0.0.0") is printed
to stdout and exits with status 0.
"""
import logging
import sys

from rich.text import Text

from .arguments import flag
from .faults import FaultCode, Issue, ParseError
from .helpdoc import echo
from .result import Err, Ok, err, ok

HELP = "help"
VERSION = "version"

logger = logging.getLogger(__name__)


class CircuitBreaker:
    def __init__(self):
        self._help = flag("--help", "-h", description="show help")
        self._version = flag("--version", "-v", description="print the version")

    async def parse(self, context, /):
        help = await self._help.parse(context)
        version = await self._version.parse(context)

        errors = [issue for result in (help, version) if isinstance(result, Err) for issue in result.error.errors]
        if errors:
            return err(ParseError(errors, {}))

        if help.value:
            return ok(HELP)
        if version.value:
            return ok(VERSION)
        return err(ParseError((Issue("neither help nor version", (), FaultCode.NO_INTERCEPTION),), {}))

    def register(self, registry, /):
        self._help.register(registry)
        self._version.register(registry)

    def help_topics(self):
        return self._help.help_topics() + self._version.help_topics()

    def intercept(self, result, unit, context, /):
        """
        Terminate the process when result is a recognized request; return otherwise.
        """
        match result:
            case Ok(value) if value == HELP:
                logger.debug("help requested at %r", context.route)
                unit.print_help(context)
                sys.exit(1)
            case Ok(value) if value == VERSION:
                logger.debug("version requested at %r", context.route)
                echo(Text(getattr(unit, "version", None) or "0.0.0"))
                sys.exit(0)

    def __repr__(self):
        return "circuit-breaker(--help/-h, --version/-v)"


circuitbreaker = CircuitBreaker()


__all__ = (
    "HELP",
    "VERSION",
    "CircuitBreaker",
    "circuitbreaker",
)
