"""
Argosy runner: process-level entry points.

- run(app, argv): parse and execute, returning the value of the successful run. A
  failed run is rendered as a CommandExit on stderr and exits with status 1.
- run_safely(app, argv): coroutine returning Ok(value) or Err(CommandExit) instead of
  exiting. Help and version requests still terminate the process.
- dry_run(app, argv): coroutine returning the raw app.parse() result; nothing runs and
  nothing is intercepted.

argv
- Unset: read tokens from sys.argv[1:].
- str: shell-like string; split with shlex.split.
- Iterable[str]: pre-tokenized sequence.

Every entry point builds one fresh ParseContext: the switch names of the whole tree
are registered, the input is tokenized, and the hot path is seeded with app.name.
"""
import asyncio
import logging
import shlex
import sys
from collections.abc import Iterable

from .capabilities import ArgParser, Runner
from .context import ParseContext
from .faults import CommandExit, trigger
from .result import Err, err
from .tokens import Registry
from .utils import Unset

logger = logging.getLogger(__name__)


def _tokens(argv, /):
    if argv is Unset:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("argv must be a string or an iterable of strings")
        return tokens
    raise TypeError("argv must be a string or an iterable of strings")


def _context(app, argv, /):
    if not isinstance(app, ArgParser) or not isinstance(app, Runner):
        raise TypeError("app must be a command or a subcommand group")
    registry = Registry()
    app.register(registry)
    context = ParseContext.from_argv(_tokens(argv), registry, hotpath=[app.name])
    logger.debug("%s: %r", app.name, context)
    return context


async def run_safely(app, argv=Unset, /, **options):
    """
    Run app and hand back its outcome as a result.

    options are rendering options forwarded to the CommandExit (colorful, fancy).
    """
    context = _context(app, argv)
    result = await app.run(context)
    if isinstance(result, Err):
        return err(CommandExit.from_error(
            result.error,
            **{"prog": app.name, "route": context.route, "argv": context.argv} | options,
        ))
    return result


async def dry_run(app, argv=Unset, /):
    return await app.parse(_context(app, argv))


def run(app, argv=Unset, /, **options):
    """
    Run app to completion and return the value of its successful run, exiting with
    status 1 on failure after printing the report to stderr.

    A command yields its handler's return value; a subcommand group yields an
    Outcome(command, value), nested once per group level.
    """
    result = asyncio.run(run_safely(app, argv, **{"colorful": True} | options))
    if isinstance(result, Err):
        trigger(result.error, shell=True)
    return result.value


__all__ = (
    "run",
    "run_safely",
    "dry_run",
)
