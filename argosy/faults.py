"""
Argosy faults: parse error values, user-facing errors and warnings, and rendering.

Scope
- Issue / ParseError: the error payload carried by Err results. Parsers never raise
  across combinator boundaries; they return Err(ParseError(...)) instead.
  • Issue: one message, the input nodes it refers to, a FaultCode and an optional hint.
  • ParseError: ordered issues plus a best-effort partial value for diagnostics.
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- CommandException / CommandWarning: carry message + options and know how to render
  themselves with rich in a friendly, lowercased and actionable way.
- CommandExit: groups one CommandException per issue of a failed top-level run and
  shows the original input with the offending tokens underlined.
- trigger(): central entry point to surface any fault.

Rendering options (merged through trigger(fault, **options))
- prog: program label for headers (overridable with __prog__ in __main__).
- route: command route used in hints (e.g. "git remote").
- shell: print and exit instead of raising (warnings: print instead of warnings.warn).
- colorful / fancy: styling and panel chrome.
- argv: original input tokens (CommandExit only).

Styling
- Define a mapping named __styles__ in __main__ to override palette entries.
"""
import dataclasses
import sys
import warnings
from enum import IntEnum
from types import MappingProxyType
from typing import NamedTuple

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .helpdoc import painter, palette
from .result import err
from .utils import Unset, coalesce


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping
    - routing (1110x): UNKNOWN_SUBCOMMAND
    - arguments (111xx): INVALID_INPUT, REPEATED_SWITCH, MISSING_VALUE,
      UNCONVERTIBLE_VALUE, UNKNOWN_ARGUMENTS
    - circuit breaker (1115x): NO_INTERCEPTION (internal, never shown alone)
    - warnings (12xxx): AMBIGUOUS_SWITCH

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- routing errors (11xxx) ---
    UNKNOWN_SUBCOMMAND  = 11102

    # --- argument errors (11xxx) ---
    INVALID_INPUT       = 11111
    REPEATED_SWITCH     = 11115
    MISSING_VALUE       = 11117
    UNCONVERTIBLE_VALUE = 11126
    UNKNOWN_ARGUMENTS   = 11141

    # --- circuit breaker (11xxx) ---
    NO_INTERCEPTION     = 11151

    # --- warnings (12xxx) ---
    AMBIGUOUS_SWITCH    = 12113

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to override
        numeric ids with friendlier labels; otherwise the numeric value is used.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class Issue(NamedTuple):
    """
    One problem found while parsing.

    nodes are the input nodes the message refers to (possibly none, e.g. when a
    required value is missing altogether); they drive the underline in CommandExit.
    """
    message: str
    nodes: tuple = ()
    code: FaultCode = FaultCode.INVALID_INPUT
    hint: str | None = None


@dataclasses.dataclass(frozen=True)
class ParseError:
    """
    Error payload of a failed parse or run.

    - errors: ordered issues (never empty for a real failure).
    - partial: whatever was understood before the failure point. It is not required
      to be complete or consistent; upper layers use it for diagnostics only.
    """
    errors: tuple
    partial: object = None

    def __post_init__(self):
        object.__setattr__(self, "errors", tuple(self.errors))
        if not all(isinstance(issue, Issue) for issue in self.errors):
            raise TypeError("parse-error 'errors' must be an iterable of issues")

    @property
    def messages(self):
        return tuple(issue.message for issue in self.errors)


def failure(message, /, *nodes, code=FaultCode.INVALID_INPUT, hint=None, partial=None):
    """
    Shorthand for an Err carrying a single issue.
    """
    return err(ParseError((Issue(message, tuple(nodes), code, hint),), partial))


def _prog(options, /):
    return getattr(__import__("__main__"), "__prog__", options.get("prog", "cli"))


class CommandException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = palette({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })
        text = painter(styles, self.options.get("colorful", False))
        code = self.options.get("code", FaultCode.INVALID_INPUT)

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), "prog-name"),
            ": ",
            text(code.normalize(), "code"),
            " | ",
            text(self.options.get("title", "error").title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")

        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        Console(stderr=True).print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidInputError(CommandException): ...
class UnknownSubcommandError(CommandException): ...
class RepeatedSwitchError(CommandException): ...
class MissingValueError(CommandException): ...
class UnconvertibleValueError(CommandException): ...
class UnknownArgumentsError(CommandException): ...


class CommandWarning(Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = palette({
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })
        text = painter(styles, self.options.get("colorful", False))
        code = self.options.get("code", FaultCode.AMBIGUOUS_SWITCH)

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), "prog-name"),
            ": ",
            text(code.normalize(), "code"),
            " | ",
            text(self.options.get("title", "warning").title(), "warning-title"),
            " ]"
        )
        renders = [header, text(self.message, "warning-message")]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        return Group(*renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=3)
        Console(stderr=True).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class AmbiguousSwitchWarning(CommandWarning): ...


# code -> (exception type, title, hint template); the template receives the route.
_FAULTS = {
    FaultCode.INVALID_INPUT: (
        InvalidInputError,
        "invalid input",
        "run '{route} --help' to see the expected usage",
    ),
    FaultCode.UNKNOWN_SUBCOMMAND: (
        UnknownSubcommandError,
        "unknown subcommand",
        "run '{route} --help' to see available subcommands",
    ),
    FaultCode.REPEATED_SWITCH: (
        RepeatedSwitchError,
        "repeated option or flag",
        "keep a single occurrence; run '{route} --help' to see which options repeat",
    ),
    FaultCode.MISSING_VALUE: (
        MissingValueError,
        "missing value",
        "add the missing value or run '{route} --help' to see the expected usage",
    ),
    FaultCode.UNCONVERTIBLE_VALUE: (
        UnconvertibleValueError,
        "invalid value",
        "check the value or run '{route} --help' to see accepted forms",
    ),
    FaultCode.UNKNOWN_ARGUMENTS: (
        UnknownArgumentsError,
        "unknown arguments",
        "remove the extra inputs or run '{route} --help' to see valid forms",
    ),
}


def fault(issue, /, **options):
    """
    Build the CommandException matching an Issue's code, with title and hint filled in.
    """
    if not isinstance(issue, Issue):
        raise TypeError("fault() argument must be an issue")
    type, title, hint = _FAULTS.get(issue.code, _FAULTS[FaultCode.INVALID_INPUT])
    return type(
        issue.message,
        **{
            "code": issue.code,
            "title": title,
            "hint": issue.hint or hint.format(route=options.get("route", "cli")),
            "nodes": issue.nodes,
        } | options
    )


class CommandExit(ExceptionGroup):
    """
    Bundle of the faults of one failed run, rendered as a single report.
    """

    def __new__(cls, exceptions, /, **options):
        return super().__new__(cls, "bad exit", tuple(exceptions))

    def __init__(self, exceptions, /, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    @classmethod
    def from_error(cls, error, /, **options):
        """
        Turn a ParseError into a CommandExit (one exception per issue, in order).
        """
        if not isinstance(error, ParseError):
            raise TypeError("from_error() argument must be a parse-error")
        issues = error.errors or (Issue("parsing failed"),)
        return cls([fault(issue, **options) for issue in issues], **options)

    def __rich__(self):
        styles = palette({
            "prog-name": "bold #E6E6F0",
            "title": "bold #FF4DA6",
            "token": "#C8C8D0",
            "error-token": "bold underline #FF4DA6",
            "caret": "bold #FF4DA6",
        })
        colorful = self.options.get("colorful", False)
        text = painter(styles, colorful)

        header = Text.assemble("[ ", text(_prog(self.options), "prog-name"), ": ", text(self.message.title(), "title"), " ]")
        renders = [header]

        if argv := self.options.get("argv", ()):
            marked = {node.index for exception in self.exceptions for node in exception.options.get("nodes", ())}
            line, carets = Text(), Text()
            for index, token in enumerate(argv):
                if index:
                    line.append(" ")
                    carets.append(" ")
                line.append(text(token, "error-token" if index in marked else "token"))
                carets.append(text(("^" if index in marked else " ") * len(token), "caret"))
            carets.rstrip()
            renders.append(line)
            if carets:
                renders.append(carets)

        for exception in self.exceptions:
            renders.append(exception.__replace__(colorful=colorful, fancy=False))

        if self.options.get("fancy", False):
            return Panel(Group(*renders[1:]), title=header, title_align="left")
        return Group(*renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        Console(stderr=True).print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - with shell=True, rendering happens via a rich console on stderr; otherwise
      exceptions are raised and warnings go through warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "Issue",
    "ParseError",
    "failure",
    "fault",
    "CommandException",
    "InvalidInputError",
    "UnknownSubcommandError",
    "RepeatedSwitchError",
    "MissingValueError",
    "UnconvertibleValueError",
    "UnknownArgumentsError",
    "CommandWarning",
    "AmbiguousSwitchWarning",
    "CommandExit",
    "trigger",
)
