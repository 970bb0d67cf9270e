"""
Argosy results: explicit success/failure values.

Scope
- Ok / Err: the two variants of a parse or run outcome. Every combinator returns
  one of them instead of raising, so composing parsers is a matter of branching
  on the variant and nothing is thrown across combinator boundaries.
- ok() / err(): constructors mirroring the variant names.
- isok() / iserr(): total, mutually exclusive predicates.

Contract
- Both variants are frozen; a result never changes once built.
- There is no implicit unwrap: callers must discriminate, either with the
  predicates or structurally:

    match result:
        case Ok(value):
            ...
        case Err(error):
            ...

- Result is the union type (Ok | Err) and may be used in isinstance() checks.
"""
import dataclasses
from typing import Generic, TypeVar

_T = TypeVar("_T")
_E = TypeVar("_E")


@dataclasses.dataclass(frozen=True, slots=True)
class Ok(Generic[_T]):
    """Successful outcome carrying the produced value."""

    value: _T


@dataclasses.dataclass(frozen=True, slots=True)
class Err(Generic[_E]):
    """Failed outcome carrying the error value (a ParseError in the parser layers)."""

    error: _E


Result = Ok | Err


def ok(value, /):
    return Ok(value)


def err(error, /):
    return Err(error)


def isok(result, /):
    """
    Return True for Ok and False for Err.

    Raises TypeError for anything that is not a result, so a forgotten await or a
    bare value never passes silently as a failure.
    """
    if isinstance(result, Ok):
        return True
    if isinstance(result, Err):
        return False
    raise TypeError("isok() argument must be a result, not %r" % type(result).__name__)


def iserr(result, /):
    """
    Return True for Err and False for Ok (TypeError for non-results).
    """
    return not isok(result)


__all__ = (
    "Ok",
    "Err",
    "Result",
    "ok",
    "err",
    "isok",
    "iserr",
)
