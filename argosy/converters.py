"""
Argosy converters: turning one raw string into a typed value.

A Type wraps a conversion callable plus the metadata help rendering needs. The
callable may be synchronous or a coroutine function; Type.convert() is always a
coroutine and awaits whatever needs awaiting. Failure is signalled by raising, and
the message of the raised exception is what the user eventually reads: leaf parsers
catch it and turn it into an Issue.

Built-ins
- string: the raw string itself.
- number: a float; "not a number" otherwise.
- integer: an int; "not an integer" otherwise.
- boolean: exactly "true" or "false".
- one_of(*choices): one of the given literals.
- extend(base, next): base conversion followed by a refinement step.

astype() accepts a Type or any plain callable (int, pathlib.Path, ...) wherever a
Type is expected.
"""
from rich.text import Text

from .capabilities import ParserType
from .utils import Unset, coalesce, resolve


class Type(metaclass=ParserType):
    __introspectable__ = ("display_name", "description")

    def __init__(self, convert, /, display_name=Unset, description=Unset, default=Unset):
        if not callable(convert):
            raise TypeError(f"{type(self).__typename__} 'convert' must be callable")

        if not isinstance(display_name, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'display_name' must be a string")
        elif isinstance(display_name, str) and not (display_name := display_name.strip()):
            raise ValueError(f"{type(self).__typename__} 'display_name' cannot be empty")

        if not isinstance(description, str | Text | Unset):
            raise TypeError(f"{type(self).__typename__} 'description' must be a string")
        elif isinstance(description, str) and not (description := description.strip()):
            raise ValueError(f"{type(self).__typename__} 'description' cannot be empty")

        if not callable(default) and default is not Unset:
            raise TypeError(f"{type(self).__typename__} 'default' must be callable")

        self._convert = convert
        self._display_name = coalesce(display_name, getattr(convert, "__name__", "value"))
        self._description = coalesce(description)
        self._default = coalesce(default)

    @property
    def default(self):
        """
        Zero-argument factory for the value used when nothing was provided, or None.
        """
        return self._default

    async def convert(self, raw, /):
        return await resolve(self._convert(raw))


def astype(object, /):
    if isinstance(object, Type):
        return object
    if callable(object):
        return Type(object)
    raise TypeError("type must be a converter or a callable")


def _number(raw, /):
    try:
        return float(raw)
    except ValueError:
        raise ValueError("not a number") from None


def _integer(raw, /):
    try:
        return int(raw)
    except ValueError:
        raise ValueError("not an integer") from None


def _boolean(raw, /):
    match raw:
        case "true":
            return True
        case "false":
            return False
    raise ValueError(f"expected value to be either 'true' or 'false', got: '{raw}'")


string = Type(str, display_name="str")
number = Type(_number, display_name="number")
integer = Type(_integer, display_name="integer")
boolean = Type(_boolean, display_name="boolean")


def one_of(*choices):
    """
    Build a converter accepting exactly one of the given string literals.
    """
    if not choices:
        raise TypeError("one_of() requires at least one choice")
    if not all(isinstance(choice, str) for choice in choices):
        raise TypeError("one_of() choices must be strings")

    def convert(raw, /):
        if raw in choices:
            return raw
        expected = ", ".join(f"'{choice}'" for choice in choices)
        raise ValueError(f"invalid value '{raw}', expected one of: {expected}")

    return Type(convert, display_name="|".join(choices), description="one of " + ", ".join(choices))


def extend(base, next=Unset, /, **metadata):
    """
    Chain a refinement step after a base converter, keeping the base's metadata
    unless overridden (display_name, description, default).
    """
    base = astype(base)
    if not callable(next) and next is not Unset:
        raise TypeError("extend() second argument must be callable")

    async def convert(raw, /):
        value = await base.convert(raw)
        if next is Unset:
            return value
        return await resolve(next(value))

    return Type(
        convert,
        display_name=metadata.get("display_name", base.display_name),
        description=metadata.get("description", base.description or Unset),
        default=metadata.get("default", base.default or Unset),
    )


__all__ = (
    "Type",
    "astype",
    "string",
    "number",
    "integer",
    "boolean",
    "one_of",
    "extend",
)
