"""
Argosy capabilities: the contracts parsers and runners fulfil, and the metaclass
that gives every concrete parser its introspection plumbing.

Protocols (runtime-checkable, structural)
- ArgParser: parse(context) -> Result (coroutine) and register(registry).
- ProvidesHelp: print_help(context), which renders and exits with status 1.
- Runner: handler(value) and run(context) -> Result (coroutine).
- Unit: a branch of a subcommand group; ArgParser + ProvidesHelp + Runner plus the
  name / aliases / description metadata.

ParserType
- Derives __typename__ from the class name ("RestPositionals" → "rest-positionals"),
  used in error messages.
- Exposes every name listed in __introspectable__ as a read-only view over "_name".
- Provides stable __repr__ / __rich_repr__ built from __introspectable__.
"""
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from rich.text import Text

from .utils import Unset, coalesce, rename, typename, view


@runtime_checkable
class ArgParser(Protocol):
    async def parse(self, context, /): ...
    def register(self, registry, /): ...


@runtime_checkable
class ProvidesHelp(Protocol):
    def print_help(self, context, /): ...


@runtime_checkable
class Runner(Protocol):
    def handler(self, value, /): ...
    async def run(self, context, /): ...


@runtime_checkable
class Unit(ArgParser, ProvidesHelp, Runner, Protocol):
    name: str
    aliases: tuple
    description: str | None


class ParserType(type):
    """
    Metaclass for argument, command and subcommand parsers.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens).
    - __introspectable__ lists the fields mirrored as read-only properties and shown
      by __repr__ / __rich_repr__.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": typename(name),
            } | {
                name: view(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            fields = ", ".join("%s=%r" % field for field in self.__rich_repr__())
            return f"{type(self).__typename__}({fields})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def sanitize_unit_metadata(cls, metadata, /):
    """
    Internal: validate the metadata shared by commands and subcommand groups.

    - name: non-empty string without whitespace.
    - version: Unset or a non-empty string (trimmed); description may also be a rich Text.
      Unset becomes None.
    - aliases: iterable of names (same rules as name), without duplicates; becomes a tuple.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()) or any(character.isspace() for character in name):
        raise ValueError(f"{cls.__typename__} 'name' must be a non-empty word")
    metadata["name"] = name

    for field in ("version", "description"):
        accepted = str | Text | Unset if field == "description" else str | Unset
        if not isinstance(value := metadata[field], accepted):
            raise TypeError(f"{cls.__typename__} '{field}' must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} '{field}' cannot be empty")
        metadata[field] = coalesce(value)

    if not isinstance(metadata["aliases"], Iterable) or isinstance(metadata["aliases"], str):
        raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings")
    aliases = []
    for alias in metadata["aliases"]:
        if not isinstance(alias, str):
            raise TypeError(f"{cls.__typename__} aliases must be strings")
        elif not (alias := alias.strip()) or any(character.isspace() for character in alias):
            raise ValueError(f"{cls.__typename__} aliases must be non-empty words")
        elif alias in aliases or alias == metadata["name"]:
            raise ValueError(f"{cls.__typename__} aliases cannot contain duplicates")
        aliases.append(alias)
    metadata["aliases"] = tuple(aliases)


def isunit(object, /):
    """
    Return True when object can be used as a branch of a subcommand group.
    """
    return isinstance(object, ArgParser) and isinstance(object, ProvidesHelp) and isinstance(object, Runner)


__all__ = (
    "ArgParser",
    "ProvidesHelp",
    "Runner",
    "Unit",
    "ParserType",
    "isunit",
)
