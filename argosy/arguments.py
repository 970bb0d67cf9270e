r"""
Argosy leaf parsers: the alphabet commands are composed from.

Overview
- Positional: the first unvisited positional node.
- RestPositionals: every unvisited positional node.
- Option: exactly one occurrence of "--long" / "-s" carrying a value.
- MultiOption: every occurrence of "--long" / "-s", each carrying a value.
- Flag: presence-only switch ("true" when present), "--flag=false" is honoured.

Each parser has a lowercase factory (positional, rest_positionals, option,
multioption, flag) mirroring the class.

Contract (shared by every leaf parser)
- parse(context) is a coroutine returning Ok(value) or Err(ParseError); it only adds
  to context.visited and never touches context.hotpath.
- register(registry) declares the switch names so the tokenizer knows which ones
  take a value.
- help_topics() describes the parser for help rendering.
- Converter failures are caught and become issues pointing at the offending nodes.

Value resolution for Option / Flag
1. the switch itself (inline "=value" or, for options, the following token),
2. the environment variable named by env, when set,
3. default(), when given,
4. otherwise: Option fails with "no value provided for --long"; Flag yields False.

Metadata (sanitized on construction)
- names: one long name (r"--[^\W\d_](-?[^\W_]+)*") and at most one short name
  (r"-[^\W_]"), in any order.
- display_name / description / env: non-empty strings when provided.
- default: zero-argument callable when provided.
"""
import os
import re

from rich.text import Text

from .capabilities import ParserType
from .converters import astype, boolean, string
from .faults import CommandException, FaultCode, Issue, ParseError, failure
from .helpdoc import HelpTopic
from .result import Err, Ok, err, ok
from .tokens import LongOptionNode, PositionalNode, ShortOptionNode
from .utils import Unset, coalesce


async def _convert(converter, raw, /, *nodes):
    """
    Run a converter and turn whatever it raises into a failed result.
    """
    try:
        return ok(await converter.convert(raw))
    except CommandException as exception:
        return failure(
            str(exception) or "invalid value",
            *nodes,
            code=exception.options.get("code", FaultCode.UNCONVERTIBLE_VALUE),
            hint=exception.options.get("hint"),
        )
    except Exception as exception:
        return failure(str(exception) or type(exception).__name__, *nodes, code=FaultCode.UNCONVERTIBLE_VALUE)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the 'display_name' / 'description' / 'env' fields.

    Strings are trimmed and must stay non-empty; Unset becomes None.
    """
    for field in ("display_name", "description", "env"):
        if field not in metadata:
            continue
        accepted = str | Text | Unset if field == "description" else str | Unset
        if not isinstance(value := metadata[field], accepted):
            raise TypeError(f"{cls.__typename__} '{field}' must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} '{field}' cannot be empty")
        metadata[field] = coalesce(value)

    if "default" in metadata:
        if not callable(default := metadata["default"]) and default is not Unset:
            raise TypeError(f"{cls.__typename__} 'default' must be callable")
        metadata["default"] = coalesce(default)


def _sanitize_names(cls, names, /):
    """
    Internal: split switch names into (long, short), validating both.
    """
    long = short = None
    if not names:
        raise TypeError(f"{cls.__typename__} must specify a long name")
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif re.fullmatch(r"--[^\W\d_](-?[^\W_]+)*", name := name.strip()):
            if long is not None:
                raise ValueError(f"{cls.__typename__} accepts a single long name")
            long = name
        elif re.fullmatch(r"-[^\W_]", name):
            if short is not None:
                raise ValueError(f"{cls.__typename__} accepts a single short name")
            short = name
        else:
            raise ValueError(f"{cls.__typename__} names must be '--long' or '-s' shaped (unicodes are allowed)")
    if long is None:
        raise TypeError(f"{cls.__typename__} must specify a long name")
    return long, short


class Positional(metaclass=ParserType):
    __introspectable__ = ("display_name", "description", "type")

    def __init__(self, display_name=Unset, /, type=string, description=Unset):
        _sanitize_metadata(self.__class__, metadata := {
            "display_name": display_name,
            "description": description,
        })
        self._type = astype(type)
        self._display_name = metadata["display_name"] or self._type.display_name
        self._description = metadata["description"] or self._type.description

    async def parse(self, context, /):
        positionals = context.remaining(PositionalNode)
        if not positionals:
            if self._type.default is not None:
                return ok(self._type.default())
            return failure(f"no value provided for {self._display_name}", code=FaultCode.MISSING_VALUE)

        context.visit(node := positionals[0])
        return await _convert(self._type, node.raw, node)

    def register(self, registry, /):
        pass

    def help_topics(self):
        return [HelpTopic("arguments", f"<{self._display_name}>", self._description)]


class RestPositionals(metaclass=ParserType):
    __introspectable__ = ("display_name", "description", "type")

    def __init__(self, display_name=Unset, /, type=string, description=Unset):
        _sanitize_metadata(self.__class__, metadata := {
            "display_name": display_name,
            "description": description,
        })
        self._type = astype(type)
        self._display_name = metadata["display_name"] or self._type.display_name
        self._description = metadata["description"] or self._type.description

    async def parse(self, context, /):
        values, errors = [], []
        for node in context.remaining(PositionalNode):
            context.visit(node)
            match await _convert(self._type, node.raw, node):
                case Ok(value):
                    values.append(value)
                case Err(error):
                    errors.extend(error.errors)
        if errors:
            return err(ParseError(errors, values))
        return ok(values)

    def register(self, registry, /):
        pass

    def help_topics(self):
        return [HelpTopic("arguments", f"[...{self._display_name}]", self._description)]


class Option(metaclass=ParserType):
    __introspectable__ = ("long", "short", "type", "description", "env")

    def __init__(self, *names, type=string, description=Unset, env=Unset, default=Unset):
        self._long, self._short = _sanitize_names(self.__class__, names)
        _sanitize_metadata(self.__class__, metadata := {
            "description": description,
            "env": env,
            "default": default,
        })
        self._type = astype(type)
        self._description = metadata["description"] or self._type.description
        self._env = metadata["env"]
        self._default = metadata["default"] or self._type.default

    @property
    def switches(self):
        return tuple(name for name in (self._long, self._short) if name)

    def _occurrences(self, context, /):
        return [
            node for node in context.remaining(LongOptionNode, ShortOptionNode)
            if node.switch in self.switches
        ]

    async def parse(self, context, /):
        occurrences = self._occurrences(context)
        context.visit(*occurrences)

        if len(occurrences) > 1:
            return failure(
                f"too many times provided, expected 1, got: {len(occurrences)}",
                *occurrences,
                code=FaultCode.REPEATED_SWITCH,
            )

        if occurrences:
            node, = occurrences
            if node.value is None:
                return failure(f"no value provided for {self._long}", node, code=FaultCode.MISSING_VALUE)
            return await _convert(self._type, node.value.raw, node, node.value)

        if self._env and (raw := os.environ.get(self._env)) is not None:
            return await _convert(self._type, raw)
        if self._default is not None:
            return ok(self._default())
        return failure(f"no value provided for {self._long}", code=FaultCode.MISSING_VALUE)

    def register(self, registry, /):
        registry.option(*self.switches)

    def help_topics(self):
        defaults = []
        if self._env:
            defaults.append(f"env: {self._env}")
        if self._default is not None:
            defaults.append("optional")
        return [HelpTopic(
            "options",
            f"{', '.join(self.switches)} <{self._type.display_name}>",
            self._description,
            tuple(defaults),
        )]


class MultiOption(Option):
    async def parse(self, context, /):
        occurrences = self._occurrences(context)
        context.visit(*occurrences)

        if not occurrences and self._default is not None:
            return ok(self._default())

        values, errors = [], []
        for node in occurrences:
            if node.value is None:
                errors.append(Issue(f"no value provided for {self._long}", (node,), FaultCode.MISSING_VALUE))
                continue
            match await _convert(self._type, node.value.raw, node, node.value):
                case Ok(value):
                    values.append(value)
                case Err(error):
                    errors.extend(error.errors)
        if errors:
            return err(ParseError(errors, values))
        return ok(values)

    def help_topics(self):
        topic, = super().help_topics()
        return [topic._replace(defaults=topic.defaults + ("repeatable",))]


class Flag(Option):
    def __init__(self, *names, type=boolean, description=Unset, env=Unset, default=Unset):
        super().__init__(*names, type=type, description=description, env=env, default=default)

    async def parse(self, context, /):
        occurrences = self._occurrences(context)
        context.visit(*occurrences)

        if len(occurrences) > 1:
            return failure(
                f"too many times provided, expected 1, got: {len(occurrences)}",
                *occurrences,
                code=FaultCode.REPEATED_SWITCH,
            )

        if occurrences:
            node, = occurrences
            if node.value is None:
                return await _convert(self._type, "true", node)
            return await _convert(self._type, node.value.raw, node, node.value)

        if self._env and (raw := os.environ.get(self._env)) is not None:
            return await _convert(self._type, raw)
        if self._default is not None:
            return ok(self._default())
        return ok(False)

    def register(self, registry, /):
        registry.flag(*self.switches)

    def help_topics(self):
        defaults = (f"env: {self._env}",) if self._env else ()
        return [HelpTopic("flags", ", ".join(self.switches), self._description, defaults)]


def positional(display_name=Unset, /, type=string, description=Unset):
    return Positional(display_name, type=type, description=description)


def rest_positionals(display_name=Unset, /, type=string, description=Unset):
    return RestPositionals(display_name, type=type, description=description)


def option(*names, type=string, description=Unset, env=Unset, default=Unset):
    return Option(*names, type=type, description=description, env=env, default=default)


def multioption(*names, type=string, description=Unset, default=Unset):
    return MultiOption(*names, type=type, description=description, default=default)


def flag(*names, type=boolean, description=Unset, env=Unset, default=Unset):
    return Flag(*names, type=type, description=description, env=env, default=default)


__all__ = (
    # Classes
    "Positional",
    "RestPositionals",
    "Option",
    "MultiOption",
    "Flag",

    # Factories
    "positional",
    "rest_positionals",
    "option",
    "multioption",
    "flag",
)
