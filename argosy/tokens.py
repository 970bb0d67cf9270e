"""
Argosy tokenizer: raw strings in, a flat sequence of input nodes out.

Overview
- Node kinds
  • PositionalNode: a plain token (also every token after a "--" delimiter).
  • DelimiterNode: the "--" token itself.
  • LongOptionNode: "--name" or "--name=value"; key excludes the dashes.
  • ShortOptionNode: one node per letter of "-abc"; only the last letter may carry
    a value ("-abc=value" or "-abc value").
  • ValueNode: the value attached to an option node (never a top-level node).

- Registry
  • Collects the switch names declared by every parser in the tree before parsing,
    so the tokenizer knows which switches never take a value.
  • Declaring the same switch as a flag and as a value-bearing option triggers an
    AmbiguousSwitchWarning; the flag declaration wins while tokenizing.

Value attachment
- "--name=value" always attaches value.
- "--name value" attaches the next token when "--name" is not a registered flag and
  the next token does not look like a switch. A lone "-" and negative numbers
  ("-1", "-2.5") are values, not switches.

Nodes compare and hash by identity: two "--verbose" tokens are two distinct nodes,
which is what the visited-set bookkeeping of ParseContext relies on.
"""
import dataclasses
import re

from .faults import AmbiguousSwitchWarning, FaultCode, trigger
from .utils import view

_NUMBER = re.compile(r"-\d+(\.\d*)?([eE][-+]?\d+)?|-\.\d+([eE][-+]?\d+)?")


@dataclasses.dataclass(frozen=True, eq=False)
class Node:
    index: int
    raw: str


class PositionalNode(Node): ...
class DelimiterNode(Node): ...
class ValueNode(Node): ...


@dataclasses.dataclass(frozen=True, eq=False)
class LongOptionNode(Node):
    key: str
    value: ValueNode | None = None

    @property
    def switch(self):
        return "--" + self.key


@dataclasses.dataclass(frozen=True, eq=False)
class ShortOptionNode(Node):
    key: str
    value: ValueNode | None = None

    @property
    def switch(self):
        return "-" + self.key


OptionNode = LongOptionNode | ShortOptionNode


class Registry:
    """
    Switch names ("--long" / "-s") declared across a whole parser tree.
    """

    def __init__(self):
        self._flags = set()
        self._options = set()

    flags = view("flags")
    options = view("options")

    def flag(self, *switches):
        for switch in switches:
            if switch and switch in self._options:
                self._ambiguous(switch)
            if switch:
                self._flags.add(switch)

    def option(self, *switches):
        for switch in switches:
            if switch and switch in self._flags:
                self._ambiguous(switch)
            if switch:
                self._options.add(switch)

    def _ambiguous(self, switch, /):
        trigger(
            AmbiguousSwitchWarning(f"'{switch}' is declared both as a flag and as an option"),
            code=FaultCode.AMBIGUOUS_SWITCH,
            title="ambiguous switch",
            hint=f"'{switch}' will be treated as a flag and never take a value",
        )

    def __repr__(self):
        return f"registry(flags={sorted(self._flags)!r}, options={sorted(self._options)!r})"


def isswitch(token, /):
    """
    Return True when a raw token looks like "--name", "-n" or "--".
    """
    return token.startswith("-") and token != "-" and not _NUMBER.fullmatch(token)


def tokenize(argv, registry=None, /):
    """
    Turn raw argument strings into nodes (see module docstring for the rules).
    """
    tokens = list(argv)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("tokenize() argument must be an iterable of strings")
    flags = registry.flags if registry is not None else frozenset()

    def following(index, switch):
        if switch in flags or index + 1 >= len(tokens) or isswitch(tokens[index + 1]):
            return None
        return ValueNode(index + 1, tokens[index + 1])

    nodes = []
    index = 0
    delimited = False
    while index < len(tokens):
        token = tokens[index]
        consumed = 1

        if delimited or not isswitch(token):
            nodes.append(PositionalNode(index, token))
        elif token == "--":
            delimited = True
            nodes.append(DelimiterNode(index, token))
        elif token.startswith("--"):
            key, equal, inline = token[2:].partition("=")
            if equal:
                value = ValueNode(index, inline)
            elif value := following(index, "--" + key):
                consumed = 2
            nodes.append(LongOptionNode(index, token, key, value))
        else:
            letters, equal, inline = token[1:].partition("=")
            if not letters:
                nodes.append(PositionalNode(index, token))
            for position, letter in enumerate(letters, 1):
                value = None
                if position == len(letters):
                    if equal:
                        value = ValueNode(index, inline)
                    elif value := following(index, "-" + letter):
                        consumed = 2
                nodes.append(ShortOptionNode(index, token, letter, value))

        index += consumed
    return tuple(nodes)


__all__ = (
    "Node",
    "PositionalNode",
    "DelimiterNode",
    "ValueNode",
    "LongOptionNode",
    "ShortOptionNode",
    "OptionNode",
    "Registry",
    "isswitch",
    "tokenize",
)
