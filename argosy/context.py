"""
Argosy parse context: the per-invocation state threaded through every parse call.

- nodes: the tokenized input, in order (see argosy.tokens).
- visited: nodes already consumed by some parser. Remaining input is every node
  not in visited, in order; leaf parsers only ever add to it.
- hotpath: names of the commands matched so far. Only the subcommand layer appends
  to it, strictly before delegating to the selected branch.

A context is created once per top-level invocation and shared by reference down the
whole call tree; it must not be reused across invocations.
"""
from .tokens import Node, tokenize
from .utils import Unset, coalesce, view


class ParseContext:
    def __init__(self, nodes, /, hotpath=Unset, argv=Unset):
        nodes = tuple(nodes)
        if not all(isinstance(node, Node) for node in nodes):
            raise TypeError("parse-context 'nodes' must be an iterable of nodes")
        if not isinstance(hotpath, list | Unset):
            raise TypeError("parse-context 'hotpath' must be a list")

        self._nodes = nodes
        self._visited = set()
        self.hotpath = coalesce(hotpath, [])
        self._argv = tuple(coalesce(argv, (node.raw for node in nodes)))

    nodes = view("nodes")
    visited = view("visited")
    argv = view("argv")

    @classmethod
    def from_argv(cls, argv, /, registry=None, hotpath=Unset):
        """
        Tokenize argv (with the switch names of registry, if any) and wrap it.
        """
        argv = tuple(argv)
        return cls(tokenize(argv, registry), hotpath, argv)

    @property
    def route(self):
        """
        The command prefix matched so far ("cli" at the root).
        """
        return " ".join(self.hotpath) or "cli"

    def remaining(self, *kinds):
        """
        Unvisited nodes in input order, optionally restricted to the given node kinds.
        """
        return [
            node for node in self._nodes
            if node not in self._visited and (not kinds or isinstance(node, kinds))
        ]

    def visit(self, *nodes):
        for node in nodes:
            if node is None:
                continue
            self._visited.add(node)
            if (value := getattr(node, "value", None)) is not None:
                self._visited.add(value)

    def __repr__(self):
        return f"parse-context(remaining={[node.raw for node in self.remaining()]!r}, hotpath={self.hotpath!r})"


__all__ = (
    "ParseContext",
)
