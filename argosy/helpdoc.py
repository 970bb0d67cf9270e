"""
Argosy help rendering.

Parsers describe themselves with HelpTopic entries; this module turns them into
rich renderables and prints them to stdout. Nothing here exits the process: the
print_help() methods of commands and subcommand groups do that after echoing.

Palette keys
- route, placeholder, version, description-arrow, description
- group-label, usage, topic-description, defaults
- bullet, subcommand, aliases, footer, footer-command

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, styling is suppressed.
"""
from collections import defaultdict
from typing import NamedTuple

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .utils import pluralize


class HelpTopic(NamedTuple):
    category: str
    usage: str
    description: str | None = None
    defaults: tuple = ()


def palette(defaults, /):
    """
    Merge a default palette with the host overrides found in __main__.__styles__.
    """
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def painter(styles, colorful, /):
    """
    Build the text(fragment, style) helper shared by every renderer.

    In non-colorful mode styles are dropped; existing Text spans are preserved otherwise.
    """

    def text(fragment, style="", /):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    return text


_STYLES = {
    # === Head ===
    "route": "bold #FF4D94",  # MAGENTA-PINK → brand pop
    "placeholder": "italic #36C5F0",
    "version": "#737373",
    "description-arrow": "#737373",
    "description": "italic #A3A3A3",

    # === Topics ===
    "group-label": "bold #FFFFFF",
    "usage": "bold #00E6FF",
    "topic-description": "#9CA3AF",
    "defaults": "#737373",

    # === Subcommands ===
    "bullet": "#737373",
    "subcommand": "bold #36C5F0",
    "aliases": "#737373",
    "footer": "#737373",
    "footer-command": "#FFD600",
}


def _head(text, route, placeholder, version, description, /):
    renders = [Text.assemble(
        text(route, "route"),
        text(f" <{placeholder}>" if placeholder else "", "placeholder"),
        text(f" {version}" if version else "", "version"),
    )]
    if description:
        renders.append(Text.assemble(text("> ", "description-arrow"), text(description, "description")))
    return renders


def render_command_help(route, /, topics=(), description=None, version=None, aliases=(), colorful=True):
    """
    Build the help view of a single command: head line, description and one section
    per topic category, in first-seen order.
    """
    text = painter(palette(_STYLES), colorful)
    renders = _head(text, route, None, version, description)

    if aliases:
        label = "alias" if len(aliases) == 1 else pluralize("alias")
        renders.append(text(f"[{label}: {', '.join(aliases)}]", "aliases"))

    groups = {}
    for topic in topics:
        groups.setdefault(topic.category, []).append(topic)

    for category, members in groups.items():
        renders.append(Text(""))
        renders.append(Text.assemble(text(category.upper(), "group-label"), ":"))
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()
        for topic in members:
            details = Text(" ").join(
                part for part in (
                    text(topic.description, "topic-description"),
                    text(" ".join(f"[{default}]" for default in topic.defaults), "defaults"),
                ) if part
            )
            table.add_row(Text.assemble("  ", text(topic.usage, "usage")), details)
        renders.append(table)

    return Group(*renders)


def render_subcommands_help(route, /, entries=(), description=None, colorful=True):
    """
    Build the help view of a subcommand group.

    entries are (key, description, aliases) triples, one per branch, in mapping order.
    """
    text = painter(palette(_STYLES), colorful)
    renders = _head(text, route, "subcommand", None, description)

    renders.append(Text(""))
    renders.append(Text.assemble("where ", text("<subcommand>", "placeholder"), " can be one of:"))
    renders.append(Text(""))

    for key, summary, aliases in entries:
        row = Text.assemble(text("- ", "bullet"), text(key, "subcommand"))
        if summary:
            row.append_text(Text.assemble(" - ", text(summary, "topic-description")))
        if aliases:
            label = "alias" if len(aliases) == 1 else pluralize("alias")
            row.append_text(Text.assemble(" ", text(f"[{label}: {', '.join(aliases)}]", "aliases")))
        renders.append(row)

    renders.append(Text(""))
    renders.append(Text.assemble(
        text("For more help, try running `", "footer"),
        text(f"{route} <subcommand> --help", "footer-command"),
        text("`", "footer"),
    ))
    return Group(*renders)


def echo(renderable, /):
    """
    Print a renderable to stdout.
    """
    Console().print(renderable)


__all__ = (
    "HelpTopic",
    "palette",
    "painter",
    "render_command_help",
    "render_subcommands_help",
    "echo",
)
