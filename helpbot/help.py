"""Filtering and formatting of command help lines.

Commands document themselves with lines such as
``hubot ping - Reply with PONG``. The leading ``hubot`` is a placeholder that
is swapped for the bot's real name (or alias) before the lines are shown in
chat or on the web help page.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

HELP_PLACEHOLDER = "hubot"

MAX_HELP_LENGTH = 2000
TRUNCATE_AT = 1900
TRUNCATION_NOTICE = "\n... help too long, cutting display short"

HELP_PAGE_TEMPLATE = """\
<!DOCTYPE html>
<html>
  <head>
  <meta charset="utf-8">
  <title>{name} Help</title>
  <style type="text/css">
    body {{
      background: #d3d6d9;
      color: #636c75;
      text-shadow: 0 1px 1px rgba(255, 255, 255, .5);
      font-family: Helvetica, Arial, sans-serif;
    }}
    h1 {{
      margin: 8px 0;
      padding: 0;
    }}
    .commands {{
      font-size: 13px;
    }}
    p {{
      border-bottom: 1px solid #eee;
      margin: 6px 0 0 0;
      padding-bottom: 5px;
    }}
    p:last-child {{
      border: 0;
    }}
  </style>
  </head>
  <body>
    <h1>{name} Help</h1>
    <div class="commands">
      {commands}
    </div>
  </body>
</html>"""

_PLACEHOLDER_RE = re.compile(rf"^{HELP_PLACEHOLDER}", re.IGNORECASE)
_PLACEHOLDER_WITH_SPACE_RE = re.compile(rf"^{HELP_PLACEHOLDER}\s*", re.IGNORECASE)


def hidden_commands_pattern(hidden: Sequence[str]) -> re.Pattern[str] | None:
    """Build a matcher for help lines of hidden commands.

    Returns None when nothing is hidden.
    """
    if not hidden:
        return None
    names = "|".join(re.escape(name) for name in hidden)
    return re.compile(rf"^{HELP_PLACEHOLDER} (?:{names}) - ")


def get_help_commands(
    help_strings: Iterable[str],
    robot_name: str,
    hidden: Sequence[str] = (),
) -> list[str]:
    """Return the visible help lines, addressed to robot_name and sorted."""
    commands = list(help_strings)

    pattern = hidden_commands_pattern(hidden)
    if pattern is not None:
        commands = [cmd for cmd in commands if not pattern.match(cmd)]

    # One-character prefixes attach directly to the command verb
    placeholder = (
        _PLACEHOLDER_WITH_SPACE_RE if len(robot_name) == 1 else _PLACEHOLDER_RE
    )
    commands = [
        placeholder.sub(lambda _m: robot_name, cmd, count=1) for cmd in commands
    ]
    return sorted(commands)


def compile_query(query: str) -> re.Pattern[str] | None:
    """Compile a user query as a case-insensitive regex, or None if invalid."""
    try:
        return re.compile(query, re.IGNORECASE)
    except (re.error, OverflowError, RecursionError):
        return None


def filter_commands(commands: Iterable[str], query: str) -> list[str]:
    """Keep the commands matching query. An invalid query matches nothing."""
    pattern = compile_query(query)
    if pattern is None:
        return []
    return [cmd for cmd in commands if pattern.search(cmd)]


def truncate_help(text: str) -> str:
    """Shorten text below the chat size limit, cutting on a line boundary."""
    if len(text) < MAX_HELP_LENGTH:
        return text

    trimmed = text[:TRUNCATE_AT]
    trimmed = trimmed[: max(trimmed.rfind("\n"), 0)]
    return trimmed + TRUNCATION_NOTICE


def escape_html(text: str) -> str:
    # & first so the entities below are not escaped twice
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def render_help_page(robot_name: str, commands: Iterable[str]) -> str:
    """Render the commands as a standalone HTML page."""
    body = "<p>" + "</p><p>".join(escape_html(cmd) for cmd in commands) + "</p>"
    body = re.sub(
        re.escape(robot_name),
        lambda _m: f"<b>{robot_name}</b>",
        body,
        flags=re.IGNORECASE,
    )
    return HELP_PAGE_TEMPLATE.format(name=robot_name, commands=body)
