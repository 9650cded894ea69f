from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable

from helpbot.utils import open_direct_room, resolve_user_ref

if TYPE_CHECKING:
    from nio import AsyncClient

    from helpbot.config import Config
    from helpbot.state import BotState


@dataclass
class CommandContext:
    """Context object passed to every command handler."""

    room_id: str
    sender: str
    event_id: str
    raw_body: str
    client: AsyncClient
    config: Config
    bot_state: BotState
    sender_name: str | None = None
    match: re.Match[str] | None = None


@dataclass
class Command:
    """A registered bot command."""

    name: str
    pattern: re.Pattern[str]
    help_lines: tuple[str, ...]
    handler: Callable[[CommandContext], Awaitable[str | None]]


# Command registry
_commands: dict[str, Command] = {}


def register(name: str, pattern: str, help_lines: list[str]) -> Callable:
    """Decorator to register a command handler for a chat trigger.

    ``pattern`` is matched case-insensitively against the message text that
    follows the bot's name or alias. Each of ``help_lines`` uses the ``hubot``
    placeholder for the bot's name, e.g. ``hubot ping - Reply with PONG``.
    """

    def decorator(
        func: Callable[[CommandContext], Awaitable[str | None]],
    ) -> Callable[[CommandContext], Awaitable[str | None]]:
        _commands[name] = Command(
            name=name,
            pattern=re.compile(pattern, re.IGNORECASE),
            help_lines=tuple(help_lines),
            handler=func,
        )
        return func

    return decorator


def get_all_commands() -> dict[str, Command]:
    """Return a copy of the command registry."""
    return dict(_commands)


def list_help_strings() -> list[str]:
    """Return the help lines of every registered command."""
    return [line for cmd in _commands.values() for line in cmd.help_lines]


def help_invocation(config: Config) -> str:
    """How a user asks for help, e.g. ``helpbot help`` or ``!help``."""
    name = config.robot_name
    return f"{name}help" if len(name) == 1 else f"{name} help"


def addressed_remainder(body: str, config: Config) -> str | None:
    """Strip the bot's alias or name from a message addressed to it.

    Returns None when the message is not addressed to the bot.
    """
    names = [rf"{re.escape(config.bot_name)}[:,]?\s+"]
    if config.bot_alias:
        names.insert(0, rf"{re.escape(config.bot_alias)}[:,]?\s*")
    match = re.match(
        rf"^\s*@?(?:{'|'.join(names)})(.*)$", body, re.IGNORECASE | re.DOTALL
    )
    if match is None:
        return None
    return match.group(1).strip()


async def send_notice(client: AsyncClient, room_id: str, text: str) -> None:
    """Send a response as m.notice (bot convention to prevent loops)."""
    await client.room_send(
        room_id,
        "m.room.message",
        {"msgtype": "m.notice", "body": text},
    )


async def send_reply(ctx: CommandContext, text: str) -> None:
    """Send a notice in reply to the message that triggered the command."""
    await ctx.client.room_send(
        ctx.room_id,
        "m.room.message",
        {
            "msgtype": "m.notice",
            "body": text,
            "m.relates_to": {"m.in_reply_to": {"event_id": ctx.event_id}},
        },
    )


async def send_private(ctx: CommandContext, address: str, text: str) -> None:
    """Deliver text in a direct room with address (a user ID or display name).

    Falls back to the originating room when no direct room can be opened.
    """
    user_id = resolve_user_ref(ctx.client, ctx.room_id, address)
    room_id = None
    if user_id is None:
        print(f"[private] cannot resolve {address!r} in {ctx.room_id}")
    else:
        room_id = await open_direct_room(ctx.client, ctx.bot_state, user_id)

    if room_id is None:
        print(f"[private] falling back to {ctx.room_id}")
        room_id = ctx.room_id
    await send_notice(ctx.client, room_id, text)


def _find_command(text: str) -> tuple[Command, re.Match[str]] | None:
    for cmd in _commands.values():
        match = cmd.pattern.match(text)
        if match:
            return cmd, match
    return None


async def dispatch(ctx: CommandContext) -> None:
    """Match a message addressed to the bot and invoke its handler."""
    remainder = addressed_remainder(ctx.raw_body, ctx.config)
    if remainder is None:
        return

    found = _find_command(remainder)
    if found is None:
        command_token = remainder.split(maxsplit=1)[0] if remainder else ""
        await send_notice(
            ctx.client,
            ctx.room_id,
            f"Unknown command: {command_token}. Try {help_invocation(ctx.config)}",
        )
        return

    cmd, ctx.match = found
    try:
        response = await cmd.handler(ctx)
        if response:
            await send_notice(ctx.client, ctx.room_id, response)
    except Exception as exc:
        print(f"[commands] error in {cmd.name}: {exc!r}")
        await send_notice(
            ctx.client,
            ctx.room_id,
            f"An internal error occurred while executing {cmd.name}.",
        )


def load_commands() -> None:
    """Import all command modules to trigger their @register decorators."""
    import helpbot.commands.help  # noqa: F401
    import helpbot.commands.ping  # noqa: F401
    import helpbot.commands.status  # noqa: F401
