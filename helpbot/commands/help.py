from __future__ import annotations

from helpbot.commands import (
    CommandContext,
    list_help_strings,
    register,
    send_private,
    send_reply,
)
from helpbot.help import filter_commands, get_help_commands, truncate_help

# Adapters whose messages carry a user ID usable as a private address
IDENTITY_ADAPTERS = frozenset({"slack", "discord", "discobot", "matrix"})

PRIVATE_REPLY_NOTICE = "replied to you in private!"


def private_reply_address(
    reply_in_private: bool,
    adapter_name: str,
    user_id: str | None,
    user_name: str | None,
) -> str | None:
    """Pick where a private help reply goes, or None to answer in the room.

    The user ID wins on identity-capable adapters; any adapter may fall back
    to the user's name.
    """
    if reply_in_private and adapter_name in IDENTITY_ADAPTERS and user_id:
        return user_id
    if reply_in_private and user_name:
        return user_name
    return None


@register(
    "help",
    r"help(?:\s+(.*))?$",
    [
        "hubot help - Displays all of the help commands that this bot knows about.",
        "hubot help <query> - Displays all help commands that match <query>.",
    ],
)
async def cmd_help(ctx: CommandContext) -> str | None:
    config = ctx.config
    cmds = get_help_commands(
        list_help_strings(), config.robot_name, config.hidden_commands
    )

    query = ctx.match.group(1) if ctx.match else None
    if query:
        cmds = filter_commands(cmds, query)
        if not cmds:
            return f"No available commands match {query}"

    emit = truncate_help("\n".join(cmds))

    address = private_reply_address(
        config.reply_in_private, config.adapter_name, ctx.sender, ctx.sender_name
    )
    if address is None:
        return emit

    await send_reply(ctx, PRIVATE_REPLY_NOTICE)
    await send_private(ctx, address, emit)
    return None
