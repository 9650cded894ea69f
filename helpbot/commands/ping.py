from __future__ import annotations

from helpbot.commands import CommandContext, register


@register("ping", r"ping$", ["hubot ping - Reply with PONG."])
async def cmd_ping(ctx: CommandContext) -> str:
    return "PONG"


@register("echo", r"echo\s+(.+)$", ["hubot echo <text> - Reply with <text>."])
async def cmd_echo(ctx: CommandContext) -> str:
    return ctx.match.group(1) if ctx.match else ""
