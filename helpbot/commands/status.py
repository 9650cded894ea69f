from __future__ import annotations

import time

from helpbot.commands import CommandContext, get_all_commands, register


def _format_duration(seconds: float) -> str:
    """Format seconds into a human-readable duration string."""
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"
    minutes, secs = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours, mins = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {mins}m"
    days, hrs = divmod(hours, 24)
    return f"{days}d {hrs}h {mins}m"


@register(
    "status",
    r"status$",
    ["hubot status - Shows uptime and sync statistics."],
)
async def cmd_status(ctx: CommandContext) -> str:
    uptime = _format_duration(time.time() - ctx.bot_state.startup_time)
    lines = [
        f"{ctx.config.bot_name} status",
        "",
        f"  Uptime: {uptime}",
        f"  Sync cycles: {ctx.bot_state.sync_count}",
        f"  Connected rooms: {len(ctx.client.rooms)}",
        f"  Commands: {len(get_all_commands())}",
        f"  Hidden from help: {len(ctx.config.hidden_commands)}",
    ]
    return "\n".join(lines)
