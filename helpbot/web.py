from __future__ import annotations

from typing import TYPE_CHECKING

from aiohttp import web

from helpbot.commands import list_help_strings
from helpbot.help import filter_commands, get_help_commands, render_help_page

if TYPE_CHECKING:
    from helpbot.config import Config


def help_path(config: Config) -> str:
    return f"/{config.bot_name}/help"


def create_app(config: Config) -> web.Application:
    """Build the aiohttp application serving the help page."""

    async def handle_help(request: web.Request) -> web.Response:
        cmds = get_help_commands(
            list_help_strings(), config.robot_name, config.hidden_commands
        )

        query = request.query.get("q")
        if query is not None:
            cmds = filter_commands(cmds, query)

        return web.Response(
            text=render_help_page(config.bot_name, cmds),
            content_type="text/html",
        )

    app = web.Application()
    app.router.add_get(help_path(config), handle_help)
    return app


async def start_web(config: Config) -> web.AppRunner:
    """Start serving the help page on the configured host and port."""
    runner = web.AppRunner(create_app(config))
    await runner.setup()
    site = web.TCPSite(runner, config.http_host, config.http_port)
    try:
        await site.start()
    except OSError:
        await runner.cleanup()
        raise
    print(
        f"[web] help page at http://{config.http_host}:{config.http_port}"
        f"{help_path(config)}"
    )
    return runner
