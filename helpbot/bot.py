from __future__ import annotations

import asyncio
import time

from nio import AsyncClient

from helpbot.callbacks import create_callbacks
from helpbot.commands import load_commands
from helpbot.config import Config
from helpbot.state import BotState
from helpbot.utils import is_error_response
from helpbot.web import start_web


async def login_with_retry(
    client: AsyncClient, config: Config
) -> object:
    """Log in to the homeserver, retrying on rate-limit errors."""
    attempt = 0
    while True:
        attempt += 1
        print(f"[connect] logging in... attempt={attempt}")
        login_resp = await client.login(config.bot_password)
        print(f"[connect] login response type={type(login_resp).__name__}")
        if not is_error_response(login_resp):
            return login_resp

        retry_after_ms = getattr(login_resp, "retry_after_ms", None)
        if retry_after_ms is not None:
            max_retries = (
                "unlimited"
                if config.login_max_retries <= 0
                else str(config.login_max_retries)
            )
            print(
                f"[connect] login rate-limited "
                f"(retry_after_ms={retry_after_ms}, max_retries={max_retries})"
            )
            if config.login_max_retries <= 0 or attempt < config.login_max_retries:
                await asyncio.sleep(max(retry_after_ms, 1) / 1000)
                continue

        raise RuntimeError(
            f"Login failed after {attempt} attempt(s): {login_resp}"
        )


async def main() -> None:
    """Main entry point for the help bot."""
    print("[startup] help bot starting")

    config = Config.from_env()
    config.print_config()
    print(f'[help] hiding help commands: "{",".join(config.hidden_commands)}"')

    state = BotState(startup_time=time.time())

    # Load command handlers
    load_commands()

    print("[connect] creating Matrix client")
    client = AsyncClient(config.homeserver, config.bot_user)
    web_runner = None

    try:
        login_resp = await login_with_retry(client, config)
        print(
            "[connect] login successful "
            f"(user_id={getattr(login_resp, 'user_id', config.bot_user)}, "
            f"device_id={getattr(login_resp, 'device_id', 'unknown')})"
        )

        create_callbacks(client, config, state)

        if config.http_endpoint_enabled:
            web_runner = await start_web(config)
        else:
            print("[web] help page disabled")

        next_batch = None
        print("[sync] entering long-poll sync loop")
        while True:
            try:
                sync_resp = await client.sync(timeout=30_000, since=next_batch)
                state.sync_count += 1

                if is_error_response(sync_resp):
                    print(f"[sync] cycle={state.sync_count} failed: {sync_resp}")
                else:
                    next_batch = sync_resp.next_batch
            except Exception as exc:
                print(f"[sync] exception in sync loop: {exc!r}")
                await asyncio.sleep(3)

    finally:
        if web_runner is not None:
            await web_runner.cleanup()
        await client.close()
        print("[shutdown] bot stopped")
