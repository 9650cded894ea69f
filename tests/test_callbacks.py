from __future__ import annotations

import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

from nio import InviteMemberEvent, RoomMessageText

from helpbot.callbacks import create_callbacks
from helpbot.commands import load_commands
from helpbot.config import Config
from helpbot.state import BotState

ROOM = SimpleNamespace(room_id="!room:example.com")


class _FakeClient:
    def __init__(self) -> None:
        self.callbacks: dict[type, object] = {}
        self.sent: list[tuple[str, str]] = []
        self.rooms: dict[str, object] = {
            "!room:example.com": SimpleNamespace(
                users={"@alice:example.com": SimpleNamespace(display_name="Alice")}
            )
        }
        self.join = AsyncMock(return_value=SimpleNamespace(room_id="!new:example.com"))

    def add_event_callback(self, callback, event_type) -> None:
        self.callbacks[event_type] = callback

    async def room_send(self, room_id: str, event_type: str, content: dict) -> None:
        _ = event_type
        self.sent.append((room_id, content["body"]))


def _message(body: str, *, sender: str = "@alice:example.com",
             event_id: str = "$msg", server_timestamp: int = 2_000_000):
    return SimpleNamespace(
        sender=sender,
        body=body,
        event_id=event_id,
        server_timestamp=server_timestamp,
    )


class MessageCallbackTests(unittest.IsolatedAsyncioTestCase):
    @classmethod
    def setUpClass(cls) -> None:
        load_commands()

    async def asyncSetUp(self) -> None:
        self.client = _FakeClient()
        self.config = Config(
            homeserver="https://example.com",
            bot_user="@bot:example.com",
            bot_password="secret",
        )
        create_callbacks(self.client, self.config, BotState(startup_time=1000.0))  # type: ignore[arg-type]
        self.on_message = self.client.callbacks[RoomMessageText]

    async def test_command_is_answered(self) -> None:
        await self.on_message(ROOM, _message("helpbot ping"))
        self.assertEqual(self.client.sent, [("!room:example.com", "PONG")])

    async def test_own_messages_ignored(self) -> None:
        await self.on_message(ROOM, _message("helpbot ping", sender="@bot:example.com"))
        self.assertEqual(self.client.sent, [])

    async def test_messages_before_startup_ignored(self) -> None:
        await self.on_message(ROOM, _message("helpbot ping", server_timestamp=999_999))
        self.assertEqual(self.client.sent, [])

    async def test_duplicate_events_ignored(self) -> None:
        await self.on_message(ROOM, _message("helpbot ping", event_id="$same"))
        await self.on_message(ROOM, _message("helpbot ping", event_id="$same"))
        self.assertEqual(self.client.sent, [("!room:example.com", "PONG")])

    async def test_sender_name_from_room_members(self) -> None:
        with patch("helpbot.callbacks.dispatch", new=AsyncMock()) as dispatch:
            await self.on_message(ROOM, _message("helpbot help"))

        ctx = dispatch.await_args.args[0]
        self.assertEqual(ctx.sender, "@alice:example.com")
        self.assertEqual(ctx.sender_name, "Alice")
        self.assertEqual(ctx.raw_body, "helpbot help")


class InviteCallbackTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.client = _FakeClient()
        config = Config(
            homeserver="https://example.com",
            bot_user="@bot:example.com",
            bot_password="secret",
        )
        create_callbacks(self.client, config, BotState())  # type: ignore[arg-type]
        self.on_invite = self.client.callbacks[InviteMemberEvent]

    async def test_joins_when_bot_is_invited(self) -> None:
        event = SimpleNamespace(
            state_key="@bot:example.com", membership="invite", sender="@alice:example.com"
        )
        await self.on_invite(SimpleNamespace(room_id="!new:example.com"), event)
        self.client.join.assert_awaited_once_with("!new:example.com")

    async def test_ignores_invites_for_other_users(self) -> None:
        event = SimpleNamespace(
            state_key="@carol:example.com", membership="invite", sender="@alice:example.com"
        )
        await self.on_invite(SimpleNamespace(room_id="!new:example.com"), event)
        self.client.join.assert_not_awaited()

    async def test_join_failure_is_not_raised(self) -> None:
        self.client.join.return_value = SimpleNamespace(status_code=403)
        event = SimpleNamespace(
            state_key="@bot:example.com", membership="invite", sender="@alice:example.com"
        )
        await self.on_invite(SimpleNamespace(room_id="!new:example.com"), event)
        self.client.join.assert_awaited_once()


if __name__ == "__main__":
    unittest.main()
