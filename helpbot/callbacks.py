from __future__ import annotations

from typing import TYPE_CHECKING

from nio import AsyncClient, InviteMemberEvent, RoomMessageText

from helpbot.commands import CommandContext, dispatch
from helpbot.utils import display_name_for, is_error_response

if TYPE_CHECKING:
    from helpbot.config import Config
    from helpbot.state import BotState


def create_callbacks(
    client: AsyncClient,
    config: Config,
    state: BotState,
) -> None:
    """Register all event callbacks on the nio client."""

    async def on_invite_event(room, event: InviteMemberEvent) -> None:
        # Only auto-accept invites where this bot is the target
        if event.state_key != config.bot_user:
            return
        if event.membership != "invite":
            return

        room_id = room.room_id
        inviter = getattr(event, "sender", "unknown")
        print(f"[invite] invited by {inviter} to {room_id} -> joining...")
        join_resp = await client.join(room_id)
        if is_error_response(join_resp):
            print(f"[invite] join failed for {room_id}: {join_resp}")
        else:
            print(f"[invite] joined {room_id}")

    async def on_message_event(room, event: RoomMessageText) -> None:
        # Ignore our own messages
        if event.sender == config.bot_user:
            return

        # Ignore messages from before this bot session (initial sync replay)
        if event.server_timestamp < state.startup_time * 1000:
            return

        if not state.mark_event_seen(event.event_id):
            return

        ctx = CommandContext(
            room_id=room.room_id,
            sender=event.sender,
            event_id=event.event_id,
            raw_body=event.body,
            client=client,
            config=config,
            bot_state=state,
            sender_name=display_name_for(client, room.room_id, event.sender),
        )
        await dispatch(ctx)

    # Register all callbacks
    client.add_event_callback(on_invite_event, InviteMemberEvent)
    client.add_event_callback(on_message_event, RoomMessageText)
    print("[connect] callbacks registered for InviteMemberEvent, RoomMessageText")
