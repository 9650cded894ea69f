from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nio import AsyncClient

    from helpbot.state import BotState


def is_error_response(resp: object) -> bool:
    """Check whether a matrix-nio response object represents an error."""
    status_code = getattr(resp, "status_code", None)
    if isinstance(status_code, int):
        return status_code >= 400
    if isinstance(status_code, str):
        return True
    if getattr(resp, "errcode", None):
        return True
    return type(resp).__name__.endswith("Error")


def display_name_for(client: AsyncClient, room_id: str, user_id: str) -> str | None:
    """Return the sender's display name in a room, if the room cache has it."""
    room = client.rooms.get(room_id)
    if room is None:
        return None
    user = room.users.get(user_id)
    return getattr(user, "display_name", None) or None


def resolve_user_ref(client: AsyncClient, room_id: str, ref: str) -> str | None:
    """Resolve a user ID or a display name in a room to a Matrix user ID."""
    if ref.startswith("@"):
        return ref

    room = client.rooms.get(room_id)
    if room is None:
        return None
    for user_id, user in room.users.items():
        if getattr(user, "display_name", None) == ref:
            return user_id
    return None


async def open_direct_room(
    client: AsyncClient, state: BotState, user_id: str
) -> str | None:
    """Return a direct-message room with user_id, creating it on first use."""
    room_id = state.direct_rooms.get(user_id)
    if room_id:
        return room_id

    resp = await client.room_create(is_direct=True, invite=[user_id])
    if is_error_response(resp):
        print(f"[private] could not create direct room with {user_id}: {resp}")
        return None

    room_id = getattr(resp, "room_id", None)
    if not room_id:
        print(f"[private] direct room created without room_id for {user_id}: {resp}")
        return None

    print(f"[private] opened direct room {room_id} with {user_id}")
    state.direct_rooms[user_id] = room_id
    return room_id
