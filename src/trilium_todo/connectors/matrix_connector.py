# src/trilium_todo/connectors/matrix_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import time

from nio import MatrixRoom, RoomMessageText

from ..cli import messages
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..logging_setup import log_user_interaction
from .matrix_client import create_matrix_client

logger = logging.getLogger(__name__)


def _ms_now() -> int:
    return int(time.time() * 1000)


def _room_allowlist(settings_rooms: list[str]) -> set[str] | None:
    rooms = [r.strip() for r in (settings_rooms or []) if str(r).strip()]
    return set(rooms) if rooms else None


async def _send_text(client, *, room_id: str, text: str) -> None:
    await client.room_send(
        room_id=room_id,
        message_type="m.room.message",
        content={"msgtype": "m.text", "body": text},
    )


async def run_matrix_bot(state: AppState, stop_event: asyncio.Event) -> None:
    """
    Matrix connector: login -> callbacks -> sync loop until stop_event is set.

    Each Matrix sender is a separate task-list user.
    """
    settings = state.settings

    startup_ts = _ms_now()
    allowed_rooms = _room_allowlist(getattr(settings, "matrix_rooms", []) or [])
    logger.info("Matrix allowed_rooms=%s", allowed_rooms if allowed_rooms is not None else "ALL")

    client = await create_matrix_client(settings)
    if client is None:
        logger.error("Matrix client creation failed; connector will stop.")
        return

    logger.info("Matrix client started (user=%s, homeserver=%s).", client.user_id, settings.matrix_homeserver)

    async def message_callback(room: MatrixRoom, event: RoomMessageText) -> None:
        # History replayed by the initial sync is not for us.
        ts = getattr(event, "server_timestamp", None)
        if ts is not None and ts <= startup_ts:
            return

        if event.sender == client.user_id:
            return

        if allowed_rooms is not None and room.room_id not in allowed_rooms:
            return

        body = (event.body or "").strip()
        if not body:
            return

        logger.info("Matrix <%s> %s: %r", room.display_name, event.sender, body)

        async def emit(text: str) -> None:
            await _send_text(client, room_id=room.room_id, text=text)

        try:
            resp = await command_registry.handle(
                state, body, user_id=event.sender, room_id=room.room_id, emit=emit
            )
        except Exception:
            logger.exception("Command handler crashed.")
            resp = messages.get_error_message("unexpected_error")

        if resp is None:
            log_user_interaction(logger, "UNRECOGNIZED_MESSAGE", user_id=event.sender,
                                 room_id=room.room_id, length=len(body))
            resp = messages.get_error_message("unrecognized_command")

        try:
            await _send_text(client, room_id=room.room_id, text=resp)
        except Exception:
            logger.exception("Failed to send reply to %s.", room.room_id)

    client.add_event_callback(message_callback, RoomMessageText)

    try:
        logger.info("Matrix initial sync...")
        await client.sync(timeout=30000, full_state=True)
        logger.info("Matrix initial sync done. Joined rooms: %d", len(client.rooms))

        while not stop_event.is_set():
            await client.sync(timeout=30000, full_state=False)

    except asyncio.CancelledError:
        logger.info("Matrix connector cancelled.")
        raise
    except Exception:
        logger.exception("Matrix connector crashed.")
    finally:
        with contextlib.suppress(Exception):
            await client.close()
        logger.info("Matrix connector stopped.")
