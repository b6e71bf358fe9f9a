"""WebSocket routes for live carousel sessions.

A renderer connects to ``/ws/carousels/{session_id}``, sends input events
and receives a ``frame`` message after every change, including autoplay
ticks that happen without any input.
"""

import json

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from carousel_engine.api.dependencies import get_app_state
from carousel_engine.api.schemas import CarouselItemSchema, ClickRequest, InputEvent
from carousel_engine.api.sessions import apply_input
from carousel_engine.api.websocket import (
    MessageTypes,
    WebSocketMessage,
    create_click_event,
    create_error_event,
    create_frame_event,
    get_connection_manager,
)
from carousel_engine.core.errors import SessionNotFoundError
from carousel_engine.core.logging import get_logger, session_context

logger = get_logger(__name__)

router = APIRouter(tags=["websocket"])

# Close code sent when the session id is unknown
CLOSE_SESSION_NOT_FOUND = 4404


@router.websocket("/ws/carousels/{session_id}")
async def carousel_websocket(websocket: WebSocket, session_id: str) -> None:
    """WebSocket endpoint for one carousel session.

    Message format (JSON):
        - type: Message type
        - payload: Message-specific data

    Incoming message types:
        - ping: Heartbeat message, server responds with pong
        - event: An input event, same body as ``POST /carousels/{id}/events``
        - click: ``{"slot": n}``, answered with a click message

    Outgoing message types:
        - frame: Current render frame, sent on connect and after every change
        - click: The clicked item, or null if the click was suppressed
        - session_closed: The session was deleted
        - error: Error message
        - pong: Response to ping
    """
    registry = get_app_state().registry
    try:
        session = registry.get(session_id)
    except SessionNotFoundError:
        logger.warning("websocket_session_not_found", session_id=session_id)
        await websocket.close(code=CLOSE_SESSION_NOT_FOUND, reason="Carousel not found")
        return

    manager = get_connection_manager()
    await manager.connect(websocket, session_id)

    try:
        initial = create_frame_event(session_id, session.engine.get_render_frame())
        await websocket.send_text(initial.to_json())

        while True:
            data = await websocket.receive_text()

            try:
                message = json.loads(data)
                if not isinstance(message, dict):
                    error_msg = create_error_event(
                        "Message must be a JSON object", code="INVALID_PAYLOAD"
                    )
                    await websocket.send_text(error_msg.to_json())
                    continue

                msg_type = message.get("type")
                payload = message.get("payload") or {}
                engine = registry.get(session_id).engine

                if msg_type == MessageTypes.PING:
                    pong = WebSocketMessage(type=MessageTypes.PONG, payload={})
                    await websocket.send_text(pong.to_json())

                elif msg_type == MessageTypes.EVENT:
                    event = InputEvent.model_validate(payload)
                    # The resulting frame is pushed by the session publisher
                    with session_context(session_id, transport="websocket"):
                        apply_input(engine, event)

                elif msg_type == MessageTypes.CLICK:
                    request = ClickRequest.model_validate(payload)
                    item = engine.resolve_click(request.slot)
                    reply = create_click_event(
                        session_id,
                        CarouselItemSchema.from_item(item).model_dump(by_alias=True)
                        if item is not None
                        else None,
                    )
                    await websocket.send_text(reply.to_json())

                else:
                    logger.warning(
                        "unknown_websocket_message",
                        type=msg_type,
                        session_id=session_id,
                    )
                    error_msg = create_error_event(
                        f"Unknown message type: {msg_type}", code="UNKNOWN_TYPE"
                    )
                    await websocket.send_text(error_msg.to_json())

            except json.JSONDecodeError:
                error_msg = create_error_event("Invalid JSON message", code="INVALID_JSON")
                await websocket.send_text(error_msg.to_json())
            except ValidationError as e:
                error_msg = create_error_event(
                    f"Invalid payload: {e.error_count()} error(s)", code="INVALID_PAYLOAD"
                )
                await websocket.send_text(error_msg.to_json())
            except SessionNotFoundError as e:
                error_msg = create_error_event(str(e), code=e.category.name)
                await websocket.send_text(error_msg.to_json())

    except WebSocketDisconnect:
        await manager.disconnect(websocket, session_id)
        logger.info("websocket_client_disconnected", session_id=session_id)
    except Exception as e:
        logger.exception(
            "websocket_error",
            session_id=session_id,
            error=str(e),
        )
        await manager.disconnect(websocket, session_id)
