"""Carousel session API routes.

These routes create carousel sessions, feed them input events and return
the render frames renderers draw from.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from carousel_engine.api.dependencies import get_session_registry
from carousel_engine.api.schemas import (
    CarouselCreate,
    CarouselItemSchema,
    CarouselSessionResponse,
    ClickRequest,
    ClickResponse,
    ErrorResponse,
    InputEvent,
    RenderFrameResponse,
)
from carousel_engine.api.sessions import CarouselSession, SessionRegistry, apply_input
from carousel_engine.api.websocket import get_connection_manager
from carousel_engine.core.errors import ConfigurationError, SessionNotFoundError
from carousel_engine.core.logging import get_logger, session_context

logger = get_logger(__name__)

router = APIRouter(prefix="/carousels", tags=["carousels"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Carousel not found"}}
_INVALID_CONFIG = {422: {"model": ErrorResponse, "description": "Invalid configuration"}}


def _get_session(registry: SessionRegistry, session_id: str) -> CarouselSession:
    try:
        return registry.get(session_id)
    except SessionNotFoundError as ex:
        logger.info("session_not_found", session_id=session_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "Carousel not found",
                "detail": str(ex),
                "code": ex.category.name,
            },
        ) from ex


def _invalid_config(ex: ConfigurationError) -> HTTPException:
    logger.warning("invalid_config", error=str(ex))
    return HTTPException(
        status_code=422,
        detail={
            "error": "Invalid configuration",
            "detail": str(ex.original_error or ex),
            "code": ex.category.name,
        },
    )


def _session_response(session: CarouselSession) -> CarouselSessionResponse:
    engine = session.engine
    return CarouselSessionResponse(
        id=session.id,
        active=engine.is_active,
        inactive_reason=engine.inactive_reason.name if engine.inactive_reason else None,
        frame=RenderFrameResponse.from_frame(engine.get_render_frame()),
    )


@router.post(
    "",
    response_model=CarouselSessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Carousel created"},
        **_INVALID_CONFIG,
    },
)
async def create_carousel(
    request: CarouselCreate,
    registry: SessionRegistry = Depends(get_session_registry),
) -> CarouselSessionResponse:
    """Create a carousel session.

    Fewer than three items still create a session, but it is inactive and
    renders an empty frame.
    """
    try:
        session = registry.create(
            [item.to_item() for item in request.items], request.config
        )
    except ConfigurationError as ex:
        raise _invalid_config(ex) from ex

    return _session_response(session)


@router.get(
    "/{session_id}",
    response_model=CarouselSessionResponse,
    responses=_NOT_FOUND,
)
async def get_carousel(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> CarouselSessionResponse:
    return _session_response(_get_session(registry, session_id))


@router.get(
    "/{session_id}/frame",
    response_model=RenderFrameResponse,
    responses=_NOT_FOUND,
)
async def get_frame(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> RenderFrameResponse:
    """Get the current render frame."""
    session = _get_session(registry, session_id)
    return RenderFrameResponse.from_frame(session.engine.get_render_frame())


@router.post(
    "/{session_id}/events",
    response_model=RenderFrameResponse,
    responses=_NOT_FOUND,
)
async def post_event(
    session_id: str,
    event: InputEvent,
    registry: SessionRegistry = Depends(get_session_registry),
) -> RenderFrameResponse:
    """Apply one input event and return the resulting frame."""
    session = _get_session(registry, session_id)

    with session_context(session_id):
        apply_input(session.engine, event)
        logger.debug("event_applied", event_type=event.type.value)
    return RenderFrameResponse.from_frame(session.engine.get_render_frame())


@router.post(
    "/{session_id}/click",
    response_model=ClickResponse,
    responses=_NOT_FOUND,
)
async def click_card(
    session_id: str,
    request: ClickRequest,
    registry: SessionRegistry = Depends(get_session_registry),
) -> ClickResponse:
    """Resolve a click on a physical slot.

    ``item`` is null when the click is suppressed by a recent drag.
    """
    session = _get_session(registry, session_id)
    item = session.engine.resolve_click(request.slot)
    return ClickResponse(
        item=CarouselItemSchema.from_item(item) if item is not None else None
    )


@router.patch(
    "/{session_id}/config",
    response_model=CarouselSessionResponse,
    responses={**_NOT_FOUND, **_INVALID_CONFIG},
)
async def update_config(
    session_id: str,
    changes: dict[str, Any] = Body(...),
    registry: SessionRegistry = Depends(get_session_registry),
) -> CarouselSessionResponse:
    """Change some configuration options of a live carousel."""
    session = _get_session(registry, session_id)
    try:
        session.engine.configure(**changes)
    except ConfigurationError as ex:
        raise _invalid_config(ex) from ex
    return _session_response(session)


@router.put(
    "/{session_id}/items",
    response_model=CarouselSessionResponse,
    responses=_NOT_FOUND,
)
async def replace_items(
    session_id: str,
    items: list[CarouselItemSchema],
    registry: SessionRegistry = Depends(get_session_registry),
) -> CarouselSessionResponse:
    """Replace the item collection; may activate or deactivate the carousel."""
    session = _get_session(registry, session_id)
    session.engine.set_items([item.to_item() for item in items])
    return _session_response(session)


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_NOT_FOUND,
)
async def delete_carousel(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> Response:
    """Dispose a carousel and cancel all of its timers."""
    _get_session(registry, session_id)
    registry.close(session_id)
    await get_connection_manager().close_session(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
