"""Pydantic schemas for API request/response validation.

Field names are snake_case in Python and camelCase on the wire, matching the
property names browser renderers already use.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from carousel_engine.core.types import CarouselItem, RenderFrame


class CamelModel(BaseModel):
    """Base model accepting both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CarouselItemSchema(CamelModel):
    """Schema for one card."""

    id: int | str
    title: str
    image_ref: str
    link_ref: str

    def to_item(self) -> CarouselItem:
        return CarouselItem(
            id=self.id,
            title=self.title,
            image_ref=self.image_ref,
            link_ref=self.link_ref,
        )

    @classmethod
    def from_item(cls, item: CarouselItem) -> "CarouselItemSchema":
        return cls(
            id=item.id,
            title=item.title,
            image_ref=item.image_ref,
            link_ref=item.link_ref,
        )


class CarouselCreate(CamelModel):
    """Schema for creating a carousel session."""

    items: list[CarouselItemSchema] = Field(..., max_length=500)
    config: dict[str, Any] | None = Field(
        None, description="Carousel options, e.g. autoSlideInterval, size, spacing"
    )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "items": [
                    {
                        "id": 1,
                        "title": "Slide 1",
                        "imageRef": "https://picsum.photos/id/1015/300/300",
                        "linkRef": "https://example.com/1",
                    }
                ],
                "config": {"autoSlideInterval": 3000, "size": "1/3", "spacing": 16},
            }
        },
    )


class RenderFrameResponse(CamelModel):
    """Schema for a render frame."""

    transform_offset_px: float
    transition_enabled: bool
    card_width_px: float
    card_height_px: float
    spacing_px: float
    visible_count: float
    current_logical_index: int
    padded_sequence_indices: list[int]
    active_slot: int
    item_count: int
    is_dragging: bool
    has_dragged: bool
    preload_slots: list[int]

    @classmethod
    def from_frame(cls, frame: RenderFrame) -> "RenderFrameResponse":
        return cls.model_validate(frame.to_dict())


class CarouselSessionResponse(CamelModel):
    """Schema for a carousel session."""

    id: str
    active: bool
    inactive_reason: str | None = None
    frame: RenderFrameResponse


class InputEventType(str, Enum):
    """Input events a client can send."""

    POINTER_DOWN = "pointer_down"
    POINTER_MOVE = "pointer_move"
    POINTER_UP = "pointer_up"
    POINTER_CANCEL = "pointer_cancel"
    POINTER_LEAVE = "pointer_leave"
    HOVER_ENTER = "hover_enter"
    HOVER_LEAVE = "hover_leave"
    GO_TO = "go_to"
    NEXT = "next"
    PREV = "prev"
    SET_AUTO_PLAY = "set_auto_play"
    RESIZE = "resize"
    FRAME_COMMITTED = "frame_committed"


# Payload field each event type requires
_REQUIRED_FIELDS = {
    InputEventType.POINTER_DOWN: "x",
    InputEventType.POINTER_MOVE: "x",
    InputEventType.GO_TO: "index",
    InputEventType.SET_AUTO_PLAY: "enable",
    InputEventType.RESIZE: "width",
}


class InputEvent(CamelModel):
    """Schema for a single input event."""

    type: InputEventType
    x: float | None = None
    index: int | None = None
    enable: bool | None = None
    width: float | None = Field(None, gt=0)
    screen_width: float | None = Field(None, gt=0)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": {"type": "pointer_down", "x": 420.0}},
    )

    @model_validator(mode="after")
    def _check_payload(self) -> "InputEvent":
        required = _REQUIRED_FIELDS.get(self.type)
        if required is not None and getattr(self, required) is None:
            raise ValueError(f"'{self.type.value}' events require '{required}'")
        return self


class ClickRequest(CamelModel):
    """Schema for reporting a click on a physical slot."""

    slot: int = Field(..., ge=0)


class ClickResponse(CamelModel):
    """Which item a click targets, or null when it was suppressed."""

    item: CarouselItemSchema | None = None


class ErrorResponse(BaseModel):
    """Schema for error responses."""

    error: str
    detail: str | None = None
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Carousel not found",
                "detail": "Carousel session not found: 3f2a...",
                "code": "SESSION_NOT_FOUND",
            }
        }
    )
