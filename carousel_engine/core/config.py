"""Carousel configuration model.

Options mirror the widget properties a renderer passes when it mounts a
carousel. Both snake_case names and the camelCase names used by browser
clients are accepted.

Example:
    config = CarouselConfig.model_validate({"autoSlideInterval": 2000, "size": "1/2"})
    config = CarouselConfig.from_env()  # CAROUSEL_* environment variables
"""

from collections.abc import Mapping
from os import getenv
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from carousel_engine.core.errors import ConfigurationError

DEFAULT_AUTO_SLIDE_INTERVAL_MS = 3000
DEFAULT_CARD_HEIGHT = 300.0
DEFAULT_VIEWPORT_WIDTH = 750.0
DEFAULT_MIN_DRAG_DISTANCE = 40.0
DEFAULT_SIZE = "1/3"
DEFAULT_SPACING = 0.0
DEFAULT_DRAG_FLAG_THRESHOLD = 5.0
DEFAULT_CLICK_GRACE_PERIOD_MS = 100
DEFAULT_FRAME_DELAY_MS = 16

Alignment = Literal["start", "center"]


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class CarouselConfig(BaseModel):
    """Validated configuration for one carousel."""

    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    auto_slide_interval: int = Field(
        DEFAULT_AUTO_SLIDE_INTERVAL_MS, gt=0, description="Autoplay period in ms"
    )
    card_width: float | None = Field(
        None, gt=0, description="Explicit card width; disables responsive sizing"
    )
    card_height: float = Field(DEFAULT_CARD_HEIGHT, gt=0)
    viewport_width: float = Field(
        DEFAULT_VIEWPORT_WIDTH,
        gt=0,
        description="Fallback width used until a live container width is reported",
    )
    min_drag_distance: float = Field(DEFAULT_MIN_DRAG_DISTANCE, ge=0)
    size: str = Field(DEFAULT_SIZE, description="Display fraction 'a/b' => b cards")
    spacing: float = Field(DEFAULT_SPACING, ge=0)
    drag_flag_threshold: float = Field(DEFAULT_DRAG_FLAG_THRESHOLD, ge=0)
    click_grace_period: int = Field(DEFAULT_CLICK_GRACE_PERIOD_MS, ge=0)
    frame_delay: int = Field(DEFAULT_FRAME_DELAY_MS, ge=0)
    alignment: Alignment = "start"

    @classmethod
    def from_env(cls, prefix: str = "CAROUSEL_") -> "CarouselConfig":
        """Build a config from environment variables.

        Each field is read from ``{prefix}{FIELD_NAME}``, e.g.
        ``CAROUSEL_AUTO_SLIDE_INTERVAL``. Unset variables keep their defaults.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            raw = getenv(f"{prefix}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        return coerce_config(values)

    def with_changes(self, **changes: Any) -> "CarouselConfig":
        """Return a validated copy with some fields replaced.

        Keys may be field names or their camelCase aliases.
        """
        aliases = {
            info.alias: name
            for name, info in type(self).model_fields.items()
            if info.alias
        }
        renamed = {aliases.get(key, key): value for key, value in changes.items()}
        return coerce_config({**self.model_dump(), **renamed})


def coerce_config(
    config: "CarouselConfig | Mapping[str, Any] | None",
) -> CarouselConfig:
    """Turn a config object, mapping or None into a validated CarouselConfig.

    Raises:
        ConfigurationError: If the mapping fails validation.
    """
    if config is None:
        return CarouselConfig()
    if isinstance(config, CarouselConfig):
        return config
    try:
        return CarouselConfig.model_validate(dict(config))
    except ValidationError as ex:
        raise ConfigurationError(
            f"Invalid carousel configuration: {ex.error_count()} error(s)",
            original_error=ex,
        ) from ex
