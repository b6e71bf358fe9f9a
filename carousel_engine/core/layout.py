"""Responsive card geometry.

Turns a display fraction (``"a/b"`` meaning ``b`` cards visible), spacing and
a viewport width into a concrete card width. Below desktop widths the
configured fraction is overridden by fixed breakpoints, unless the caller set
an explicit card width.

Example:
    layout = calculate_layout(size="1/3", spacing=16, viewport_width=1200)
    layout.card_width  # (1200 - 16 * 2) / 3
"""

import math
from dataclasses import dataclass

DEFAULT_CARD_WIDTH = 300.0

# (exclusive upper bound of the width band, cards visible)
BREAKPOINTS: tuple[tuple[float, float], ...] = (
    (640.0, 1.0),
    (768.0, 1.5),
    (1024.0, 2.0),
)


@dataclass(frozen=True)
class LayoutConfig:
    """Card geometry derived from the current layout inputs."""

    card_width: float
    card_height: float
    spacing: float
    viewport_width: float
    visible_count: float
    size_valid: bool = True

    @property
    def stride(self) -> float:
        """Distance between the left edges of two neighbouring cards."""
        return self.card_width + self.spacing


def parse_size_fraction(size: str) -> float | None:
    """Return the number of visible cards encoded by ``"a/b"``.

    Only the first two slash-separated segments are read, so ``"1/3/4"`` is
    three cards, and an empty numerator counts as zero (``"/3"``). Returns
    None when there is no slash, either segment is not a finite number, or
    the denominator is not positive.
    """
    parts = size.split("/")
    if len(parts) < 2:
        return None
    try:
        numerator = float(parts[0].strip() or "0")
        denominator = float(parts[1])
    except ValueError:
        return None
    if not (math.isfinite(numerator) and math.isfinite(denominator)):
        return None
    if denominator <= 0:
        return None
    return denominator


def effective_visible_count(
    size: str,
    screen_width: float | None,
    card_width: float | None = None,
) -> float | None:
    """Apply the breakpoint override to the configured size.

    Args:
        size: The configured display fraction.
        screen_width: Width used for breakpoint selection, None if unknown.
        card_width: Explicit card width; when set the override is skipped.

    Returns:
        Visible card count, or None if ``size`` had to be used and is invalid.
    """
    if card_width is None and screen_width is not None:
        for upper_bound, count in BREAKPOINTS:
            if screen_width < upper_bound:
                return count
    return parse_size_fraction(size)


def calculate_layout(
    size: str,
    spacing: float,
    viewport_width: float,
    card_width: float | None = None,
    card_height: float = 300.0,
    screen_width: float | None = None,
) -> LayoutConfig:
    """Compute card geometry.

    Args:
        size: Display fraction, e.g. ``"1/3"``.
        spacing: Gap between cards in pixels.
        viewport_width: Width of the carousel container in pixels.
        card_width: Explicit card width; short-circuits the computation.
        card_height: Card height, passed through.
        screen_width: Width for breakpoint selection; defaults to the viewport.

    Returns:
        The resulting LayoutConfig. ``size_valid`` is False when the default
        card width had to be substituted for an unusable size fraction.
    """
    if screen_width is None:
        screen_width = viewport_width

    visible = effective_visible_count(size, screen_width, card_width)
    size_valid = True

    if card_width is not None:
        width = card_width
    elif visible is None:
        width = DEFAULT_CARD_WIDTH
        size_valid = False
    else:
        # b cards leave b - 1 gaps between them
        width = (viewport_width - spacing * (visible - 1)) / visible

    if visible is None:
        stride = width + spacing
        visible = viewport_width / stride if stride > 0 else 0.0

    return LayoutConfig(
        card_width=width,
        card_height=card_height,
        spacing=spacing,
        viewport_width=viewport_width,
        visible_count=visible,
        size_valid=size_valid,
    )
