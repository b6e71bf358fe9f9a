"""Tests for responsive layout calculation."""

import pytest

from carousel_engine.core.layout import (
    DEFAULT_CARD_WIDTH,
    LayoutConfig,
    calculate_layout,
    effective_visible_count,
    parse_size_fraction,
)


class TestParseSizeFraction:
    """Tests for parse_size_fraction."""

    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            ("1/3", 3.0),
            ("2/3", 3.0),
            ("1/2", 2.0),
            ("1/1.5", 1.5),
            (" 1 / 4 ", 4.0),
            ("/3", 3.0),
            ("1/3/4", 3.0),
            ("1/2/3", 2.0),
        ],
    )
    def test_returns_denominator(self, size: str, expected: float) -> None:
        assert parse_size_fraction(size) == expected

    @pytest.mark.parametrize(
        "size", ["", "abc", "1", "1/", "/", "x/3", "1/0", "1/-2", "1/inf", "nan/2"]
    )
    def test_rejects_unusable_fractions(self, size: str) -> None:
        assert parse_size_fraction(size) is None


class TestEffectiveVisibleCount:
    """Tests for the breakpoint override."""

    @pytest.mark.parametrize(
        ("screen_width", "expected"),
        [
            (320, 1.0),
            (639, 1.0),
            (640, 1.5),
            (767, 1.5),
            (768, 2.0),
            (1023, 2.0),
            (1024, 3.0),
            (1920, 3.0),
        ],
    )
    def test_breakpoints(self, screen_width: float, expected: float) -> None:
        assert effective_visible_count("1/3", screen_width) == expected

    def test_explicit_card_width_skips_override(self) -> None:
        assert effective_visible_count("1/3", 500, card_width=250) == 3.0

    def test_unknown_screen_width_uses_size(self) -> None:
        assert effective_visible_count("1/4", None) == 4.0

    def test_invalid_size_on_wide_screen(self) -> None:
        assert effective_visible_count("oops", 1600) is None


class TestCalculateLayout:
    """Tests for calculate_layout."""

    def test_wide_viewport_with_spacing(self) -> None:
        layout = calculate_layout(size="1/3", spacing=15, viewport_width=1200)

        assert layout.visible_count == 3.0
        assert layout.card_width == pytest.approx(390.0)
        assert layout.stride == pytest.approx(405.0)
        assert layout.size_valid is True

    def test_tablet_band_shows_one_and_a_half_cards(self) -> None:
        layout = calculate_layout(size="1/3", spacing=0, viewport_width=700)

        assert layout.visible_count == 1.5
        assert layout.card_width == pytest.approx(700 / 1.5)

    def test_mobile_shows_one_card(self) -> None:
        layout = calculate_layout(size="1/3", spacing=10, viewport_width=400)

        assert layout.visible_count == 1.0
        assert layout.card_width == pytest.approx(400.0)

    def test_explicit_card_width(self) -> None:
        layout = calculate_layout(
            size="1/3", spacing=10, viewport_width=700, card_width=250
        )

        assert layout.card_width == 250
        assert layout.visible_count == 3.0
        assert layout.stride == 260

    def test_invalid_size_falls_back_to_default_width(self) -> None:
        layout = calculate_layout(size="bad", spacing=0, viewport_width=1200)

        assert layout.size_valid is False
        assert layout.card_width == DEFAULT_CARD_WIDTH
        assert layout.visible_count == pytest.approx(4.0)

    def test_zero_denominator_falls_back(self) -> None:
        layout = calculate_layout(size="1/0", spacing=0, viewport_width=1500)

        assert layout.size_valid is False
        assert layout.card_width == DEFAULT_CARD_WIDTH

    def test_screen_width_selects_breakpoint(self) -> None:
        layout = calculate_layout(
            size="1/3", spacing=0, viewport_width=600, screen_width=1300
        )

        assert layout.visible_count == 3.0
        assert layout.card_width == pytest.approx(200.0)

    def test_card_height_passes_through(self) -> None:
        layout = calculate_layout(
            size="1/3", spacing=0, viewport_width=1200, card_height=180
        )
        assert layout.card_height == 180

    def test_layout_is_comparable(self) -> None:
        first = calculate_layout(size="1/3", spacing=0, viewport_width=1200)
        second = calculate_layout(size="1/3", spacing=0, viewport_width=1200)

        assert first == second
        assert isinstance(first, LayoutConfig)
