"""Tests for carousel configuration."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from carousel_engine.core.config import CarouselConfig, coerce_config
from carousel_engine.core.errors import ConfigurationError, ErrorCategory


class TestCarouselConfig:
    """Tests for CarouselConfig validation."""

    def test_defaults(self) -> None:
        config = CarouselConfig()

        assert config.auto_slide_interval == 3000
        assert config.card_width is None
        assert config.card_height == 300
        assert config.viewport_width == 750
        assert config.min_drag_distance == 40
        assert config.size == "1/3"
        assert config.spacing == 0
        assert config.alignment == "start"

    def test_accepts_camel_case(self) -> None:
        config = CarouselConfig.model_validate(
            {"autoSlideInterval": 1500, "cardWidth": 220, "minDragDistance": 25}
        )

        assert config.auto_slide_interval == 1500
        assert config.card_width == 220
        assert config.min_drag_distance == 25

    def test_accepts_snake_case(self) -> None:
        config = CarouselConfig(auto_slide_interval=1500, spacing=12)
        assert config.spacing == 12

    @pytest.mark.parametrize(
        "values",
        [
            {"autoSlideInterval": 0},
            {"spacing": -1},
            {"minDragDistance": -5},
            {"cardWidth": 0},
            {"alignment": "right"},
            {"unknownOption": True},
        ],
    )
    def test_rejects_invalid_values(self, values: dict) -> None:
        with pytest.raises(ValidationError):
            CarouselConfig.model_validate(values)

    def test_is_frozen(self) -> None:
        config = CarouselConfig()
        with pytest.raises(ValidationError):
            config.spacing = 5

    def test_with_changes_accepts_aliases(self) -> None:
        config = CarouselConfig().with_changes(autoSlideInterval=800, spacing=4)

        assert config.auto_slide_interval == 800
        assert config.spacing == 4
        assert config.size == "1/3"

    def test_with_changes_validates(self) -> None:
        with pytest.raises(ConfigurationError):
            CarouselConfig().with_changes(auto_slide_interval=-1)

    def test_from_env(self) -> None:
        env = {
            "CAROUSEL_AUTO_SLIDE_INTERVAL": "2500",
            "CAROUSEL_SIZE": "1/4",
            "CAROUSEL_ALIGNMENT": "center",
            "CAROUSEL_SPACING": "",
        }
        with patch.dict("os.environ", env):
            config = CarouselConfig.from_env()

        assert config.auto_slide_interval == 2500
        assert config.size == "1/4"
        assert config.alignment == "center"
        assert config.spacing == 0

    def test_from_env_invalid(self) -> None:
        with patch.dict("os.environ", {"CAROUSEL_AUTO_SLIDE_INTERVAL": "soon"}):
            with pytest.raises(ConfigurationError):
                CarouselConfig.from_env()


class TestCoerceConfig:
    def test_none_gives_defaults(self) -> None:
        assert coerce_config(None) == CarouselConfig()

    def test_passes_config_through(self) -> None:
        config = CarouselConfig(spacing=3)
        assert coerce_config(config) is config

    def test_wraps_validation_error(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            coerce_config({"autoSlideInterval": "never"})

        error = exc_info.value
        assert error.category == ErrorCategory.INVALID_CONFIG
        assert isinstance(error.original_error, ValidationError)
        assert isinstance(error.__cause__, ValidationError)
