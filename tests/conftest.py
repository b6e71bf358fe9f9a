"""Shared pytest fixtures for carousel engine tests."""

from collections.abc import Callable, Generator
from typing import Any

import pytest

from carousel_engine.core.engine import CarouselEngine, create
from carousel_engine.core.types import CarouselItem
from tests.mocks.items import make_items
from tests.mocks.timers import ManualTimerBackend

# Wide viewport: three 400px cards, no breakpoint override
WIDE_CONFIG: dict[str, Any] = {"viewportWidth": 1200, "size": "1/3", "spacing": 0}


@pytest.fixture
def items() -> list[CarouselItem]:
    """Five items, A through E."""
    return make_items(5)


@pytest.fixture
def timers() -> ManualTimerBackend:
    """A manual clock; time only moves on ``advance()``."""
    return ManualTimerBackend()


@pytest.fixture
def make_engine(
    items: list[CarouselItem], timers: ManualTimerBackend
) -> Generator[Callable[..., CarouselEngine], None, None]:
    """Factory for engines on the manual clock, disposed after the test.

    Example:
        def test_next(make_engine):
            engine = make_engine(config={"autoSlideInterval": 1000})
    """
    created: list[CarouselEngine] = []

    def _make(
        engine_items: list[CarouselItem] | None = None,
        config: dict[str, Any] | None = None,
        backend: ManualTimerBackend | None = None,
    ) -> CarouselEngine:
        engine = create(
            items if engine_items is None else engine_items,
            WIDE_CONFIG if config is None else {**WIDE_CONFIG, **config},
            timers=backend or timers,
        )
        created.append(engine)
        return engine

    yield _make

    for engine in created:
        engine.dispose()
