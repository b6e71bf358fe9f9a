"""Mock implementations for testing."""

from tests.mocks.items import item_payload, make_items
from tests.mocks.timers import ManualTimerBackend, ManualTimerHandle

__all__ = ["ManualTimerBackend", "ManualTimerHandle", "item_payload", "make_items"]
