"""Carousel interaction engine.

Platform-agnostic state machine, gesture handling, infinite-loop indexing,
auto-advance scheduling and responsive layout for horizontally scrolling
card carousels, plus an HTTP/WebSocket host for remote renderers.
"""

__version__ = "1.0.0"
