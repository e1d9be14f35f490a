"""Infrastructure layer containing configuration, logging and event dispatch."""

__all__ = [
    "config",
    "constants",
    "events",
    "logging",
]
