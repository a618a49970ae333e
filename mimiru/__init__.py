"""Audio content recommendation engine with cached, event-invalidated results."""

__version__ = "2.0.0"