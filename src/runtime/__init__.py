from .loop import DEFAULT_INTERVAL_SECONDS, StatusLoop

__all__ = ["DEFAULT_INTERVAL_SECONDS", "StatusLoop"]
