from .session import ChatSession, connectivity_error

__all__ = ["ChatSession", "connectivity_error"]
