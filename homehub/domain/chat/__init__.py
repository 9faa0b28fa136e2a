"""Chat domain - Reservation-scoped messages and simulated replies"""

from .scheduler import ReplyScheduler
from .service import ChatService
from .session import ChatSession

__all__ = ["ChatService", "ChatSession", "ReplyScheduler"]
