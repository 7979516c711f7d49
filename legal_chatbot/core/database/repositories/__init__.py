"""
Async repositories over the chatbot's SQLModel entities.
"""

from .activity_logs import QueryLogRepository, UserActivityRepository
from .base import AsyncBaseRepository, QueryBuilder
from .chat_sessions import ChatSessionRepository
from .laws import LawRepository
from .profiles import ProfileRepository

__all__ = [
    "AsyncBaseRepository",
    "ChatSessionRepository",
    "LawRepository",
    "ProfileRepository",
    "QueryBuilder",
    "QueryLogRepository",
    "UserActivityRepository",
]
