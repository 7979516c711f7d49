"""
SQLModel entities mapping the Supabase tables used by the chatbot.
"""

from .activity_logs import QueryLog, UserActivity
from .chat_sessions import DEFAULT_SESSION_TITLE, ChatMessage, ChatSession, MessageRole
from .laws import Law
from .profiles import Profile, UserRole

__all__ = [
    "ChatMessage",
    "ChatSession",
    "DEFAULT_SESSION_TITLE",
    "Law",
    "MessageRole",
    "Profile",
    "QueryLog",
    "UserActivity",
    "UserRole",
]
