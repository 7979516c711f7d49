"""
Database layer for the legal chatbot.

SQLModel entities mapping the Supabase tables, async repositories on top of
them, and engine/session management.
"""

from .base import Base
from .session import async_session_maker, engine, get_session, init_db

__all__ = ["Base", "async_session_maker", "engine", "get_session", "init_db"]
