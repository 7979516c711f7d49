"""
Chat answering: query classification, follow-up summaries, local ranking and
the service orchestrating them.
"""

from .classifier import QueryClassification, classify_query
from .service import ChatAssistantService, ClientInfo

__all__ = ["ChatAssistantService", "ClientInfo", "QueryClassification", "classify_query"]
