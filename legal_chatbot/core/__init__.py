"""
Core utilities and configuration for the legal chatbot.

This package provides core functionality including logging configuration,
monitoring, database setup, and other shared utilities.
"""

from legal_chatbot.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
