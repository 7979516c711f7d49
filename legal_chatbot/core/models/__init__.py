"""Pydantic models shared across the chatbot."""
