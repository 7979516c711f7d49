"""
Legal Chatbot Server Package.

This package contains the FastAPI web server exposing the chat, chat session,
chat attachment and law upload endpoints.
"""
