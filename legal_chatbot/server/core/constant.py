"""
Application-wide constants for the FastAPI server.
"""

PROJECT_NAME = "Legal Chatbot"
API_PREFIX = "/api"
VERSION = "1.0.0"
SCHEMA_VERSION = "v1"
