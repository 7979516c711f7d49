"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request timing), registers the exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from legal_chatbot.core.database import init_db
from legal_chatbot.core.logging_config import get_logger, setup_logging
from legal_chatbot.core.monitoring import initialize_logfire

from .api import chat, chat_files, chat_messages, chat_sessions, health, laws
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.deps import close_clients

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Checks database connectivity on startup and closes the shared HTTP
    clients on shutdown.
    """
    try:
        logger.info("Starting up Legal Chatbot Server...")
        await init_db()
        logger.info("Database connection verified")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down Legal Chatbot Server...")
    await close_clients()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Legal Chatbot Server API

    Backend of a Vietnamese legal question-answering assistant. It answers chat
    questions (n8n workflow or local law search), stores chat sessions and
    messages, and ingests legal documents into the law database.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_PREFIX}/openapi.json",
    docs_url=f"{constant.API_PREFIX}/docs",
    redoc_url=f"{constant.API_PREFIX}/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(chat.router, prefix=constant.API_PREFIX)
app.include_router(chat_sessions.router, prefix=f"{constant.API_PREFIX}/chat")
app.include_router(chat_messages.router, prefix=f"{constant.API_PREFIX}/chat")
app.include_router(chat_files.router, prefix=f"{constant.API_PREFIX}/chat")
app.include_router(laws.router, prefix=f"{constant.API_PREFIX}/laws")
