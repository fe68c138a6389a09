# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the ContactGap API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main            (binds API_HOST:API_PORT)
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agents.tools import ToolContext
from app.config import settings
from app.exceptions import ContactGapException, contactgap_exception_handler
from app.routers import assistant, health, reports, tools
from lib.gmail_client import GmailSender
from lib.query_executor import SQLAlchemyQueryExecutor, create_database_engine

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Build the database engine and the Gmail sender once
    - Shutdown: Dispose of the connection pool
    """
    # Startup
    logger.info(f"Starting ContactGap API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    engine = create_database_engine(settings.DATABASE_URL, settings.DATABASE_CONNECT_TIMEOUT)
    app.state.tool_context = ToolContext(
        executor=SQLAlchemyQueryExecutor(engine, schema=settings.database_schema),
        sender=GmailSender(
            settings.GMAIL_CREDENTIALS_PATH,
            settings.GMAIL_TOKEN_PATH,
            sender=settings.GMAIL_SENDER,
        ),
    )
    logger.info(f"Database dialect: {engine.dialect.name}, schema: {settings.database_schema or 'default'}")

    yield

    # Shutdown
    logger.info("Shutting down ContactGap API")
    engine.dispose()


# Create FastAPI application
app = FastAPI(
    title="ContactGap API",
    description="""
## Missing Contact Information Detection

ContactGap finds candidate records with a missing email, phone or name in any
relational database, ranks them by urgency and can email follow-ups.

### How It Works

1. **Discover** - The schema is inspected and the candidate table is found
   by table and column names
2. **Detect** - Summary and detail queries find records with missing fields
3. **Recover** - Missing names and phones are looked up in parsed resume data
4. **Prioritize** - Each record is ranked Critical / High / Medium / Low

### Tools

| Tool | Purpose |
|------|---------|
| **detect-missing-info** | Audit the candidate table |
| **send-email** | Send a plain text email through Gmail |

### Quick Start

```bash
# 1. Run the audit
curl -X POST http://localhost:8000/api/v1/tools/detect-missing-info \\
  -H "Content-Type: application/json" \\
  -d '{"priorityFilter": "Critical", "limitResults": 20}'

# 2. Download the report
curl -O http://localhost:8000/api/v1/reports/missing-info.csv

# 3. Ask the assistant
curl -X POST http://localhost:8000/api/v1/assistant/chat \\
  -H "Content-Type: application/json" \\
  -d '{"messages": [{"role": "user", "content": "Who is missing an email?"}]}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Tools",
            "description": "Agent tools: missing-info detection and email",
        },
        {
            "name": "Reports",
            "description": "Report downloads",
        },
        {
            "name": "Assistant",
            "description": "Chat with the contact assistant",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ContactGapException)
async def handle_contactgap_exception(request: Request, exc: ContactGapException):
    """Handle custom ContactGap exceptions."""
    return await contactgap_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Tool endpoints
app.include_router(
    tools.router,
    prefix="/api/v1/tools",
    tags=["Tools"]
)

# Report downloads
app.include_router(
    reports.router,
    prefix="/api/v1/reports",
    tags=["Reports"]
)

# Assistant chat
app.include_router(
    assistant.router,
    prefix="/api/v1/assistant",
    tags=["Assistant"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "ContactGap API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
        "tools": "/api/v1/tools",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
    )
