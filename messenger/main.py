# messenger/main.py
from contextlib import asynccontextmanager
from typing import Optional
import logging

from fastapi import FastAPI, WebSocket, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from messenger.api.v1.router import api_router
from messenger.config import get_settings
from messenger.database import engine, Base, get_db
from messenger.websockets.connection_manager import ConnectionManager, handle_connection
import messenger.models  # noqa: F401  registers the tables on Base.metadata

# Get settings
settings = get_settings()

# Setup logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables in the database
    Base.metadata.create_all(bind=engine)

    app.state.connection_manager = ConnectionManager()
    logger.info("Messenger API started")
    try:
        yield
    finally:
        await app.state.connection_manager.close()
        logger.info("Messenger API stopped")


# Initialize app
app = FastAPI(
    title="Messenger API",
    description="API for a messaging app with contacts, rooms and threaded messages",
    version="0.1.0",
    lifespan=lifespan
)

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Health check and welcome message"""
    return {
        "message": "Welcome to the Messenger API",
        "status": "online",
        "version": "0.1.0"
    }


def format_validation_error(error: dict) -> str:
    """Render one pydantic error as the message shown to the client"""
    field = str(error["loc"][-1]) if error.get("loc") else "body"
    if error.get("type") == "missing":
        return f"{field} is required"
    if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
        return str(error["ctx"]["error"])
    return f"{field}: {error.get('msg')}"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Every failing rule is collected; the first one is reported
    errors = exc.errors()
    detail = format_validation_error(errors[0]) if errors else "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


@app.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    access_token: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """
    WebSocket endpoint for message events

    Args:
        websocket: WebSocket connection
        access_token: bearer token issued at login
    """
    await handle_connection(
        websocket=websocket,
        access_token=access_token,
        connection_manager=websocket.app.state.connection_manager,
        db=db
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("messenger.main:app", host="0.0.0.0", port=8000, reload=True)
