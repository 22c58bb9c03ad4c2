import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.config import FRONTEND_ORIGIN, HOST, LOG_LEVEL, PORT
from src.api.database import engine
from src.api.errors import NotesAppError, notes_app_error_handler
from src.api.logging_config import setup_logging
from src.api.models import Base
from src.api.routers import auth as auth_routes
from src.api.routers import notes as notes_routes

API_PREFIX = "/api"

setup_logging()
logger = logging.getLogger("notes")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize database tables
    Base.metadata.create_all(bind=engine)
    logger.info("Notes API started", extra={"event": "startup"})
    yield


app = FastAPI(
    title="Notes API",
    description="Personal notes backend with email-verified accounts and per-user note CRUD.",
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Health", "description": "Service health and status."},
        {"name": "Auth", "description": "Signup, email verification, login and password reset."},
        {"name": "Notes", "description": "CRUD operations for notes."},
    ],
)

# CORS setup - allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(NotesAppError, notes_app_error_handler)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={"event": "server_error", "extra_data": {"path": request.url.path}})
    return JSONResponse(status_code=500, content={"error": "ServerError", "detail": "Internal server error"})


# PUBLIC_INTERFACE
@app.get("/", tags=["Health"], summary="Health Check")
def health_check():
    """
    Health check endpoint.

    Returns:
        JSON object indicating service status.
    """
    return {"message": "Healthy"}


api_router = APIRouter(prefix=API_PREFIX)
api_router.include_router(auth_routes.router)
api_router.include_router(notes_routes.router)
app.include_router(api_router)


# PUBLIC_INTERFACE
def run():
    """Serve the API with uvicorn (`notes-api` console script)."""
    uvicorn.run(app, host=HOST, port=PORT, log_config=None, log_level=LOG_LEVEL.lower())
