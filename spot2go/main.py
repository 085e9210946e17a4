import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .database import Base, engine
from .domain.admin import router as admin_router
from .domain.auth import router as auth_router
from .domain.bookings import router as bookings_router
from .domain.customers import router as customers_router
from .domain.notifications import router as notifications_router
from .domain.owners import router as owners_router
from .domain.payments import router as payments_router
from .domain.users import router as users_router
from .email_service import Mailer
from .services.push_service import PushClient
from .storage import ImageStorage

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("botocore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    # External clients are built once; anything already on app.state is kept
    if getattr(app.state, "storage", None) is None:
        # Raises StorageNotConfiguredError so a misconfigured server never starts
        app.state.storage = ImageStorage.from_config()
    if getattr(app.state, "mailer", None) is None:
        app.state.mailer = Mailer()
    if getattr(app.state, "push", None) is None:
        app.state.push = PushClient.from_config()

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Spot2Go API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported as 400 with a readable message"""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    logger.warning(f"Validation error for {request.url.path}: {messages}")
    return JSONResponse(status_code=400, content={"detail": "; ".join(messages) or "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Something went wrong!"})


# CORS Configuration
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:3000,https://spot2go.app,https://www.spot2go.app",
).split(",")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes - every router answers both under /api and at the root
ROUTERS = [
    auth_router,
    customers_router,
    owners_router,
    admin_router,
    notifications_router,
    payments_router,
    users_router,
    bookings_router,
]

for router in ROUTERS:
    app.include_router(router, prefix="/api")
    app.include_router(router, include_in_schema=False)


@app.get("/")
def root():
    return {"message": "Spot2Go API is running"}


@app.get("/health")
@app.get("/api/health", include_in_schema=False)
def health():
    return {"status": "healthy"}
