import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401 - register tables with Base
from .config import ALLOWED_ORIGINS
from .database import Base, engine
from .domain.appointments import router as appointments_router
from .exceptions import BookingError
from .routes.admin import router as admin_router
from .routes.auth import router as auth_router
from .routes.payments import router as payments_router
from .routes.paymongo_webhooks import router as paymongo_webhooks_router
from .routes.verification import router as verification_router
from .verification_store import start_sweeper

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


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

    sweeper = start_sweeper()
    app.state.verification_sweeper = sweeper

    yield

    logger.info("Application shutting down...")
    sweeper.cancel()
    try:
        await sweeper
    except asyncio.CancelledError:
        logger.info("Verification code cleanup stopped")


app = FastAPI(title="Clinic Appointment API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(BookingError)
async def booking_exception_handler(request: Request, exc: BookingError):
    """Map domain errors to the {success, message} envelope"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


# CORS Configuration
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(verification_router)
app.include_router(payments_router)
app.include_router(paymongo_webhooks_router)
app.include_router(appointments_router)
app.include_router(admin_router)
app.include_router(auth_router)


@app.get("/")
def root():
    return {"message": "Clinic Appointment API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
