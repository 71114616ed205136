"""
Homework Helper API main entry point.
Creates FastAPI app, sets up lifespan (Firebase), CORS, request logging middleware,
error handlers, registers all routes.
"""

import os
import time

from fastapi import FastAPI, APIRouter, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import logger, get_version_info, AUTH_DISABLED
from app.database import client
from app.routes import register_all_routes
from app.utils.auth import init_firebase


async def lifespan(app: FastAPI):
    """Application lifespan manager - initializes Firebase, closes the Mongo client"""
    logger.info("🚀 FastAPI app starting up...")
    logger.info("REGISTERED ROUTES: %s", [r.path for r in app.routes])

    if AUTH_DISABLED:
        logger.warning("⚠️  AUTH_DISABLED is set - every caller is treated as an admin")
    else:
        init_firebase()
    logger.info("=" * 60)

    yield

    logger.info("🛑 FastAPI app shutting down...")
    client.close()


# Create the main app with lifespan
app = FastAPI(title="Homework Helper API", lifespan=lifespan)

# Create a router with the /api prefix
api_router = APIRouter(prefix="/api")


@api_router.get("/version")
async def get_version():
    """Public version endpoint for deployment verification"""
    return get_version_info()


# Register all route modules on the api_router
register_all_routes(api_router)

# Include the api_router on the app
app.include_router(api_router)


# Root-level health check endpoint (for Kubernetes probes)
@app.get("/health")
async def root_health_check():
    """Health check for Kubernetes liveness/readiness probes"""
    return {"status": "healthy", "service": "Homework Helper API"}


# ============== ERROR HANDLERS ==============

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a client error: answer 400 with readable messages"""
    messages = []
    for error in exc.errors():
        msg = str(error.get("msg", "Invalid request"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages.append(msg)
    return JSONResponse(status_code=400, content={"detail": "; ".join(messages) or "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ============== REQUEST LOGGING MIDDLEWARE ==============

@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Log method, path, status and latency of every request"""
    start_time = time.time()
    # A handler that raises never hands back a response; it ends as a 500
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        response_time_ms = int((time.time() - start_time) * 1000)
        logger.info(f"{request.method} {request.url.path} -> {status_code} ({response_time_ms}ms)")


# ============== CORS ==============

cors_origins_env = os.environ.get("CORS_ORIGINS")
cors_origins = [origin.strip() for origin in cors_origins_env.split(",")] if cors_origins_env else [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:8081",
]

app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
