import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.endpoints.submissions import router as submissions_router
from app.constants.constants import CORS_REJECTED_MESSAGE, INTERNAL_ERROR_MESSAGE
from app.core.config import settings
from app.core.exceptions import NotFound, SubmissionError
from app.core.ratelimit import limiter, rate_limit_exceeded_handler
from app.services.SmtpMailClient import get_mail_client

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PROCESS_STARTED = time.monotonic()

startup_tasks = []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Async context manager for app lifespan events"""

    try:
        logger.info("🚀 Starting Abc Hires backend...")

        Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
        logger.info(f"📁 Upload directory ready: {settings.UPLOAD_DIR}")

        mail_client = get_mail_client()
        logger.info(f"📧 Email: {'Configured' if mail_client.configured else 'Not configured'}")
        logger.info(f"🔒 CORS: {', '.join(settings.allowed_origins)}")

        if mail_client.disabled:
            logger.info("✉️ Emails disabled (test mode), skipping SMTP verification")
        else:
            # verification only logs, requests are served meanwhile
            startup_tasks.append(asyncio.create_task(mail_client.verify_connection()))

    except Exception as e:
        logger.critical(f"🔥 Application startup failed: {str(e)}")
        raise

    try:
        logger.info("🏁 Abc Hires backend startup complete")
        yield
    finally:
        for task in startup_tasks:
            if not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    logger.info("⏹️ SMTP verification cancelled")
        startup_tasks.clear()
        logger.info("👋 Application shutdown complete")


app = FastAPI(
    title="Abc Hires API",
    description="Relays driver applications and company hiring requests by email",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def enforce_origin_allow_list(request: Request, call_next):
    """Reject browser requests from origins outside the allow-list. No Origin header is allowed."""
    origin = request.headers.get("origin")
    if origin and origin not in settings.allowed_origins:
        logger.warning(f"Blocked request from origin {origin}")
        return JSONResponse(status_code=403, content={"error": CORS_REJECTED_MESSAGE})
    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"Request: {request.method} {request.url}")
    logger.info(f"Origin: {request.headers.get('origin')}")
    response = await call_next(request)
    logger.info(f"Response status: {response.status_code}")
    return response


@app.exception_handler(SubmissionError)
async def submission_exception_handler(request: Request, exc: SubmissionError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # unknown paths and unknown methods both read as a missing endpoint
    if exc.status_code in (404, 405):
        not_found = NotFound()
        return JSONResponse(status_code=not_found.status_code, content={"error": not_found.message})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logging.error(f"Validation Error: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Server error: {str(exc)}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


@app.get("/api/health", tags=["Health Check"])
async def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": time.monotonic() - PROCESS_STARTED,
    }


@app.get("/healthcheck", tags=["Health Check"], response_class=PlainTextResponse)
async def liveness_check():
    return "ok"


app.include_router(submissions_router, prefix="/api", tags=["Submissions"])

logger.info(f"✅ Loaded {len(app.routes)} routes")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)
