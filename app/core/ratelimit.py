import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_ipaddr, get_remote_address

from app.core.config import settings
from app.core.exceptions import RateLimited

logger = logging.getLogger(__name__)

# Both submission endpoints draw from this one budget per client address
SUBMISSION_SCOPE = "form-submissions"

limiter = Limiter(
    key_func=get_ipaddr if settings.TRUST_PROXY_HEADERS else get_remote_address
)

submission_limit = limiter.shared_limit(settings.RATE_LIMIT, scope=SUBMISSION_SCOPE)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Reply with the fixed rate-limit message instead of slowapi's default body."""
    logger.warning(f"Rate limit exceeded for {get_remote_address(request)} on {request.url.path}")
    error = RateLimited()
    return JSONResponse(status_code=error.status_code, content={"error": error.message})
