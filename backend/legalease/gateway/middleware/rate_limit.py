"""
Rate Limiting - Protect the API (and the model provider bill) from abuse.

A default per-minute limit applies to every route through SlowAPIMiddleware.
"""
import hashlib

from fastapi import Request
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from ...core.config import RATE_LIMIT_ENABLED, RATE_LIMIT_PER_MINUTE
from ...core.logging_config import get_logger
from .error_handler import error_response

logger = get_logger(__name__)


def get_rate_limit_key(request: Request) -> str:
    """
    Rate limit per caller credential, falling back to the client IP.

    The Authorization header is hashed so the token itself is never kept.
    """
    authorization = request.headers.get("Authorization")
    if authorization:
        return "auth:" + hashlib.sha256(authorization.encode()).hexdigest()[:32]
    return get_remote_address(request)


def create_limiter() -> Limiter:
    return Limiter(
        key_func=get_rate_limit_key,
        default_limits=[f"{RATE_LIMIT_PER_MINUTE}/minute"],
        enabled=RATE_LIMIT_ENABLED,
    )


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded for {request.method} {request.url.path}: {exc.detail}")
    return error_response(request, 429, f"Rate limit exceeded: {exc.detail}")
