"""JWT verification for bearer tokens.

Tokens are issued by the account service; this backend only verifies them
and reads the owner id from the claims. Token contents are never logged.
"""
import time
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import JWT_ALGORITHM, JWT_SECRET
from .logging_config import get_logger
from ..api.exceptions import AuthenticationError

logger = get_logger(__name__)

MISSING_CREDENTIALS_MESSAGE = "Full authentication is required to access this resource"
EXPIRED_TOKEN_MESSAGE = "JWT token is expired"
INVALID_TOKEN_MESSAGE = "Invalid JWT token"

bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str, secret: str = JWT_SECRET, algorithm: str = JWT_ALGORITHM) -> Dict[str, Any]:
    """
    Verify signature and expiry of a token and return its claims.

    Raises:
        AuthenticationError: with a message containing "JWT" when the token is
            expired or otherwise invalid
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired JWT")
        raise AuthenticationError(EXPIRED_TOKEN_MESSAGE)
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected invalid JWT: {type(e).__name__}")
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)


def owner_id_from_claims(claims: Dict[str, Any]) -> str:
    """Owner id is the `id` claim when present, otherwise `sub`."""
    owner = claims.get("id", claims.get("sub"))
    if owner is None or str(owner).strip() == "":
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)
    return str(owner)


async def get_current_owner(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """FastAPI dependency resolving the caller's owner id from the Authorization header."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationError(MISSING_CREDENTIALS_MESSAGE)
    claims = decode_token(credentials.credentials)
    return owner_id_from_claims(claims)


def create_access_token(owner_id: str, expires_in_seconds: int = 3600, **extra_claims: Any) -> str:
    """
    Mint a token the way the account service does.

    Used by local tooling and tests; production tokens come from the account service.
    """
    now = int(time.time())
    payload = {"sub": str(owner_id), "iat": now, "exp": now + expires_in_seconds}
    payload.update(extra_claims)
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)
