"""
API authentication

Each entry in API_KEYS is either `key:user_id`, a key issued to one user,
or a bare `key` for trusted backends. A user key only reaches that user's
routes; a backend key reaches shared routes (leaderboard) but no per-user
state.
"""
import os
import logging
from typing import Optional
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from quizhub.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

security = HTTPBearer()


def parse_api_keys(raw: str) -> dict[str, Optional[str]]:
    """
    Parse an API_KEYS value into {key: bound user id or None}

    Example:
        "abc:user-1, svc" -> {"abc": "user-1", "svc": None}
    """
    keys: dict[str, Optional[str]] = {}
    for entry in raw.split(","):
        key, _, user_id = entry.strip().partition(":")
        key, user_id = key.strip(), user_id.strip()
        if key:
            keys[key] = user_id or None
    return keys


def get_api_keys() -> dict[str, Optional[str]]:
    """Load API keys from environment variable"""
    api_keys_str = os.getenv("API_KEYS", "")
    if not api_keys_str:
        logger.warning("No API_KEYS configured in environment")
        return {}
    return parse_api_keys(api_keys_str)


async def verify_api_key(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """
    Verify API key from Authorization header

    Raises:
        HTTPException: 503 when no keys are configured, 401 for an unknown key
    """
    api_key = credentials.credentials
    valid_keys = get_api_keys()

    if not valid_keys:
        logger.error("No API keys configured - rejecting all requests")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="API authentication not configured"
        )

    if api_key not in valid_keys:
        logger.warning(f"Invalid API key attempt: {api_key[:4]}...")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key"
        )

    return api_key


async def get_current_user_id(api_key: str = Depends(verify_api_key)) -> Optional[str]:
    """User the presented key belongs to (None for backend keys)"""
    return get_api_keys().get(api_key)


async def require_user_access(
    user_id: str,
    current_user_id: Optional[str] = Depends(get_current_user_id)
) -> str:
    """
    Allow a per-user route only for the user the key was issued to

    Raises:
        AuthenticationError: The key is not bound to `user_id`
    """
    if current_user_id is None or current_user_id != user_id:
        raise AuthenticationError(
            f"Key for {current_user_id or 'backend'} cannot access user {user_id!r}",
            user_id=current_user_id,
            operation="require_user_access",
            context={"requested_user_id": user_id}
        )
    return user_id
