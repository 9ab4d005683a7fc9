"""Rate limiting utilities"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request

from ..config import settings
from ..exceptions import UnauthorizedError


def get_user_rate_limit_key(request: Request) -> str:
    """
    Get rate limit key based on authenticated user

    Falls back to IP address if user is not authenticated.
    """
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        from .auth import decode_token
        token = auth_header.split(" ", 1)[1]
        try:
            payload = decode_token(token)
        except UnauthorizedError:
            payload = {}
        user_id = payload.get("sub")
        if user_id:
            return f"user:{user_id}"

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_user_rate_limit_key,
    default_limits=[settings.DEFAULT_RATE_LIMIT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window"
)
