from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from config import settings


def get_rate_limit_key(request: Request):
    # Operator consoles identify themselves via header; fall back to client address
    operator = request.headers.get("X-Operator-Id")
    if operator:
        return operator
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_rate_limit_key,
    enabled=settings.RATE_LIMIT_ENABLED,
)
