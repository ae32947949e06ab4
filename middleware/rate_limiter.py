from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from jose import jwt, JWTError
from core.config import settings


def get_user_id(request: Request) -> str:
    """
    Rate-limit key: the member id from a valid bearer token, otherwise the
    client address. Members behind one NAT do not share a budget.
    """
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return get_remote_address(request)

    try:
        payload = jwt.decode(token.strip(), settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return get_remote_address(request)

    user_id = payload.get("id")
    return f"member:{user_id}" if user_id else get_remote_address(request)


limiter = Limiter(
    key_func=get_user_id,
    default_limits=["200/hour"],
    enabled=settings.ENV != "testing"
)
