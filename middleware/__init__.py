"""
Middleware package exports.
"""

from middleware.request_id import RequestIDMiddleware
from middleware.rate_limiter import limiter, get_user_id

__all__ = ["RequestIDMiddleware", "limiter", "get_user_id"]
