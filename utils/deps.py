from core.database import SessionLocal
from typing import Annotated
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from jose import JWTError, jwt
from core.config import settings
from core.exceptions import AuthError, ForbiddenError
from schemas.auth_schemas import AuthContext
from services.auth_service import AuthService
from utils.logger import get_logger

logger = get_logger(__name__)


async def get_db():
    async with SessionLocal() as db:
        yield db

db_dependency = Annotated[AsyncSession, Depends(get_db)]


bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_member(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: db_dependency,
) -> AuthContext:
    """
    Resolve the bearer access token into the caller's identity and roles.

    Roles are read from the database on every request so a revoked role
    takes effect before the token expires.
    """
    if credentials is None or not credentials.credentials.strip():
        raise AuthError("Authorization header is missing", code="NO_AUTH_HEADER")

    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthError("Could not validate credentials", code="INVALID_ACCESS_TOKEN")

    user_id = payload.get("id")
    email = payload.get("sub")

    if user_id is None or email is None:
        raise AuthError("Could not validate credentials", code="INVALID_ACCESS_TOKEN")

    if payload.get("type") != "access":
        raise AuthError("Invalid token type. Access token required", code="INVALID_ACCESS_TOKEN")

    member = await AuthService.get_active_member_by_id(db, user_id)
    if member is None:
        raise AuthError("Could not validate credentials", code="INVALID_ACCESS_TOKEN")

    roles = await AuthService.get_roles(db, member.id)

    return AuthContext(user_id=member.id, email=member.email, roles=roles)


member_dependency = Annotated[AuthContext, Depends(get_current_member)]


def require_roles(*required: str):
    """
    Dependency factory: the caller must hold at least one of `required`.
    """
    async def checker(member: member_dependency) -> AuthContext:
        if not any(role in member.roles for role in required):
            logger.warning(
                "Access denied - missing role",
                extra={"user_id": member.user_id, "required_roles": list(required)}
            )
            raise ForbiddenError("Access denied", code="ERROR_ACCESSDENIED")
        return member

    return checker


user_role_dependency = Annotated[AuthContext, Depends(require_roles("USER"))]
admin_role_dependency = Annotated[AuthContext, Depends(require_roles("ADMIN", "SUPER_ADMIN"))]
super_admin_dependency = Annotated[AuthContext, Depends(require_roles("SUPER_ADMIN"))]
