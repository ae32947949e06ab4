import secrets
import hashlib
from datetime import datetime, timezone, timedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from jose import jwt, JWTError
from core.config import settings
from core.exceptions import AuthError
from models.refresh_tokens import RefreshToken
from services.auth_service import AuthService
from utils.logger import get_logger

logger = get_logger(__name__)


def _hash_jti(jti: str) -> str:
    return hashlib.sha256(jti.encode()).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class TokenService:
    """
    Creation, rotation and revocation of JWT access/refresh tokens.
    """

    @staticmethod
    def create_access_token(email: str, user_id: int, expires_delta: timedelta = None) -> str:
        """
        Short-lived access token. Roles are deliberately not embedded; they
        are read from the database on every request.
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        payload = {
            "sub": email,
            "id": user_id,
            "type": "access",
            "exp": datetime.now(timezone.utc) + expires_delta
        }
        return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def create_refresh_token(email: str, user_id: int):
        """
        Returns:
            Tuple of (refresh_token_string, jti, expires_at)
        """
        jti = secrets.token_urlsafe(32)
        expire = datetime.now(timezone.utc) + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

        payload = {
            "sub": email,
            "id": user_id,
            "jti": jti,
            "type": "refresh",
            "exp": expire
        }
        refresh_token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

        return refresh_token, jti, expire

    @staticmethod
    async def create_tokens(email: str, user_id: int, db: AsyncSession) -> dict:
        """
        Issue an access/refresh pair and persist the refresh token's hashed jti.
        """
        access_token = TokenService.create_access_token(email, user_id)
        refresh_token, jti, expires_at = TokenService.create_refresh_token(email, user_id)

        db.add(RefreshToken(
            member_id=user_id,
            token_hash=_hash_jti(jti),
            expires_at=expires_at
        ))
        await db.commit()

        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer"
        }

    @staticmethod
    async def refresh_access_token(refresh_token: str, db: AsyncSession) -> dict:
        """
        Validate a refresh token and rotate it: the presented token is revoked
        and a new pair is issued.

        Raises:
            AuthError: token invalid, expired, revoked or owned by an inactive member
        """
        try:
            payload = jwt.decode(refresh_token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise AuthError("Invalid token", code="ERROR_REFRESH")

        if payload.get("type") != "refresh":
            raise AuthError("Invalid token type", code="ERROR_REFRESH")

        email = payload.get("sub")
        user_id = payload.get("id")
        jti = payload.get("jti")

        if not all([email, user_id, jti]):
            raise AuthError("Invalid token payload", code="ERROR_REFRESH")

        result = await db.execute(
            select(RefreshToken).where(
                RefreshToken.token_hash == _hash_jti(jti),
                RefreshToken.revoked == False
            )
        )
        db_token = result.scalar_one_or_none()

        if not db_token:
            logger.warning("Refresh with unknown or revoked token", extra={"user_id": user_id})
            raise AuthError("Token not found or revoked", code="ERROR_REFRESH")

        if _as_utc(db_token.expires_at) < datetime.now(timezone.utc):
            raise AuthError("Token expired", code="ERROR_REFRESH")

        member = await AuthService.get_active_member_by_id(db, user_id)
        if member is None:
            raise AuthError("Account is inactive", code="ERROR_REFRESH")

        db_token.revoked = True
        await db.commit()

        return await TokenService.create_tokens(email, user_id, db)

