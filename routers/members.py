from fastapi import APIRouter, Request
from starlette import status
from utils.deps import db_dependency, member_dependency
from schemas.auth_schemas import (JoinRequest, JoinResponse, LoginRequest, Token, TokenPair,
    RefreshTokenRequest, MemberInfo)
from services.auth_service import AuthService
from services.token_service import TokenService
from middleware.rate_limiter import limiter
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(
    prefix="/api/member",
    tags=["member"]
)


@router.post("/join", response_model=JoinResponse, status_code=status.HTTP_200_OK)
@limiter.limit("3/minute")
async def join(request: Request, body: JoinRequest, db: db_dependency):
    member = await AuthService.join(body, db)

    logger.info(
        "Member registered",
        extra={"user_id": member.id, "email": member.email}
    )

    return {"result": "SUCCESS", "id": member.id, "email": member.email}


@router.post("/login", response_model=Token)
@limiter.limit("5/minute")
async def login(request: Request, body: LoginRequest, db: db_dependency):
    member = await AuthService.authenticate(body.email, body.password, db)

    tokens = await TokenService.create_tokens(member.email, member.id, db)

    logger.info(
        "Member logged in",
        extra={"user_id": member.id, "email": member.email}
    )

    return {"email": member.email, **tokens}


@router.post("/refresh", response_model=TokenPair)
@limiter.limit("10/minute")
async def refresh(request: Request, body: RefreshTokenRequest, db: db_dependency):
    """
    Exchange a refresh token for a new access/refresh pair.
    """
    tokens = await TokenService.refresh_access_token(body.refresh_token, db)

    logger.info("Access token refreshed")

    return tokens


@router.get("/me", response_model=MemberInfo)
@limiter.limit("30/minute")
async def me(request: Request, member: member_dependency, db: db_dependency):
    model = await AuthService.get_active_member_by_id(db, member.user_id)

    return {
        "id": model.id,
        "email": model.email,
        "nickname": model.nickname,
        "social": model.social,
        "roles": member.roles
    }
