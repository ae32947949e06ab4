from fastapi import APIRouter, Request, Path
from utils.deps import db_dependency, super_admin_dependency
from schemas.auth_schemas import AdminMemberList, AdminRoleRequest
from schemas.common_schemas import INT32_MAX
from services.auth_service import AuthService, ADMIN_ROLE
from middleware.rate_limiter import limiter

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"]
)


@router.get("/users", response_model=AdminMemberList)
@limiter.limit("30/minute")
async def list_users(request: Request, member: super_admin_dependency, db: db_dependency):
    members = await AuthService.list_members(db)

    return {
        "users": [
            {
                "id": m.id,
                "email": m.email,
                "nickname": m.nickname,
                "social": m.social,
                "roles": roles,
                "is_admin": ADMIN_ROLE in roles,
            }
            for m, roles in members
        ]
    }


@router.put("/users/{user_id}/admin")
@limiter.limit("10/minute")
async def set_admin(request: Request, body: AdminRoleRequest, member: super_admin_dependency,
    db: db_dependency, user_id: int = Path(gt=0, le=INT32_MAX)):
    roles = await AuthService.set_admin(db, member.user_id, user_id, body.enabled)

    return {"id": user_id, "roles": roles, "is_admin": ADMIN_ROLE in roles}
