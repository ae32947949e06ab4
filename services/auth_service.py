from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from core.exceptions import AuthError, ValidationError, NotFoundError
from models.members import Member
from models.member_roles import MemberRole
from schemas.auth_schemas import JoinRequest
from utils.hashing import verify_password, get_password_hash
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ROLE = "USER"
ADMIN_ROLE = "ADMIN"


class AuthService:

    @staticmethod
    async def join(request: JoinRequest, db: AsyncSession) -> Member:
        """
        Registers a member with the default USER role.
        """
        email = request.email.lower().strip()

        if await AuthService.get_member_by_email(db, email):
            logger.warning(
                "Registration attempt with existing email",
                extra={"email": email}
            )
            raise ValidationError("Email already registered", code="EMAIL_ALREADY_REGISTERED")

        member = Member(
            email=email,
            nickname=request.nickname,
            hashed_password=get_password_hash(request.password),
            social=False,
            is_active=True,
        )
        try:
            db.add(member)
            await db.flush()

            db.add(MemberRole(member_id=member.id, role=DEFAULT_ROLE))
            await db.commit()
        except IntegrityError:
            # Concurrent join with the same email won the unique constraint
            await db.rollback()
            logger.warning("Registration race on existing email", extra={"email": email})
            raise ValidationError("Email already registered", code="EMAIL_ALREADY_REGISTERED")

        return member

    @staticmethod
    async def authenticate(email: str, password: str, db: AsyncSession) -> Member:
        member = await AuthService.get_member_by_email(db, email.lower().strip())

        if not member:
            logger.warning("Login failed - member not found", extra={"email": email})
            raise AuthError("Could not validate member", code="ERROR_LOGIN")

        if not member.is_active:
            logger.warning("Login failed - inactive account", extra={"email": email})
            raise AuthError("Could not validate member", code="ERROR_LOGIN")

        if not verify_password(password, member.hashed_password):
            logger.warning(
                "Login failed - invalid password",
                extra={"user_id": member.id, "email": email}
            )
            raise AuthError("Could not validate member", code="ERROR_LOGIN")

        logger.debug("Member authenticated", extra={"user_id": member.id})
        return member

    @staticmethod
    async def get_member_by_email(db: AsyncSession, email: str) -> Member | None:
        result = await db.execute(select(Member).where(Member.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_active_member_by_id(db: AsyncSession, user_id: int) -> Member | None:
        result = await db.execute(
            select(Member).where(Member.id == user_id, Member.is_active == True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_roles(db: AsyncSession, user_id: int) -> list[str]:
        result = await db.execute(
            select(MemberRole.role).where(MemberRole.member_id == user_id).order_by(MemberRole.role)
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_members(db: AsyncSession) -> list[tuple[Member, list[str]]]:
        """
        All members ordered by email, each paired with its roles (one query each).
        """
        members = list((await db.execute(select(Member).order_by(Member.email))).scalars().all())
        if not members:
            return []

        rows = await db.execute(
            select(MemberRole.member_id, MemberRole.role)
            .where(MemberRole.member_id.in_([m.id for m in members]))
            .order_by(MemberRole.role)
        )
        roles: dict[int, list[str]] = {}
        for member_id, role in rows.all():
            roles.setdefault(member_id, []).append(role)

        return [(member, roles.get(member.id, [])) for member in members]

    @staticmethod
    async def set_admin(db: AsyncSession, actor_id: int, target_id: int, enabled: bool) -> list[str]:
        """
        Grant or revoke the ADMIN role. A member may not change their own roles.
        """
        if actor_id == target_id:
            raise ValidationError("Cannot change own role", code="CANNOT_CHANGE_SELF_ROLE")

        target = await db.get(Member, target_id)
        if target is None:
            raise NotFoundError("Member not found", code="MEMBER_NOT_FOUND")

        roles = await AuthService.get_roles(db, target_id)

        if enabled and ADMIN_ROLE not in roles:
            db.add(MemberRole(member_id=target_id, role=ADMIN_ROLE))
        elif not enabled and ADMIN_ROLE in roles:
            await db.execute(
                delete(MemberRole).where(MemberRole.member_id == target_id, MemberRole.role == ADMIN_ROLE)
            )
        await db.commit()

        logger.info(
            "Admin role changed",
            extra={"actor_id": actor_id, "user_id": target_id, "enabled": enabled}
        )
        return await AuthService.get_roles(db, target_id)
