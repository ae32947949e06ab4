import pytest
from sqlalchemy import select, func
from core.exceptions import AuthError, ValidationError, NotFoundError
from models.members import Member
from schemas.auth_schemas import JoinRequest
from services.auth_service import AuthService


async def test_join_creates_member_with_user_role(session):
    member = await AuthService.join(JoinRequest(email="new@example.com", password="SecurePass123"), session)

    assert member.id is not None
    assert member.nickname == "USER"
    assert member.hashed_password != "SecurePass123"
    assert await AuthService.get_roles(session, member.id) == ["USER"]


async def test_join_duplicate_email(session):
    request = JoinRequest(email="dup@example.com", password="SecurePass123", nickname="dup")
    await AuthService.join(request, session)

    with pytest.raises(ValidationError) as exc_info:
        await AuthService.join(request, session)

    assert exc_info.value.code == "EMAIL_ALREADY_REGISTERED"


async def test_authenticate_success(session, member):
    authenticated = await AuthService.authenticate("member@example.com", "TestPassword123!", session)
    assert authenticated.id == member.id


async def test_authenticate_wrong_password(session, member):
    with pytest.raises(AuthError) as exc_info:
        await AuthService.authenticate("member@example.com", "WrongPassword00", session)
    assert exc_info.value.code == "ERROR_LOGIN"


async def test_authenticate_inactive_member(session, member_factory):
    await member_factory("sleepy@example.com", is_active=False)

    with pytest.raises(AuthError):
        await AuthService.authenticate("sleepy@example.com", "TestPassword123!", session)


async def test_get_active_member_by_id_skips_inactive(session, member_factory):
    inactive = await member_factory("gone@example.com", is_active=False)

    assert await AuthService.get_active_member_by_id(session, inactive.id) is None


async def test_set_admin_grants_and_revokes(session, super_admin, member):
    roles = await AuthService.set_admin(session, super_admin.id, member.id, True)
    assert roles == ["ADMIN", "USER"]

    # Granting twice is harmless
    roles = await AuthService.set_admin(session, super_admin.id, member.id, True)
    assert roles == ["ADMIN", "USER"]

    roles = await AuthService.set_admin(session, super_admin.id, member.id, False)
    assert roles == ["USER"]


async def test_set_admin_on_self_is_rejected(session, super_admin):
    with pytest.raises(ValidationError) as exc_info:
        await AuthService.set_admin(session, super_admin.id, super_admin.id, True)
    assert exc_info.value.code == "CANNOT_CHANGE_SELF_ROLE"


async def test_set_admin_unknown_member(session, super_admin):
    with pytest.raises(NotFoundError):
        await AuthService.set_admin(session, super_admin.id, 9999, True)


async def test_list_members_orders_by_email(session, member, other_member, super_admin):
    members = await AuthService.list_members(session)

    assert [m.email for m, _ in members] == ["member@example.com", "other@example.com", "root@example.com"]
    roles = {m.email: r for m, r in members}
    assert roles["root@example.com"] == ["SUPER_ADMIN", "USER"]


async def test_join_race_on_same_email_is_validation_error(session, member, monkeypatch):
    """Both joins pass the existence check; the unique email constraint decides."""
    async def nobody(db, email):
        return None

    monkeypatch.setattr(AuthService, "get_member_by_email", staticmethod(nobody))

    with pytest.raises(ValidationError) as exc_info:
        await AuthService.join(JoinRequest(email="member@example.com", password="SecurePass123"), session)

    assert exc_info.value.code == "EMAIL_ALREADY_REGISTERED"

    count = await session.scalar(select(func.count()).select_from(Member).where(Member.email == "member@example.com"))
    assert count == 1
