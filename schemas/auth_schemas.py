from pydantic import BaseModel, EmailStr, field_validator
import re


class AuthContext(BaseModel):
    """Identity resolved from the bearer token for the current request."""
    user_id: int
    email: str
    roles: list[str]


class Token(BaseModel):
    email: str
    access_token: str
    refresh_token: str
    token_type: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str


class JoinRequest(BaseModel):
    email: EmailStr
    password: str
    nickname: str | None = None

    @field_validator('password')
    @classmethod
    def validate_password(cls, value):
        """
        Password must be at least 8 characters and contain:
        - At least one letter
        - At least one digit
        """
        if len(value) < 8:
            raise ValueError('Password must be at least 8 characters')

        if not re.search(r'[A-Za-z]', value):
            raise ValueError('Password must contain at least one letter')

        if not re.search(r'\d', value):
            raise ValueError('Password must contain at least one digit')

        return value

    @field_validator('nickname')
    @classmethod
    def default_nickname(cls, value):
        if value is None or not value.strip():
            return "USER"
        return value.strip()


class JoinResponse(BaseModel):
    result: str
    id: int
    email: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str

    @field_validator('refresh_token')
    @classmethod
    def validate_token(cls, value):
        if not value or not value.strip():
            raise ValueError('Refresh token cannot be empty')
        return value.strip()


class MemberInfo(BaseModel):
    id: int
    email: str
    nickname: str | None
    social: bool | None
    roles: list[str]


class AdminMemberInfo(MemberInfo):
    is_admin: bool


class AdminMemberList(BaseModel):
    users: list[AdminMemberInfo]


class AdminRoleRequest(BaseModel):
    enabled: bool = False
