import os

# Must be set before anything imports core.config
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("ALGORITHM", "HS256")
os.environ.setdefault("LOG_DIR", "logs")

import pytest
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool

from main import app
from core.database import Base
from models.members import Member
from models.member_roles import MemberRole
from models.products import Product
from models.product_images import ProductImage
from services.token_service import TokenService
from utils.deps import get_db
from utils.hashing import get_password_hash

SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

TEST_PASSWORD = "TestPassword123!"

# NullPool: every test runs on its own event loop, connections must not be reused
engine = create_async_engine(SQLALCHEMY_DATABASE_URL, poolclass=NullPool)

TestingSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False
)


@pytest.fixture
async def session() -> AsyncGenerator[AsyncSession, None]:
    """
    Fresh, empty database for each test.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestingSessionLocal() as db:
        yield db

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(session: AsyncSession):
    """
    HTTP client bound to the app, sharing the test session.
    """
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def member_factory(session: AsyncSession):
    async def create(email: str, roles=("USER",), nickname: str = "tester", is_active: bool = True) -> Member:
        member = Member(
            email=email,
            nickname=nickname,
            hashed_password=get_password_hash(TEST_PASSWORD),
            social=False,
            is_active=is_active,
        )
        session.add(member)
        await session.flush()
        session.add_all([MemberRole(member_id=member.id, role=role) for role in roles])
        await session.commit()
        return member

    return create


@pytest.fixture
def product_factory(session: AsyncSession):
    async def create(name: str = "Keyboard", price: float = 10000, images=(), is_deleted: bool = False) -> Product:
        product = Product(name=name, description=f"{name} description", price=price, is_deleted=is_deleted)
        session.add(product)
        await session.flush()
        session.add_all([
            ProductImage(product_id=product.id, bucket="product", path=path,
                         file_name=path.rsplit("/", 1)[-1], ord=index)
            for index, path in enumerate(images)
        ])
        await session.commit()
        return product

    return create


@pytest.fixture
async def member(member_factory) -> Member:
    return await member_factory("member@example.com")


@pytest.fixture
async def other_member(member_factory) -> Member:
    return await member_factory("other@example.com")


@pytest.fixture
async def admin_member(member_factory) -> Member:
    return await member_factory("admin@example.com", roles=("USER", "ADMIN"))


@pytest.fixture
async def super_admin(member_factory) -> Member:
    return await member_factory("root@example.com", roles=("USER", "SUPER_ADMIN"))


@pytest.fixture
def auth_headers():
    def build(member: Member) -> dict:
        token = TokenService.create_access_token(member.email, member.id)
        return {"Authorization": f"Bearer {token}"}

    return build
