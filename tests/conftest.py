"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite (aiosqlite) database per test,
session, httpx client and data fixtures. Foreign keys are enabled so the
ON DELETE CASCADE behaviour matches PostgreSQL.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.models.shift import Shift, ShiftStatus
from app.models.store import Store, StoreSettings
from app.models.user import User, UserRole
from app.utils.jwt import create_access_token
from app.utils.password import hash_password

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# 요청 제한은 전용 테스트에서만 켭니다 — Rate limiting is enabled only in its own tests
settings.RATE_LIMIT_ENABLED = False


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 새 스키마를 생성합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(eng.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def create_store(db: AsyncSession, name: str, tz: str = "UTC") -> Store:
    """매장과 매장 설정을 생성합니다."""
    s = Store(name=name, address="1-2-3 Shibuya", phone="03-0000-0000")
    db.add(s)
    await db.flush()
    db.add(StoreSettings(store_id=s.id, timezone=tz))
    await db.flush()
    await db.refresh(s)
    return s


async def create_user(
    db: AsyncSession,
    store: Store,
    email: str,
    name: str,
    role: UserRole = UserRole.STAFF,
    password: str = "password123",
    **extra,
) -> User:
    """사용자를 생성합니다."""
    user = User(
        store_id=store.id,
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role.value,
        **extra,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def create_shift(
    db: AsyncSession,
    user: User,
    start: datetime,
    hours: float = 4,
    status: ShiftStatus = ShiftStatus.SCHEDULED,
) -> Shift:
    """근무를 생성합니다."""
    shift = Shift(
        user_id=user.id,
        store_id=user.store_id,
        start_time=start,
        end_time=start + timedelta(hours=hours),
        status=status.value,
    )
    db.add(shift)
    await db.flush()
    await db.refresh(shift)
    return shift


@pytest_asyncio.fixture
async def store(db: AsyncSession) -> Store:
    """테스트 매장 (시간대 UTC)."""
    return await create_store(db, "Test Store")


@pytest_asyncio.fixture
async def other_store(db: AsyncSession) -> Store:
    """다른 매장 — 매장 간 격리 검증용."""
    return await create_store(db, "Other Store")


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession, store: Store) -> User:
    """관리자 사용자를 생성합니다."""
    return await create_user(db, store, "admin@shiftboard.jp", "Test Admin", UserRole.ADMIN, "admin1234")


@pytest_asyncio.fixture
async def staff_user(db: AsyncSession, store: Store) -> User:
    """스태프 사용자를 생성합니다."""
    return await create_user(
        db, store, "staff@shiftboard.jp", "Test Staff", UserRole.STAFF, "staff1234",
        department="Kitchen", hourly_wage=1200,
    )


@pytest_asyncio.fixture
async def other_staff(db: AsyncSession, other_store: Store) -> User:
    """다른 매장의 스태프."""
    return await create_user(db, other_store, "other@shiftboard.jp", "Other Staff")


@pytest_asyncio.fixture
async def super_admin(db: AsyncSession, store: Store) -> User:
    """슈퍼 관리자."""
    return await create_user(
        db, store, "root@shiftboard.jp", "Root Admin", UserRole.ADMIN, "root12345",
        is_super_admin=True,
    )


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({
        "sub": str(user.id),
        "store": str(user.store_id),
        "role": user.role,
        "super": user.is_super_admin,
    })


@pytest.fixture
def admin_token(admin_user: User) -> str:
    return make_token(admin_user)


@pytest.fixture
def staff_token(staff_user: User) -> str:
    return make_token(staff_user)


@pytest.fixture
def super_token(super_admin: User) -> str:
    return make_token(super_admin)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def iso(value: datetime) -> str:
    """UTC ISO 8601 문자열 (Z 접미사)."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def tomorrow_at(hour: int) -> datetime:
    """내일 UTC hour시 정각."""
    base = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return base + timedelta(days=1, hours=hour)
