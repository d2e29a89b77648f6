"""
SOC Portal - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, Dict
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['TESTING'] = 'true'
os.environ['ENVIRONMENT'] = 'test'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['SOC_SESSION_TIMEOUT_MINUTES'] = '15'
os.environ['TELEGRAM_BOT_TOKEN'] = ''
os.environ['TELEGRAM_CHAT_ID'] = ''

from soc_portal.main import app
from soc_portal.core.database import Base, get_db
from soc_portal.core.security import get_password_hash
from soc_portal.models.admin import AdminInfo, AccountStatus
from soc_portal.models.user import UserInfo
from soc_portal.models.login_tracker import UserLoginTracker
from soc_portal.modules.auth.dependencies import get_welcome_cache
from soc_portal.services.alert_service import get_alert_service

from tests.mocks.mock_alerts import MockAlertService
from tests.mocks.factories import (
    ADMIN_PASSWORD,
    make_user,
    session_cookie_values,
    set_client_cookies,
)

fake = Faker()

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def alerts() -> MockAlertService:
    return MockAlertService()


@pytest.fixture
async def client(db_session: AsyncSession, alerts: MockAlertService) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database and alert overrides"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_alert_service] = lambda: alerts
    get_welcome_cache().clear()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def admin_account(db_session: AsyncSession) -> AdminInfo:
    """Create an active admin"""
    admin = AdminInfo(
        soc_portal_id='A01SOCP',
        email=fake.unique.email().lower(),
        password=get_password_hash(ADMIN_PASSWORD),
        first_name=fake.first_name(),
        last_name=fake.last_name(),
        short_name='ADM',
        role_type='Super Admin',
        status=AccountStatus.ACTIVE.value,
    )
    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)
    return admin


@pytest.fixture
async def user_account(db_session: AsyncSession) -> UserInfo:
    """Create an active SOC user"""
    user = make_user()
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def teammate_account(db_session: AsyncSession) -> UserInfo:
    """Second active SOC user (shift exchange partner)"""
    user = make_user(soc_portal_id='U02SOCP', short_name='BOB')
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def admin_cookies(admin_account: AdminInfo) -> Dict[str, str]:
    return session_cookie_values(admin_account, 'admin')


@pytest.fixture
def user_cookies(user_account: UserInfo) -> Dict[str, str]:
    return session_cookie_values(user_account, 'user')


@pytest.fixture
def admin_client(client: AsyncClient, admin_cookies: Dict[str, str]) -> AsyncClient:
    """Client carrying a live admin session"""
    set_client_cookies(client, admin_cookies)
    return client


@pytest.fixture
def user_client(client: AsyncClient, user_cookies: Dict[str, str]) -> AsyncClient:
    """Client carrying a live user session"""
    set_client_cookies(client, user_cookies)
    return client


@pytest.fixture
async def first_login_tracker(db_session: AsyncSession, user_account: UserInfo) -> UserLoginTracker:
    tracker = UserLoginTracker(
        soc_portal_id=user_account.soc_portal_id,
        total_login_count=1,
        current_login_status='Active',
        welcome_shown=False,
    )
    db_session.add(tracker)
    await db_session.commit()
    return tracker
