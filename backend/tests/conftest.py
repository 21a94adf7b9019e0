"""
UniConnect Portal - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, Callable, Awaitable, Optional
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment before the settings object is created
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['LOG_FILE'] = ''
os.environ['LOG_LEVEL'] = 'WARNING'

from app.main import app
from app.core.database import Base, get_db
from app.core.security import get_password_hash, create_session_token
from app.models.user import User, UserRole

fake = Faker()

DEPARTMENT = "Computer Science"
OTHER_DEPARTMENT = "Mechanical Engineering"
TEST_PASSWORD = "testpassword123"

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
    """Create a fresh database for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Factory for persisted users; every user's password is TEST_PASSWORD"""
    async def _make_user(
        role: UserRole = UserRole.STUDENT,
        department: Optional[str] = DEPARTMENT,
        **overrides
    ) -> User:
        user = User(
            email=overrides.pop('email', fake.unique.email()),
            name=overrides.pop('name', fake.name()),
            hashed_password=get_password_hash(overrides.pop('password', TEST_PASSWORD)),
            role=role,
            department=department,
            student_number=overrides.pop(
                'student_number',
                fake.unique.bothify('ST-#####') if role == UserRole.STUDENT else None
            ),
            **overrides
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def student(make_user) -> User:
    return await make_user(UserRole.STUDENT)


@pytest.fixture
async def other_student(make_user) -> User:
    return await make_user(UserRole.STUDENT)


@pytest.fixture
async def lecturer(make_user) -> User:
    return await make_user(UserRole.LECTURER)


@pytest.fixture
async def admin_user(make_user) -> User:
    return await make_user(UserRole.ADMIN, department=None)


def headers_for(user: User) -> dict:
    """Bearer header carrying a session token for ``user``"""
    token = create_session_token(str(user.id), user.role.value)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def auth_headers_for():
    """Build auth headers for any user created inside a test"""
    return headers_for


@pytest.fixture
def student_headers(student: User) -> dict:
    return headers_for(student)


@pytest.fixture
def other_student_headers(other_student: User) -> dict:
    return headers_for(other_student)


@pytest.fixture
def lecturer_headers(lecturer: User) -> dict:
    return headers_for(lecturer)


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return headers_for(admin_user)


@pytest.fixture
def signup_data() -> dict:
    """Signup payload for a new student"""
    return {
        'name': fake.name(),
        'email': fake.unique.email(),
        'password': 'SecurePass123',
        'role': 'student',
        'department': DEPARTMENT,
        'student_id': fake.unique.bothify('ST-#####'),
    }
