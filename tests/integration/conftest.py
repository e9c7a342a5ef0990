from contextlib import asynccontextmanager
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config import ApplicationConfig
from libs.result import Result, Return
from src.adapter.repositories import (
    SqlAlchemyCreditTransactionRepository,
    SqlAlchemyUserAccountRepository,
    SqlAlchemyUserRepository,
)
from src.adapter.services.database import Database
from src.adapter.services.password_hasher import BcryptPasswordHasher
from src.adapter.services.token_service import JwtTokenService
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.generation_service import (
    GeneratedContent,
    GeneratedVideo,
    GenerationService,
    InlineImage,
)
from src.app.use_cases.ledger.apply_credit_delta import ApplyCreditDelta
from src.app.use_cases.user import RegisterUser, RegisterUserCommandDTO
from src.depends import get_generation_service, get_password_hasher

JWT_TEST_SECRET = "integration-test-secret-key-0123456789"
TEST_PASSWORD = "Str0ng!Pass"


class IntegrationConfig(ApplicationConfig):
    DB_URI = "sqlite+aiosqlite://"
    AUTO_CREATE_TABLES = False
    ENABLE_LOGGING_MIDDLEWARE = False
    LOG_LEVEL = "WARNING"
    JWT_SECRET = JWT_TEST_SECRET
    REQUIRE_EMAIL_VERIFICATION = False
    PAYMENT_GATEWAY_URL = "https://pay.test/pay"
    PAYMENT_CALLBACK_SECRET = None
    ENABLE_PAYMENT_SIMULATION = True


class FakeGenerationService(GenerationService):
    """Records calls and answers with preset results"""

    def __init__(self):
        self.image_results = []
        self.video_result: Optional[Result] = None
        self.calls = []

    async def edit_image(
        self,
        image_base64: str,
        mime_type: str,
        prompt: str,
        mask_base64: Optional[str] = None,
        secondary_image: Optional[InlineImage] = None,
    ) -> Result[GeneratedContent]:
        self.calls.append(("edit_image", prompt))
        if self.image_results:
            return self.image_results.pop(0)
        return Return.ok(GeneratedContent(image_url="data:image/png;base64,RURJVEVE"))

    async def generate_video(
        self,
        prompt: str,
        image: Optional[InlineImage] = None,
        aspect_ratio: str = "16:9",
    ) -> Result[GeneratedVideo]:
        self.calls.append(("generate_video", prompt))
        if self.video_result is not None:
            return self.video_result
        return Return.ok(GeneratedVideo(video_url="https://videos.test/generated.mp4"))


@pytest_asyncio.fixture(scope="function")
async def database(tmp_path):
    """File-backed SQLite database, fresh per test"""
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'studio_test.db'}")
    await database.create_all()

    yield database

    await database.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def password_hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def token_service():
    return JwtTokenService(JWT_TEST_SECRET)


@pytest.fixture
def generation_service():
    return FakeGenerationService()


@pytest.fixture
def ledger(db_session):
    return ApplyCreditDelta(
        SqlAlchemyUnitOfWork(db_session),
        SqlAlchemyUserAccountRepository(db_session),
        SqlAlchemyCreditTransactionRepository(db_session),
    )


@pytest.fixture
def register_user(db_session, ledger, password_hasher, token_service):
    """Register a user through RegisterUser and return its id"""

    async def _register(username: str = "alice", phone: Optional[str] = None) -> str:
        use_case = RegisterUser(
            SqlAlchemyUnitOfWork(db_session),
            SqlAlchemyUserRepository(db_session),
            SqlAlchemyUserAccountRepository(db_session),
            ledger,
            password_hasher,
            token_service,
        )
        result = await use_case.execute(
            RegisterUserCommandDTO(
                username=username,
                email=f"{username}@example.com",
                password=TEST_PASSWORD,
                phone=phone,
            )
        )
        assert result.is_ok(), result.error
        return result.value.user.id

    return _register


@pytest.fixture
def client_factory(database, generation_service, password_hasher):
    """Build an API client; keyword arguments override IntegrationConfig"""
    from src.api.app import create_app

    @asynccontextmanager
    async def _client(**overrides):
        config = type("OverriddenConfig", (IntegrationConfig,), overrides)
        app = create_app(config)
        app.state.database = database
        app.dependency_overrides[get_generation_service] = lambda: generation_service
        app.dependency_overrides[get_password_hasher] = lambda: password_hasher

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac

    return _client


@pytest_asyncio.fixture
async def client(client_factory):
    async with client_factory() as ac:
        yield ac


@pytest.fixture
def signup(client):
    """Register through the API and return (user_id, auth headers)"""

    async def _signup(username: str = "alice"):
        response = await client.post(
            "/api/users/register",
            json={"username": username, "email": f"{username}@example.com", "password": TEST_PASSWORD},
        )
        assert response.status_code == 201, response.text
        data = response.json()
        return data["user"]["id"], {"Authorization": f"Bearer {data['token']}"}

    return _signup
