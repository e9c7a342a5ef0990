from typing import AsyncIterator
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel.ext.asyncio.session import AsyncSession
from libs.result import Error
from src.adapter.services.database import Database
from src.adapter.services.generation_service import GeminiGenerationService
from src.adapter.services.password_hasher import BcryptPasswordHasher
from src.adapter.services.token_service import JwtTokenService
from src.api.error import ClientError
from src.app.services.generation_service import GenerationService
from src.app.services.password_hasher import PasswordHasher
from src.app.services.token_service import TokenClaims, TokenService

bearer_scheme = HTTPBearer(auto_error=False)


def get_config(request: Request):
    return request.app.state.config


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_session(database: Database = Depends(get_database)) -> AsyncIterator[AsyncSession]:
    async with database.session() as session:
        yield session


def get_token_service(config=Depends(get_config)) -> TokenService:
    return JwtTokenService(
        secret=config.JWT_SECRET,
        algorithm=config.JWT_ALGORITHM,
        expiration_hours=config.JWT_EXPIRATION_HOURS,
    )


def get_password_hasher() -> PasswordHasher:
    return BcryptPasswordHasher()


def get_generation_service(config=Depends(get_config)) -> GenerationService:
    return GeminiGenerationService(
        api_key=config.GEMINI_API_KEY,
        api_base=config.GEMINI_API_BASE,
        image_model=config.GEMINI_IMAGE_MODEL,
        video_model=config.GEMINI_VIDEO_MODEL,
        timeout=config.GENERATION_TIMEOUT_SECONDS,
        poll_interval=config.VIDEO_POLL_INTERVAL_SECONDS,
        max_polls=config.VIDEO_MAX_POLLS,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """Resolve the bearer token into claims or answer 401"""
    if not credentials or not credentials.credentials:
        raise ClientError(
            Error(code="UNAUTHORIZED", message="Authentication required"),
            status_code=401,
        )

    result = token_service.decode(credentials.credentials.strip())
    if result.is_err():
        raise ClientError(result.error, status_code=401)

    return result.value
