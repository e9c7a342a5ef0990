from .unit_of_work import SqlAlchemyUnitOfWork
from .database import Database
from .password_hasher import BcryptPasswordHasher
from .token_service import JwtTokenService
from .generation_service import GeminiGenerationService

__all__ = [
    "SqlAlchemyUnitOfWork",
    "Database",
    "BcryptPasswordHasher",
    "JwtTokenService",
    "GeminiGenerationService",
]
