from .unit_of_work import UnitOfWork
from .password_hasher import PasswordHasher
from .token_service import TokenService, TokenClaims
from .generation_service import (
    GenerationService,
    GeneratedContent,
    GeneratedVideo,
    InlineImage,
)

__all__ = [
    "UnitOfWork",
    "PasswordHasher",
    "TokenService",
    "TokenClaims",
    "GenerationService",
    "GeneratedContent",
    "GeneratedVideo",
    "InlineImage",
]
