"""Token Service Interface

Issues and verifies the bearer tokens used by the HTTP API.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from pydantic import BaseModel
from libs.result import Result
from src.domain.user import User


class TokenClaims(BaseModel):
    user_id: str
    username: str
    email: str
    is_verified: bool
    expires_at: datetime


class TokenService(ABC):
    @abstractmethod
    def issue(self, user: User) -> str:
        """
        Issue a signed token for the user

        Args:
            user: Authenticated user

        Returns:
            Encoded bearer token
        """
        pass

    @abstractmethod
    def decode(self, token: str) -> Result[TokenClaims]:
        """
        Verify and decode a token

        Returns:
            Result[TokenClaims]: claims, or TOKEN_EXPIRED / INVALID_TOKEN
        """
        pass
