"""User Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.user import User


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_verification_token(self, token: str) -> Optional[User]:
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """
        Create a new user

        Raises:
            IntegrityError: If username, email or phone is already taken
        """
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        pass

    @abstractmethod
    async def delete(self, user: User) -> None:
        """Delete a user; account, transactions, payments and usages cascade"""
        pass

    @abstractmethod
    async def get_all(self) -> List[User]:
        pass
