"""Password Hasher Interface"""

from abc import ABC, abstractmethod


class PasswordHasher(ABC):
    @abstractmethod
    def hash(self, password: str) -> str:
        """Return a salted hash of the password"""
        pass

    @abstractmethod
    def verify(self, password: str, hashed: str) -> bool:
        """Check a password against a stored hash"""
        pass
