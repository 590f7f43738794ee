"""Repository interfaces for users, roles and client profiles"""

from abc import ABC, abstractmethod
from typing import Optional

from .entities import Client, Role, User


class IRoleRepository(ABC):
    @abstractmethod
    def find_by_id(self, role_id: str) -> Optional[Role]:
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[Role]:
        pass


class IUserRepository(ABC):
    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    def exists_by_email(self, email: str) -> bool:
        pass

    @abstractmethod
    def save(self, user: User) -> User:
        pass

    @abstractmethod
    def update(self, user: User) -> User:
        pass


class IClientRepository(ABC):
    @abstractmethod
    def find_by_id(self, client_id: str) -> Optional[Client]:
        pass

    @abstractmethod
    def find_by_user_id(self, user_id: str) -> Optional[Client]:
        pass

    @abstractmethod
    def save(self, client: Client) -> Client:
        pass


__all__ = ["IRoleRepository", "IUserRepository", "IClientRepository"]
