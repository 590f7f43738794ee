"""User repository - Database operations for users, roles and clients"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ... import models
from ...shared.validators import to_naive_utc
from .entities import Client, Role, User
from .interfaces import IClientRepository, IRoleRepository, IUserRepository


class RoleRepository(IRoleRepository):
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, role_id: str) -> Optional[Role]:
        row = self.db.query(models.Role).filter(models.Role.id == role_id).first()
        return Role(id=row.id, name=row.name, description=row.description) if row else None

    def find_by_name(self, name: str) -> Optional[Role]:
        row = self.db.query(models.Role).filter(models.Role.name == name).first()
        return Role(id=row.id, name=row.name, description=row.description) if row else None


class UserRepository(IUserRepository):
    """Repository for user database operations"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_domain(row: models.User) -> User:
        return User(
            id=row.id,
            role_id=row.role_id,
            name=row.name,
            email=row.email,
            phone=row.phone,
            password=row.password,
            is_active=row.is_active,
            profile_picture=row.profile_picture,
            role_name=row.role.name if row.role else None,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _query(self):
        return self.db.query(models.User).options(joinedload(models.User.role))

    def find_by_id(self, user_id: str) -> Optional[User]:
        row = self._query().filter(models.User.id == user_id).first()
        return self._to_domain(row) if row else None

    def find_by_email(self, email: str) -> Optional[User]:
        row = self._query().filter(models.User.email == email.strip().lower()).first()
        return self._to_domain(row) if row else None

    def exists_by_email(self, email: str) -> bool:
        return (
            self.db.query(models.User.id).filter(models.User.email == email.strip().lower()).first()
            is not None
        )

    def save(self, user: User) -> User:
        data = user.to_persistence()
        data["created_at"] = to_naive_utc(data["created_at"])
        data["updated_at"] = to_naive_utc(data["updated_at"])
        self.db.add(models.User(**data))
        self.db.commit()
        return self.find_by_id(user.id)

    def update(self, user: User) -> User:
        row = self.db.query(models.User).filter(models.User.id == user.id).first()
        row.name = user.name
        row.phone = user.phone
        row.password = user.password
        row.is_active = user.is_active
        row.profile_picture = user.profile_picture
        row.updated_at = to_naive_utc(user.updated_at)
        self.db.commit()
        return self.find_by_id(user.id)


class ClientRepository(IClientRepository):
    """Repository for client profiles"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, client_id: str) -> Optional[Client]:
        row = self.db.query(models.Client).filter(models.Client.id == client_id).first()
        return Client(id=row.id, user_id=row.user_id, preferences=row.preferences) if row else None

    def find_by_user_id(self, user_id: str) -> Optional[Client]:
        row = self.db.query(models.Client).filter(models.Client.user_id == user_id).first()
        return Client(id=row.id, user_id=row.user_id, preferences=row.preferences) if row else None

    def save(self, client: Client) -> Client:
        self.db.add(models.Client(id=client.id, user_id=client.user_id, preferences=client.preferences))
        self.db.commit()
        return client


__all__ = ["RoleRepository", "UserRepository", "ClientRepository"]
