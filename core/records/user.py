from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from core.records.base import pick, to_datetime, to_int

ADMIN_ROLES = ("admin", "superadmin")


@dataclass(frozen=True)
class Role:
    id: int
    name: str
    description: str = ""

    @classmethod
    def from_api(cls, data: dict | None) -> "Role | None":
        if not data:
            return None
        return cls(
            id=to_int(pick(data, "id")),
            name=pick(data, "name", default=""),
            description=pick(data, "description", default=""),
        )


@dataclass(frozen=True)
class User:
    id: int
    username: str
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    is_active: bool = True
    role_id: int | None = None
    role: Role | None = None
    created_at: datetime | None = None

    @classmethod
    def from_api(cls, data: dict) -> "User":
        return cls(
            id=to_int(pick(data, "id")),
            username=pick(data, "username", default=""),
            email=pick(data, "email", default=""),
            first_name=pick(data, "firstName", "first_name", default=""),
            last_name=pick(data, "lastName", "last_name", default=""),
            phone=pick(data, "phone", default=""),
            is_active=bool(pick(data, "isActive", "is_active", default=True)),
            role_id=to_int(pick(data, "roleId", "role_id")),
            role=Role.from_api(pick(data, "role")),
            created_at=to_datetime(pick(data, "createdAt", "created_at")),
        )

    @property
    def full_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.username or self.email

    @property
    def role_name(self) -> str:
        return self.role.name if self.role else ""

    @property
    def is_admin(self) -> bool:
        return self.role_name in ADMIN_ROLES

    @property
    def is_superadmin(self) -> bool:
        return self.role_name == "superadmin"

    def to_session(self) -> dict:
        """JSON-safe snapshot kept in the signed session cookie."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "isActive": self.is_active,
            "roleId": self.role_id,
            "role": (
                {"id": self.role.id, "name": self.role.name, "description": self.role.description}
                if self.role else None
            ),
        }
