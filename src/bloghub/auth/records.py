# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Account and session records and their persisted shape.

Accounts are stored as ``{version: 1, users: [...]}``. Each entry carries the
argon2 hash of the password under ``secret``. Sessions are the same record
without the secret.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional

FORMAT_VERSION = 1


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"

    @classmethod
    def parse(cls, value: Any) -> "Role":
        if isinstance(value, cls):
            return value
        return cls(str(value or "").strip().lower())


class RecordError(ValueError):
    """A persisted record does not match the expected shape."""


@dataclass(frozen=True)
class Session:
    id: str
    email: str
    name: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "email": self.email, "name": self.name, "role": self.role.value}

    @classmethod
    def from_dict(cls, data: Any) -> "Session":
        fields = _require_fields(data, ("id", "email", "name", "role"))
        return cls(
            id=fields["id"],
            email=fields["email"],
            name=fields["name"],
            role=_parse_role(fields["role"]),
        )


@dataclass(frozen=True)
class AccountRecord:
    id: str
    email: str
    name: str
    role: Role
    secret: str

    def to_session(self) -> Session:
        return Session(id=self.id, email=self.email, name=self.name, role=self.role)

    def to_dict(self) -> Dict[str, str]:
        out = asdict(self)
        out["role"] = self.role.value
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "AccountRecord":
        fields = _require_fields(data, ("id", "email", "name", "role", "secret"))
        return cls(
            id=fields["id"],
            email=fields["email"],
            name=fields["name"],
            role=_parse_role(fields["role"]),
            secret=fields["secret"],
        )


@dataclass(frozen=True)
class BootstrapAccount:
    id: str
    email: str
    name: str
    role: Role
    password: str

    def to_session(self) -> Session:
        return Session(id=self.id, email=self.email, name=self.name, role=self.role)


# Accepted even when absent from the credential store, for deployments that
# predate the store.
BOOTSTRAP_ACCOUNT = BootstrapAccount(
    id="1",
    email="admin@bloghub.com",
    name="Admin User",
    role=Role.ADMIN,
    password="admin123",
)


def _parse_role(value: Any) -> Role:
    try:
        return Role.parse(value)
    except ValueError:
        raise RecordError(f"Unknown role: {value!r}") from None


def _require_fields(data: Any, names) -> Dict[str, str]:
    if not isinstance(data, dict):
        raise RecordError(f"Expected a mapping, got {type(data).__name__}")
    out: Dict[str, str] = {}
    for name in names:
        value: Optional[Any] = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise RecordError(f"Missing field: {name}")
        if not isinstance(value, (str, int)):
            raise RecordError(f"Field {name} must be a string")
        out[name] = str(value)
    return out
