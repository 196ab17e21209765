# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Account registry: creates accounts and applies the uniqueness policy."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from bloghub.auth.passwords import hash_password
from bloghub.auth.records import AccountRecord, Role, Session
from bloghub.auth.session import SessionStore
from bloghub.auth.users import CredentialStore
from bloghub.errors import DuplicateEmailError, InvalidInputError

log = logging.getLogger("bloghub.auth.registry")


def _require(value: str, field: str) -> str:
    # Stored exactly as given; email is a case- and whitespace-sensitive lookup key.
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{field} is required")
    return value


class AccountRegistry:
    def __init__(
        self,
        credentials: CredentialStore,
        sessions: SessionStore,
        *,
        registration_role: Role = Role.ADMIN,
        unique_emails: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        self.credentials = credentials
        self.sessions = sessions
        self.registration_role = Role.parse(registration_role)
        self.unique_emails = unique_emails
        self._clock = clock
        self._last_id = 0
        self._lock = threading.RLock()

    def _next_id(self) -> str:
        # Millisecond clock, strictly increasing and never reusing a stored id.
        taken = self.credentials.ids()
        candidate = max(int(self._clock() * 1000), self._last_id + 1)
        while str(candidate) in taken:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    def create_account(self, name: str, email: str, secret: str, role: Optional[Role] = None) -> AccountRecord:
        """Store a new account without touching the current session."""
        name = _require(name, "name")
        email = _require(email, "email")
        if not isinstance(secret, str) or not secret:
            raise InvalidInputError("password is required")
        role = Role.parse(role) if role is not None else self.registration_role

        with self._lock:
            if self.unique_emails and self.credentials.exists(email):
                raise DuplicateEmailError(email)
            record = AccountRecord(
                id=self._next_id(),
                email=email,
                name=name,
                role=role,
                secret=hash_password(secret),
            )
            self.credentials.put(record)
        log.info("Registered account %s with role %s", record.id, record.role.value)
        return record

    def register(self, name: str, email: str, secret: str) -> Session:
        record = self.create_account(name, email, secret)
        session = record.to_session()
        self.sessions.save(session)
        return session
