# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Session manager: the single owner of "who is logged in".

Callers get an explicit ``SessionManager`` instance (there is no module-level
current user). ``start()`` must run once before anything else; it seeds the
credential store and restores the persisted session.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from bloghub.auth.authenticator import Authenticator
from bloghub.auth.records import Role, Session
from bloghub.auth.registry import AccountRegistry
from bloghub.auth.session import SessionStore
from bloghub.auth.storage import KeyValueBackend, backend_from_settings
from bloghub.auth.users import CredentialStore
from bloghub.config import Settings, load_settings
from bloghub.errors import DuplicateEmailError, InvalidInputError, NotInitializedError
from bloghub.permissions import has_role

log = logging.getLogger("bloghub.auth.manager")

ANONYMOUS = "anonymous"
AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str


LOGGED_OUT = Notification(title="Logged Out", description="You have been successfully logged out")


def log_notifier(notification: Notification) -> None:
    log.info("%s: %s", notification.title, notification.description)


class SessionManager:
    def __init__(
        self,
        credentials: CredentialStore,
        sessions: SessionStore,
        *,
        authenticator: Optional[Authenticator] = None,
        registry: Optional[AccountRegistry] = None,
        notifier: Callable[[Notification], None] = log_notifier,
    ):
        self.credentials = credentials
        self.sessions = sessions
        self.authenticator = authenticator or Authenticator(credentials, sessions)
        self.registry = registry or AccountRegistry(credentials, sessions)
        self.notifier = notifier
        self._lock = threading.RLock()
        self._session: Optional[Session] = None
        self._started = False
        self._initializing = False

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        *,
        backend: Optional[KeyValueBackend] = None,
        notifier: Callable[[Notification], None] = log_notifier,
    ) -> "SessionManager":
        settings = settings or load_settings()
        try:
            registration_role = Role.parse(settings.registration_role)
        except ValueError:
            raise InvalidInputError(
                f"Unknown BLOGHUB_REGISTRATION_ROLE: {settings.registration_role!r}"
            ) from None
        backend = backend if backend is not None else backend_from_settings(settings)
        credentials = CredentialStore(backend, key=settings.users_key)
        sessions = SessionStore(
            backend, settings.secret_key, key=settings.session_key, salt=settings.session_salt
        )
        registry = AccountRegistry(
            credentials,
            sessions,
            registration_role=registration_role,
            unique_emails=settings.unique_emails,
        )
        return cls(credentials, sessions, registry=registry, notifier=notifier)

    # --- lifecycle ---

    def start(self) -> Optional[Session]:
        with self._lock:
            self._initializing = True
            try:
                if self.credentials.initialize():
                    log.info("Credential store seeded on startup")
                self._session = self.sessions.load()
                self._started = True
            finally:
                self._initializing = False
            log.info("Session manager started (%s)", self.state)
            return self._session

    def restore(self) -> Optional[Session]:
        """Re-read the persisted session into memory."""
        with self._lock:
            self._require_started()
            self._session = self.sessions.load()
            return self._session

    def is_initializing(self) -> bool:
        return self._initializing

    def _require_started(self) -> None:
        if not self._started:
            raise NotInitializedError("SessionManager.start() must be called before use")

    # --- queries ---

    @property
    def state(self) -> str:
        return AUTHENTICATED if self._session is not None else ANONYMOUS

    def current_session(self) -> Optional[Session]:
        with self._lock:
            self._require_started()
            return self._session

    def is_admin(self) -> bool:
        session = self.current_session()
        return session is not None and session.role is Role.ADMIN

    def has_role(self, min_role) -> bool:
        return has_role(self.current_session(), min_role)

    # --- transitions ---

    def login(self, email: str, secret: str) -> bool:
        with self._lock:
            self._require_started()
            session = self.authenticator.login(email, secret)
            if session is None:
                return False
            self._session = session
            return True

    def register(self, name: str, email: str, secret: str) -> bool:
        with self._lock:
            self._require_started()
            try:
                session = self.registry.register(name, email, secret)
            except (InvalidInputError, DuplicateEmailError) as e:
                log.info("Registration rejected: %s", e)
                return False
            self._session = session
            return True

    def logout(self) -> None:
        with self._lock:
            self._require_started()
            self._session = None
            self.sessions.clear()
        self.notifier(LOGGED_OUT)
