# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from typing import Optional

from bloghub.auth.passwords import secrets_match
from bloghub.auth.records import BOOTSTRAP_ACCOUNT, BootstrapAccount, Session
from bloghub.auth.session import SessionStore
from bloghub.auth.users import CredentialStore

log = logging.getLogger("bloghub.auth.authenticator")


class Authenticator:
    def __init__(
        self,
        credentials: CredentialStore,
        sessions: SessionStore,
        *,
        bootstrap: BootstrapAccount = BOOTSTRAP_ACCOUNT,
    ):
        self.credentials = credentials
        self.sessions = sessions
        self.bootstrap = bootstrap

    def _is_bootstrap(self, email: str, secret: str) -> bool:
        email_ok = secrets_match(self.bootstrap.email, email)
        secret_ok = secrets_match(self.bootstrap.password, secret)
        return email_ok and secret_ok

    def authenticate(self, email: str, secret: str) -> Optional[Session]:
        """Check credentials without touching the session slot."""
        if not email or not secret:
            return None
        self.credentials.ensure_initialized()
        record = self.credentials.find(email, secret)
        if record is not None:
            return record.to_session()
        if self._is_bootstrap(email, secret):
            log.info("Accepted bootstrap credentials for %s", email)
            return self.bootstrap.to_session()
        return None

    def login(self, email: str, secret: str) -> Optional[Session]:
        session = self.authenticate(email, secret)
        if session is None:
            log.info("Login failed for %s", email)
            return None
        self.sessions.save(session)
        log.info("Login succeeded for account %s", session.id)
        return session
