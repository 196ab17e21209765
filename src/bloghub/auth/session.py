# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import threading
from typing import Optional

from itsdangerous import BadData, URLSafeSerializer

from bloghub.auth.records import FORMAT_VERSION, RecordError, Session
from bloghub.auth.storage import KeyValueBackend
from bloghub.errors import MissingSecretKey

log = logging.getLogger("bloghub.auth.session")

DEFAULT_SESSION_KEY = "bloghub.session"
DEFAULT_SALT = "bloghub.session.v1"


class SessionStore:
    """Single slot holding the signed, secret-free current session."""

    def __init__(
        self,
        backend: KeyValueBackend,
        secret_key: Optional[str],
        *,
        key: str = DEFAULT_SESSION_KEY,
        salt: str = DEFAULT_SALT,
    ):
        if not secret_key:
            raise MissingSecretKey("Missing BLOGHUB_SECRET_KEY (or SECRET_KEY) in environment")
        self.backend = backend
        self.key = key
        self._serializer = URLSafeSerializer(secret_key=secret_key, salt=salt)
        self._lock = threading.Lock()

    def save(self, session: Session) -> None:
        payload = {"v": FORMAT_VERSION, **session.to_dict()}
        token = self._serializer.dumps(payload)
        with self._lock:
            self.backend.set(self.key, token)

    def load(self) -> Optional[Session]:
        """Return the persisted session, discarding it if it cannot be trusted."""
        with self._lock:
            token = self.backend.get(self.key)
            if not token:
                return None
            try:
                data = self._serializer.loads(token.strip())
                if not isinstance(data, dict) or data.get("v") != FORMAT_VERSION:
                    raise RecordError(f"unsupported session format {data.get('v') if isinstance(data, dict) else data!r}")
                return Session.from_dict(data)
            except (BadData, RecordError) as e:
                log.warning("Discarding stored session: %s", e)
                self.backend.delete(self.key)
                return None

    def clear(self) -> None:
        with self._lock:
            self.backend.delete(self.key)
