# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Environment-driven settings.

All knobs are read from ``BLOGHUB_*`` environment variables so a deployment
can be configured without touching code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_TRUTHY = {"1", "true", "yes", "y"}


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    secret_key: Optional[str] = None
    session_salt: str = "bloghub.session.v1"
    state_dir: Optional[Path] = None
    key_prefix: str = "bloghub"
    registration_role: str = "admin"
    unique_emails: bool = False
    log_level: str = "WARNING"

    @property
    def users_key(self) -> str:
        return f"{self.key_prefix}.users"

    @property
    def session_key(self) -> str:
        return f"{self.key_prefix}.session"


def load_settings() -> Settings:
    secret = os.getenv("BLOGHUB_SECRET_KEY") or os.getenv("SECRET_KEY") or None
    state_dir = os.getenv("BLOGHUB_STATE_DIR", "").strip()
    return Settings(
        secret_key=secret,
        session_salt=os.getenv("BLOGHUB_SESSION_SALT", "bloghub.session.v1"),
        state_dir=Path(state_dir).resolve() if state_dir else None,
        key_prefix=os.getenv("BLOGHUB_KEY_PREFIX", "bloghub").strip() or "bloghub",
        registration_role=(os.getenv("BLOGHUB_REGISTRATION_ROLE", "admin").strip().lower() or "admin"),
        unique_emails=_flag("BLOGHUB_UNIQUE_EMAILS"),
        log_level=os.getenv("BLOGHUB_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
    )
