# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Union

from bloghub.auth.records import Role, Session
from bloghub.errors import NotAuthenticated, PermissionDenied

if TYPE_CHECKING:
    from bloghub.auth.manager import SessionManager

ROLE_ORDER = {"user": 0, "admin": 1}


def _rank(role: Union[Role, str, None]) -> int:
    value = role.value if isinstance(role, Role) else (role or "user")
    return ROLE_ORDER.get(str(value).strip().lower(), 0)


def has_role(session: Optional[Session], min_role: Union[Role, str]) -> bool:
    if session is None:
        return False
    return _rank(session.role) >= _rank(min_role)


def require_user(manager: "SessionManager") -> Session:
    s = manager.current_session()
    if s is None:
        raise NotAuthenticated("Login required")
    return s


def require_role(min_role: Union[Role, str]):
    def _check(manager: "SessionManager") -> Session:
        s = require_user(manager)
        if not has_role(s, min_role):
            raise PermissionDenied(s.role.value, str(getattr(min_role, "value", min_role)))
        return s

    return _check
