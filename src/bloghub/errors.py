# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations


class BloghubError(Exception):
    """Base class for identity core errors."""


class NotInitializedError(BloghubError, RuntimeError):
    """The session manager was used before ``start()``."""


class MissingSecretKey(BloghubError, RuntimeError):
    pass


class InvalidInputError(BloghubError, ValueError):
    pass


class DuplicateEmailError(BloghubError, ValueError):
    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}")
        self.email = email


class NotAuthenticated(BloghubError):
    pass


class PermissionDenied(BloghubError):
    def __init__(self, role: str, min_role: str):
        super().__init__(f"Role '{role}' is below required role '{min_role}'")
        self.role = role
        self.min_role = min_role
