# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication core.

This package provides:
- Account and session records with a versioned persisted format
- Password hashing/verification (argon2)
- Credential store and signed single-slot session store (itsdangerous)
- Account registry, authenticator and the session manager tying them together
"""
