# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""bloghub identity core: accounts, login sessions and role checks."""

__version__ = "0.1.0"
