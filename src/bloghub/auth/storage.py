# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Durable key-value backends for the credential and session stores.

Values are opaque strings. A backend only has to make single ``get``/``set``/
``delete`` calls atomic; read-modify-write sequences are locked by the stores.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional

from bloghub.config import Settings

log = logging.getLogger("bloghub.auth.storage")

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueBackend:
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryBackend(KeyValueBackend):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class FileBackend(KeyValueBackend):
    """One UTF-8 file per key inside ``directory``."""

    def __init__(self, directory: Path):
        self.directory = Path(directory).resolve()
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key or ""):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / key

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            raw = path.read_bytes()
            aside = self.directory / f"{key}.quarantine.bin"
            aside.write_bytes(raw)
            log.warning("Undecodable content in %s, original bytes copied to %s", path, aside)
            return raw.decode("utf-8", errors="replace")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        fd, tmp = tempfile.mkstemp(prefix=f".{key}.", dir=str(self.directory))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp, path)
        except BaseException:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass
            raise

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass


def backend_from_settings(settings: Settings) -> KeyValueBackend:
    if settings.state_dir is not None:
        log.debug("Using file backend at %s", settings.state_dir)
        return FileBackend(settings.state_dir)
    return MemoryBackend()
