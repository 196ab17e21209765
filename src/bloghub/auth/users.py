# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential store: durable list of account records.

The collection lives under a single backend key as a versioned YAML document.
Unreadable documents and invalid entries are moved aside to
``<key>.quarantine`` instead of being silently dropped.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, List, Optional, Set, Tuple

import yaml

from bloghub.auth.passwords import hash_password, verify_password
from bloghub.auth.records import (
    BOOTSTRAP_ACCOUNT,
    FORMAT_VERSION,
    AccountRecord,
    BootstrapAccount,
    RecordError,
)
from bloghub.auth.storage import KeyValueBackend

log = logging.getLogger("bloghub.auth.users")

DEFAULT_USERS_KEY = "bloghub.users"
# Oldest quarantine entries are dropped beyond this many.
MAX_QUARANTINE_ENTRIES = 20


def bootstrap_record(account: BootstrapAccount = BOOTSTRAP_ACCOUNT) -> AccountRecord:
    return AccountRecord(
        id=account.id,
        email=account.email,
        name=account.name,
        role=account.role,
        secret=hash_password(account.password),
    )


class CredentialStore:
    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        key: str = DEFAULT_USERS_KEY,
        bootstrap: BootstrapAccount = BOOTSTRAP_ACCOUNT,
    ):
        self.backend = backend
        self.key = key
        self.quarantine_key = f"{key}.quarantine"
        self.bootstrap = bootstrap
        self._lock = threading.RLock()
        self._cache: Tuple[Optional[str], List[AccountRecord]] = (None, [])

    # --- lifecycle ---

    def initialize(self) -> bool:
        """Seed the bootstrap account if the collection was never written.

        Returns True when seeding happened.
        """
        with self._lock:
            if self.backend.get(self.key) is not None:
                return False
            self._write([bootstrap_record(self.bootstrap)])
            log.info("Initialised credential store with bootstrap account %s", self.bootstrap.email)
            return True

    def ensure_initialized(self) -> None:
        self.initialize()

    # --- queries ---

    def all(self) -> List[AccountRecord]:
        with self._lock:
            self.ensure_initialized()
            return self._read()

    def find(self, email: str, secret: str) -> Optional[AccountRecord]:
        for record in self.all():
            if record.email == email and verify_password(record.secret, secret):
                return record
        return None

    def find_by_email(self, email: str) -> List[AccountRecord]:
        return [r for r in self.all() if r.email == email]

    def exists(self, email: str) -> bool:
        return bool(self.find_by_email(email))

    def ids(self) -> Set[str]:
        return {r.id for r in self.all()}

    # --- mutation ---

    def put(self, record: AccountRecord) -> None:
        with self._lock:
            records = self.all()
            records.append(record)
            self._write(records)
            log.info("Stored account %s (%s)", record.id, record.role.value)

    # --- persistence ---

    def _write(self, records: List[AccountRecord]) -> None:
        doc = {"version": FORMAT_VERSION, "users": [r.to_dict() for r in records]}
        raw = yaml.safe_dump(doc, sort_keys=False, allow_unicode=True)
        self.backend.set(self.key, raw)
        self._cache = (raw, list(records))

    def _read(self) -> List[AccountRecord]:
        raw = self.backend.get(self.key)
        if raw is None:
            return []
        cached_raw, cached = self._cache
        if cached_raw is not None and raw == cached_raw:
            return list(cached)

        try:
            doc = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            return self._reset_unreadable(raw, f"unparsable users document: {e}")

        if isinstance(doc, list):
            return self._migrate_legacy(raw, doc)
        if not isinstance(doc, dict) or not isinstance(doc.get("users"), list):
            return self._reset_unreadable(raw, "users document has no 'users' list")
        if doc.get("version") != FORMAT_VERSION:
            return self._reset_unreadable(raw, f"unsupported users format version {doc.get('version')!r}")

        records: List[AccountRecord] = []
        rejected: List[Any] = []
        for entry in doc["users"]:
            try:
                records.append(AccountRecord.from_dict(entry))
            except RecordError as e:
                log.warning("Skipping invalid account entry: %s", e)
                rejected.append(entry)

        if rejected:
            self._quarantine(yaml.safe_dump(rejected, sort_keys=False), "invalid account entries")
            self._write(records)
        else:
            self._cache = (raw, list(records))
        return records

    def _migrate_legacy(self, raw: str, entries: List[Any]) -> List[AccountRecord]:
        """Upgrade an unversioned list whose entries carry a plaintext ``password``."""
        records: List[AccountRecord] = []
        rejected: List[Any] = []
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("password"):
                rejected.append(entry)
                continue
            data = {k: v for k, v in entry.items() if k != "password"}
            data["secret"] = hash_password(str(entry["password"]))
            try:
                records.append(AccountRecord.from_dict(data))
            except RecordError as e:
                log.warning("Skipping invalid legacy account entry: %s", e)
                rejected.append({k: v for k, v in entry.items() if k != "password"})

        if rejected:
            self._quarantine(yaml.safe_dump(rejected, sort_keys=False), "invalid legacy account entries")
        log.warning("Migrated %d legacy account(s) to format version %d", len(records), FORMAT_VERSION)
        self._write(records)
        return records

    def _reset_unreadable(self, raw: str, reason: str) -> List[AccountRecord]:
        log.warning("Discarding credential store contents (%s); moved to %s", reason, self.quarantine_key)
        self._quarantine(raw, reason)
        self._write([])
        return []

    def _quarantine(self, content: str, reason: str) -> None:
        existing = self.backend.get(self.quarantine_key)
        entries: List[Any] = []
        if existing is not None:
            try:
                loaded = yaml.safe_load(existing)
            except yaml.YAMLError:
                loaded = None
            if isinstance(loaded, list):
                entries = loaded
        entries.append({"reason": reason, "content": content})
        entries = entries[-MAX_QUARANTINE_ENTRIES:]
        self.backend.set(self.quarantine_key, yaml.safe_dump(entries, sort_keys=False, allow_unicode=True))
