import json

import yaml

from bloghub.auth.passwords import hash_password
from bloghub.auth.records import BOOTSTRAP_ACCOUNT, AccountRecord, Role
from bloghub.auth.users import MAX_QUARANTINE_ENTRIES, CredentialStore

KEY = "bloghub.users"


def _record(id_="10", email="a@x.com", secret="p", role=Role.USER):
    return AccountRecord(id=id_, email=email, name="A", role=role, secret=hash_password(secret))


def test_initialize_seeds_bootstrap_once(credentials, backend):
    assert credentials.initialize() is True
    assert credentials.initialize() is False
    records = credentials.all()
    assert [r.email for r in records] == [BOOTSTRAP_ACCOUNT.email]
    assert records[0].role is Role.ADMIN
    assert records[0].secret != BOOTSTRAP_ACCOUNT.password

    doc = yaml.safe_load(backend.get(KEY))
    assert doc["version"] == 1


def test_first_access_seeds(credentials):
    assert credentials.find(BOOTSTRAP_ACCOUNT.email, BOOTSTRAP_ACCOUNT.password) is not None


def test_put_and_find(credentials):
    credentials.put(_record())
    assert len(credentials.all()) == 2
    found = credentials.find("a@x.com", "p")
    assert found is not None and found.id == "10"
    assert credentials.find("a@x.com", "wrong") is None
    assert credentials.find("A@x.com", "p") is None  # emails are case-sensitive


def test_first_match_wins_on_duplicate_emails(credentials):
    credentials.put(_record(id_="10", secret="same"))
    credentials.put(_record(id_="11", secret="same"))
    assert credentials.find("a@x.com", "same").id == "10"
    assert len(credentials.find_by_email("a@x.com")) == 2
    assert credentials.exists("a@x.com")
    assert not credentials.exists("b@x.com")


def test_unparsable_document_is_quarantined(credentials, backend):
    backend.set(KEY, "{not: [valid")
    assert credentials.all() == []
    quarantined = yaml.safe_load(backend.get(KEY + ".quarantine"))
    assert quarantined[0]["content"] == "{not: [valid"
    # store keeps working afterwards
    credentials.put(_record())
    assert [r.id for r in credentials.all()] == ["10"]


def test_unknown_version_is_quarantined(credentials, backend):
    backend.set(KEY, yaml.safe_dump({"version": 99, "users": []}))
    assert credentials.all() == []
    assert backend.get(KEY + ".quarantine") is not None


def test_invalid_entries_are_skipped_and_quarantined(credentials, backend):
    good = _record().to_dict()
    doc = {"version": 1, "users": [good, {"id": "2", "email": "b@x.com"}, {**good, "id": "3", "role": "root"}]}
    backend.set(KEY, yaml.safe_dump(doc))
    records = credentials.all()
    assert [r.id for r in records] == ["10"]
    quarantined = yaml.safe_load(backend.get(KEY + ".quarantine"))
    assert len(yaml.safe_load(quarantined[0]["content"])) == 2
    # rewritten without the rejected entries
    assert len(yaml.safe_load(backend.get(KEY))["users"]) == 1


def test_legacy_plaintext_list_is_migrated(credentials, backend):
    legacy = [
        {"id": "1", "email": "admin@bloghub.com", "name": "Admin User", "role": "admin", "password": "admin123"},
        {"id": 1700000000000, "email": "ann@x.com", "name": "Ann", "role": "admin", "password": "pw1"},
    ]
    backend.set(KEY, json.dumps(legacy))
    records = credentials.all()
    assert [r.id for r in records] == ["1", "1700000000000"]
    assert credentials.find("ann@x.com", "pw1").name == "Ann"
    raw = backend.get(KEY)
    assert "pw1" not in raw and "admin123" not in raw
    assert yaml.safe_load(raw)["version"] == 1


def test_cache_tracks_external_writes(backend):
    store = CredentialStore(backend)
    store.put(_record())
    other = CredentialStore(backend)
    other.put(_record(id_="11", email="b@x.com"))
    assert {r.id for r in store.all()} == {"1", "10", "11"}


def test_quarantine_keeps_only_recent_entries(credentials, backend):
    for i in range(MAX_QUARANTINE_ENTRIES + 5):
        backend.set(KEY, f"{{broken-{i}: [")
        assert credentials.all() == []
    quarantined = yaml.safe_load(backend.get(KEY + ".quarantine"))
    assert len(quarantined) == MAX_QUARANTINE_ENTRIES
    assert quarantined[-1]["content"] == f"{{broken-{MAX_QUARANTINE_ENTRIES + 4}: ["
    assert quarantined[0]["content"] == "{broken-5: ["
