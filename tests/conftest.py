import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest

from bloghub.auth.manager import SessionManager
from bloghub.auth.session import SessionStore
from bloghub.auth.storage import FileBackend, MemoryBackend
from bloghub.auth.users import CredentialStore
from bloghub.config import Settings

TEST_SECRET_KEY = "test-secret-key"


@pytest.fixture()
def settings() -> Settings:
    return Settings(secret_key=TEST_SECRET_KEY)


@pytest.fixture()
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture()
def file_backend(tmp_path: Path) -> FileBackend:
    return FileBackend(tmp_path / "state")


@pytest.fixture()
def credentials(backend) -> CredentialStore:
    return CredentialStore(backend)


@pytest.fixture()
def sessions(backend) -> SessionStore:
    return SessionStore(backend, TEST_SECRET_KEY)


@pytest.fixture()
def notifications():
    return []


@pytest.fixture()
def manager(settings, backend, notifications) -> SessionManager:
    """A started manager over an in-memory backend."""
    m = SessionManager.from_settings(settings, backend=backend, notifier=notifications.append)
    m.start()
    return m


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "BLOGHUB_SECRET_KEY",
        "SECRET_KEY",
        "BLOGHUB_SESSION_SALT",
        "BLOGHUB_STATE_DIR",
        "BLOGHUB_KEY_PREFIX",
        "BLOGHUB_REGISTRATION_ROLE",
        "BLOGHUB_UNIQUE_EMAILS",
        "BLOGHUB_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
