"""Shared fixtures: a throwaway data directory, a random key and fast bcrypt."""
import base64
import itertools
import os

import pytest
from httpx import ASGITransport, AsyncClient

from securenotes.config import Settings
from securenotes.core.crypto import CipherEngine, MasterKeySource
from securenotes.core.security import PasswordHasher
from securenotes.services.note_service import NoteService
from securenotes.services.note_store import NoteDocumentStore

START_MS = 1_700_000_000_000


@pytest.fixture
def secret_key() -> str:
    return base64.b64encode(os.urandom(32)).decode("ascii")


@pytest.fixture
def settings(tmp_path, secret_key) -> Settings:
    return Settings(
        _env_file=None,
        secret_key=secret_key,
        data_dir=tmp_path / "data",
        bcrypt_rounds=4,
        single_instance=False,
    )


@pytest.fixture
def cipher(secret_key) -> CipherEngine:
    return CipherEngine(MasterKeySource(secret_key))


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def store(settings) -> NoteDocumentStore:
    return NoteDocumentStore(settings.notes_path)


@pytest.fixture
def clock():
    """Deterministic millisecond clock, one tick per call."""
    ticks = itertools.count(START_MS)
    return lambda: next(ticks)


@pytest.fixture
def service(store, cipher, hasher, clock) -> NoteService:
    return NoteService(store=store, cipher=cipher, hasher=hasher, clock=clock)


@pytest.fixture
async def client(settings):
    """Create test client for an app backed by the temporary data directory."""
    from securenotes.main import create_app

    app = create_app(settings)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac
