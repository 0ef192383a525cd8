"""
Secure Notes API Test Suite
Exercises every notes endpoint through the ASGI app
"""
import pytest
from httpx import AsyncClient
from pydantic import ValidationError as PydanticValidationError

from securenotes.config import Settings
from securenotes.core.exceptions import ConfigurationError
from securenotes.main import create_app


async def _create(client: AsyncClient, **body) -> dict:
    response = await client.post("/api/notes", json=body)
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["success"] is True
    return data["data"]


class TestHealth:
    """Health endpoint."""

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestNotesAPI:
    """Notes endpoints."""

    @pytest.mark.asyncio
    async def test_list_empty(self, client: AsyncClient):
        response = await client.get("/api/notes")
        assert response.status_code == 200
        assert response.json() == {"success": True, "data": [], "error": None}

    @pytest.mark.asyncio
    async def test_create_locked_and_unlock(self, client: AsyncClient):
        note = await _create(
            client, id=1, content="secret plan", password="pw1", shouldLock=True, tags=["a, b", " c "]
        )
        assert note["locked"] is True
        assert note["content"] == "Locked Note"
        assert set(note["tags"]) == {"a", "b", "c"}
        assert "passwordHash" not in note
        assert "encryptedData" not in note
        assert "iv" not in note

        response = await client.post("/api/notes/1/unlock", json={"password": "pw1"})
        assert response.status_code == 200
        assert response.json()["data"]["content"] == "secret plan"

        response = await client.post("/api/notes/1/unlock", json={"password": "wrong"})
        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"]["code"] == "AUTHENTICATION_FAILED"
        assert body["error"]["message"] == "Incorrect password"

    @pytest.mark.asyncio
    async def test_lock_without_password(self, client: AsyncClient):
        response = await client.post("/api/notes", json={"content": "x", "shouldLock": True})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_malformed_body_uses_envelope(self, client: AsyncClient):
        response = await client.post("/api/notes", json={"shouldLock": True})
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert "content" in body["error"]["message"]

    @pytest.mark.asyncio
    async def test_unencodable_text_uses_envelope(self, client: AsyncClient):
        response = await client.post(
            "/api/notes",
            content='{"content": "bad \\ud800 text"}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"

        response = await client.get("/api/notes")
        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_edit_relock_keeps_password(self, client: AsyncClient):
        await _create(client, id=1, content="secret plan", password="pw1", shouldLock=True)

        response = await client.put(
            "/api/notes/1",
            json={"content": "new plan", "password": None, "shouldLock": True, "tags": []},
        )
        assert response.status_code == 200
        assert response.json()["data"]["content"] == "Locked Note"

        response = await client.post("/api/notes/1/unlock", json={"password": "pw1"})
        assert response.json()["data"]["content"] == "new plan"

    @pytest.mark.asyncio
    async def test_edit_unknown(self, client: AsyncClient):
        response = await client.put("/api/notes/404", json={"content": "x"})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_pin(self, client: AsyncClient):
        await _create(client, id=1, content="x")
        response = await client.put("/api/notes/1/pin", json={"pinned": True})
        assert response.status_code == 200
        assert response.json()["data"]["pinned"] is True

    @pytest.mark.asyncio
    async def test_trash_flow(self, client: AsyncClient):
        await _create(client, id=1, content="x")
        await _create(client, id=2, content="y")

        response = await client.delete("/api/notes/1")
        assert response.status_code == 200
        assert response.json()["data"]["deletedAt"] is not None

        trash = (await client.get("/api/notes/trash")).json()["data"]
        assert [n["id"] for n in trash] == [1]
        active = (await client.get("/api/notes")).json()["data"]
        assert [n["id"] for n in active] == [2]

        response = await client.put("/api/notes/1/pin", json={"pinned": True})
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "NOTE_TRASHED"

        response = await client.post("/api/notes/1/restore")
        assert response.status_code == 200
        assert response.json()["data"]["deletedAt"] is None

        await client.delete("/api/notes/1")
        response = await client.delete("/api/notes/1/forever")
        assert response.status_code == 200
        assert response.json()["success"] is True

        assert (await client.get("/api/notes/trash")).json()["data"] == []
        response = await client.post("/api/notes/1/restore")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_purge_active_rejected(self, client: AsyncClient):
        await _create(client, id=1, content="x")
        response = await client.delete("/api/notes/1/forever")
        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_empty_trash(self, client: AsyncClient):
        await _create(client, id=1, content="x")
        await _create(client, id=2, content="y")
        await client.delete("/api/notes/1")
        await client.delete("/api/notes/2")

        response = await client.delete("/api/notes/trash")
        assert response.status_code == 200
        assert response.json()["data"] == {"purged": 2}


class TestConfiguration:
    """Startup configuration."""

    def test_bad_secret_key_prevents_app(self, tmp_path):
        bad = Settings(_env_file=None, secret_key="c2hvcnQ=", data_dir=tmp_path, single_instance=False)
        with pytest.raises(ConfigurationError):
            create_app(bad)

    def test_missing_secret_key_prevents_app(self, tmp_path):
        bad = Settings(_env_file=None, secret_key="", data_dir=tmp_path, single_instance=False)
        with pytest.raises(ConfigurationError):
            create_app(bad)

    def test_settings_from_environment(self, monkeypatch, tmp_path, secret_key):
        monkeypatch.setenv("SECRET_KEY", secret_key)
        monkeypatch.setenv("DATA_DIR", str(tmp_path))
        monkeypatch.setenv("BCRYPT_ROUNDS", "4")
        settings = Settings(_env_file=None)
        assert settings.secret_key == secret_key
        assert settings.notes_path == tmp_path / "notes.json"
        assert settings.bcrypt_rounds == 4

    @pytest.mark.parametrize("rounds", [3, 32, 0])
    def test_bcrypt_rounds_out_of_range_rejected(self, tmp_path, secret_key, rounds):
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, secret_key=secret_key, data_dir=tmp_path, bcrypt_rounds=rounds)

    @pytest.mark.parametrize("rounds", [4, 31])
    def test_bcrypt_rounds_bounds_accepted(self, tmp_path, secret_key, rounds):
        settings = Settings(_env_file=None, secret_key=secret_key, data_dir=tmp_path, bcrypt_rounds=rounds)
        assert settings.bcrypt_rounds == rounds
