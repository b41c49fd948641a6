"""Tests for the storage and authentication services."""

import asyncio
import json

import pytest

from ram.services.biometric import (
    PasscodeAuthenticator,
    UnavailableAuthenticator,
    hash_passcode,
)
from ram.services.storage import (
    InMemorySettingsStore,
    JsonFileSettingsStore,
    StorageReadError,
    StorageWriteError,
)
from ram.stores import DebtStore


def prompt_returning(value):
    async def prompt(reason):
        prompt.reasons.append(reason)
        return value
    prompt.reasons = []
    return prompt


class TestInMemorySettingsStore:
    """Tests for the in-memory store."""

    def test_get_set_remove(self):
        store = InMemorySettingsStore()
        assert store.get("debts") is None

        store.set("debts", "[]")
        assert store.get("debts") == "[]"
        assert store.write_count == 1

        store.remove("debts")
        store.remove("debts")
        assert store.get("debts") is None

    def test_initial_values_are_copied(self):
        initial = {"debts": "[]"}
        store = InMemorySettingsStore(initial)
        store.set("passwords", "[]")
        assert initial == {"debts": "[]"}


class TestJsonFileSettingsStore:
    """Tests for the JSON file store."""

    def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileSettingsStore(tmp_path / "settings.json")
        assert store.get("debts") is None

    def test_values_survive_new_instance(self, tmp_path):
        """Test that a write is visible to a fresh reader."""
        path = tmp_path / "nested" / "settings.json"
        JsonFileSettingsStore(path).set("debts", '[{"name": "Alice"}]')
        JsonFileSettingsStore(path).set("passwords", "[]")

        reader = JsonFileSettingsStore(path)
        assert reader.get("debts") == '[{"name": "Alice"}]'
        assert reader.get("passwords") == "[]"

    def test_set_overwrites(self, tmp_path):
        path = tmp_path / "settings.json"
        store = JsonFileSettingsStore(path)
        store.set("debts", "[1]")
        store.set("debts", "[2]")

        assert json.loads(path.read_text(encoding="utf-8")) == {"debts": "[2]"}

    def test_remove(self, tmp_path):
        path = tmp_path / "settings.json"
        store = JsonFileSettingsStore(path)
        store.set("debts", "[]")
        store.set("passwords", "[]")

        store.remove("debts")
        store.remove("missing")

        assert JsonFileSettingsStore(path).get("debts") is None
        assert JsonFileSettingsStore(path).get("passwords") == "[]"

    def test_corrupt_file_is_empty(self, tmp_path):
        """Test that a damaged file does not block startup."""
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")

        store = JsonFileSettingsStore(path)
        assert store.get("debts") is None

        store.set("debts", "[]")
        assert JsonFileSettingsStore(path).get("debts") == "[]"

    def test_non_utf8_file_is_empty(self, tmp_path):
        """Test that undecodable bytes are treated like any other damage."""
        path = tmp_path / "settings.json"
        path.write_bytes(b'{"debts": "\xff\xfe"}')

        assert JsonFileSettingsStore(path).get("debts") is None
        assert DebtStore(JsonFileSettingsStore(path)).load() == []

    def test_non_object_document_is_empty(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert JsonFileSettingsStore(path).get("debts") is None

    def test_non_string_values_ignored(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"debts": [1], "passwords": "[]"}), encoding="utf-8")

        store = JsonFileSettingsStore(path)
        assert store.get("debts") is None
        assert store.get("passwords") == "[]"

    def test_unreadable_path_raises(self, tmp_path):
        """Test that a path that is a directory cannot be read."""
        with pytest.raises(StorageReadError):
            JsonFileSettingsStore(tmp_path).get("debts")

    def test_unwritable_directory_raises(self, tmp_path, monkeypatch):
        """Test that a temp file that cannot be created fails the write."""
        def no_temp_files(*args, **kwargs):
            raise PermissionError("permission denied")

        monkeypatch.setattr("ram.services.storage.json_file.tempfile.mkstemp", no_temp_files)

        store = JsonFileSettingsStore(tmp_path / "settings.json")
        with pytest.raises(StorageWriteError):
            store.set("debts", "[]")
        assert store.get("debts") is None

    def test_failed_write_keeps_previous_values(self, tmp_path, monkeypatch):
        """Test that memory is only updated after the file is written."""
        path = tmp_path / "settings.json"
        store = JsonFileSettingsStore(path)
        store.set("debts", "[1]")

        def broken_replace(src, dst):
            raise OSError("read-only file system")

        monkeypatch.setattr("ram.services.storage.json_file.os.replace", broken_replace)

        with pytest.raises(StorageWriteError):
            store.set("debts", "[2]")

        assert store.get("debts") == "[1]"
        assert [p.name for p in tmp_path.iterdir()] == ["settings.json"]


class TestPasscodeAuthenticator:
    """Tests for the passcode fallback authenticator."""

    def test_hash_passcode_format(self):
        digest = hash_passcode("1234")
        assert len(digest) == 64
        assert digest == hash_passcode("1234")
        assert digest != hash_passcode("12345")

    def test_correct_passcode(self):
        prompt = prompt_returning("1234")
        authenticator = PasscodeAuthenticator(hash_passcode("1234"), prompt)

        result = asyncio.run(authenticator.evaluate("Authenticate to access passwords."))

        assert result.success is True
        assert prompt.reasons == ["Authenticate to access passwords."]

    def test_uppercase_digest_accepted(self):
        authenticator = PasscodeAuthenticator(
            hash_passcode("1234").upper(),
            prompt_returning("1234"),
        )
        assert asyncio.run(authenticator.evaluate("why")).success is True

    def test_wrong_passcode(self):
        authenticator = PasscodeAuthenticator(hash_passcode("1234"), prompt_returning("0000"))

        result = asyncio.run(authenticator.evaluate("why"))

        assert result.success is False
        assert result.error_message == "Passcode did not match"

    def test_cancelled_prompt(self):
        authenticator = PasscodeAuthenticator(hash_passcode("1234"), prompt_returning(None))

        result = asyncio.run(authenticator.evaluate("why"))

        assert result.success is False
        assert "cancelled" in result.error_message

    def test_not_configured_is_unavailable(self):
        prompt = prompt_returning("1234")
        authenticator = PasscodeAuthenticator(None, prompt)

        assert authenticator.can_evaluate() == (False, "No passcode configured")
        assert asyncio.run(authenticator.evaluate("why")).success is False
        assert prompt.reasons == []

    def test_configured_is_available(self):
        authenticator = PasscodeAuthenticator(hash_passcode("1234"), prompt_returning("1234"))
        assert authenticator.can_evaluate() == (True, None)


class TestUnavailableAuthenticator:
    """Tests for hosts without any identity check."""

    def test_never_available(self):
        authenticator = UnavailableAuthenticator("Biometry is not available on this device.")
        assert authenticator.can_evaluate() == (
            False,
            "Biometry is not available on this device.",
        )
        assert asyncio.run(authenticator.evaluate("why")).success is False
