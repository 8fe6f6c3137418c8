"""
Tests for API key storage
"""

import json
import os
import stat

import pytest

from castengine.services.storage import FileSecretStore, InMemorySecretStore, api_key_ref


def test_api_key_ref():
    """Test the secret reference naming"""
    assert api_key_ref("abc") == "api_key_abc"


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemorySecretStore()
    return FileSecretStore(tmp_path)


class TestSecretStore:

    def test_put_and_get(self, store):
        """Test a stored key reads back"""
        store.put_key("c1", "sk-secret")

        assert store.get_key("c1") == "sk-secret"
        assert store.get_key("c2") is None

    def test_overwrite(self, store):
        """Test a second put replaces the key"""
        store.put_key("c1", "old")
        store.put_key("c1", "new")

        assert store.get_key("c1") == "new"

    def test_delete_is_idempotent(self, store):
        """Test deleting a missing key"""
        store.put_key("c1", "sk")
        store.delete_key("c1")
        store.delete_key("c1")

        assert store.get_key("c1") is None


class TestFileSecretStore:

    def test_entries_are_keyed_by_reference(self, tmp_path):
        """Test keys are stored under their reference name"""
        FileSecretStore(tmp_path).put_key("c1", "sk")

        assert json.loads((tmp_path / "secrets.json").read_text()) == {"api_key_c1": "sk"}

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_file_is_owner_only(self, tmp_path):
        """Test the key file is readable by its owner only"""
        FileSecretStore(tmp_path).put_key("c1", "sk")

        mode = stat.S_IMODE((tmp_path / "secrets.json").stat().st_mode)
        assert mode & 0o077 == 0
