"""
Tests for ApiConfigService and the per-run client resolver
"""

import pytest

from castengine.config import AppSettings
from castengine.core.exceptions import ModelUnavailableError, SynthesisFailedError
from castengine.models import ApiConfig, ApiProvider, ModelType
from castengine.services.api_configs import (
    ApiConfigService,
    ConfigClientResolver,
    build_retry_policy,
)
from castengine.services.llm import ChatClient
from castengine.services.storage import FileBasedApiConfigRepository, InMemorySecretStore
from castengine.services.tts import SpeechClient


def _config(config_id, model_type=ModelType.TEXT, **overrides):
    values = dict(
        id=config_id,
        name=f"Config {config_id}",
        provider=ApiProvider.OPENAI,
        model_type=model_type,
        base_url=f"https://{config_id}.test/v1",
        model_name="model-x",
        api_key=f"key-{config_id}",
    )
    values.update(overrides)
    return ApiConfig(**values)


@pytest.fixture
def secrets():
    return InMemorySecretStore()


@pytest.fixture
def service(tmp_path, secrets):
    return ApiConfigService(FileBasedApiConfigRepository(tmp_path), secrets)


class TestSaveListDelete:

    def test_save_keeps_key_out_of_row(self, service, secrets):
        """Test the key goes to the secret store, never the row"""
        stored = service.save(_config("a"))

        assert stored.api_key is None
        assert stored.api_key_ref == "api_key_a"
        assert stored.created_at
        assert secrets.get_key("a") == "key-a"

    def test_save_without_key_keeps_existing_key(self, service, secrets):
        """Test an update without a key keeps the stored one"""
        service.save(_config("a"))
        service.save(_config("a", api_key=None, name="Renamed"))

        assert secrets.get_key("a") == "key-a"
        assert [c.name for c in service.list()] == ["Renamed"]

    def test_list_in_creation_order(self, service):
        """Test configs list oldest first"""
        for config_id in ("first", "second"):
            service.save(_config(config_id))

        assert [c.id for c in service.list()] == ["first", "second"]

    def test_delete_removes_row_and_key(self, service, secrets):
        """Test delete removes both the row and its key"""
        service.save(_config("a"))

        assert service.delete("a") is True
        assert service.list() == []
        assert secrets.get_key("a") is None

    def test_delete_unknown(self, service):
        """Test deleting an unknown id"""
        assert service.delete("ghost") is False

    def test_delete_survives_secret_store_failure(self, service, secrets, monkeypatch):
        """Test a failing key delete still removes the row"""
        service.save(_config("a"))

        def boom(config_id):
            raise OSError("keychain locked")

        monkeypatch.setattr(secrets, "delete_key", boom)

        assert service.delete("a") is True


class TestResolution:

    def test_chat_config_prefers_active(self, service):
        """Test the active text config is chosen"""
        service.save(_config("plain"))
        service.save(_config("active", is_active=True))

        config = service.chat_config()

        assert config.base_url == "https://active.test/v1"
        assert config.api_key == "key-active"

    def test_chat_config_falls_back_to_first_text(self, service):
        """Test the first text config is used when none is active"""
        service.save(_config("speech", ModelType.TTS))
        service.save(_config("text-1"))
        service.save(_config("text-2"))

        assert service.chat_config().base_url == "https://text-1.test/v1"

    def test_no_text_config(self, service):
        """Test resolution without a text model"""
        service.save(_config("speech", ModelType.TTS))

        with pytest.raises(ModelUnavailableError, match="No text model configured"):
            service.chat_config()

    def test_keyless_config_gets_empty_key(self, service):
        """Test a config without a stored key resolves to an empty key"""
        service.save(_config("local", provider=ApiProvider.OLLAMA, api_key=None, is_local=True))

        assert service.chat_config().api_key == ""

    def test_local_config_skips_secret_store(self, service, secrets, monkeypatch):
        """Local models never read a key, even one left over from an earlier save"""
        service.save(_config("local", provider=ApiProvider.OLLAMA, is_local=True))
        service.save(_config("tts-local", ModelType.TTS, is_local=True))

        def fail(config_id):
            raise AssertionError(f"secret store read for {config_id}")

        monkeypatch.setattr(secrets, "get_key", fail)

        assert service.chat_config().api_key == ""
        assert [c.api_key for c in service.speech_configs()] == [""]

    def test_speech_configs_default_language(self, service):
        """Test TTS configs without a language serve English"""
        service.save(_config("tts-en", ModelType.TTS))
        service.save(_config("tts-fr", ModelType.TTS, language="fr"))

        configs = service.speech_configs()

        assert [c.language for c in configs] == ["en", "fr"]

    def test_no_speech_config(self, service):
        """Test resolution without a TTS service"""
        service.save(_config("text"))

        with pytest.raises(SynthesisFailedError, match="No TTS service configured"):
            service.speech_configs()


class TestClientResolver:

    def test_retry_policy_follows_settings(self):
        """Test the retry count comes from settings"""
        policy = build_retry_policy(AppSettings(retry_count=5))

        assert policy.max_retries == 5
        assert policy.base_delay_ms == 500
        assert policy.max_delay_ms == 30_000

    def test_builds_clients(self, service):
        """Test the resolver hands out configured clients"""
        service.save(_config("text"))
        service.save(_config("tts", ModelType.TTS, language="de"))
        resolver = ConfigClientResolver(service, AppSettings(retry_count=1))

        chat = resolver.chat_client()
        speech = resolver.speech_client()

        assert isinstance(chat, ChatClient)
        assert chat.retry_policy.max_retries == 1
        assert isinstance(speech, SpeechClient)
        assert speech.route_url("de-DE") == "https://tts.test/v1"
