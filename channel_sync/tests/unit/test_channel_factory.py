"""채널 어댑터 팩토리 / 설정 암호화 테스트"""
import pytest
import httpx

from channel_sync.adapters.channels import factory
from channel_sync.adapters.channels.factory import (
    AdapterDependencies, ADAPTER_REGISTRY, create_channel_adapter, resolve_platform
)
from channel_sync.adapters.channels.musinsa_adapter import MusinsaAdapter
from channel_sync.adapters.channels.cafe24_adapter import Cafe24Adapter
from channel_sync.adapters.channels.twentynine_cm_adapter import TwentyNineCMAdapter
from channel_sync.adapters.crypto.secret_box import (
    encrypt_config, decrypt_config, encrypt_text, decrypt_text
)
from channel_sync.core.exceptions import ConfigurationError, DecryptionError
from channel_sync.core.ports.channel_port import ChannelPlatform


class TestPlatformResolution:
    """플랫폼 태그 검증 테스트"""

    def test_unknown_platform_fails_before_any_work(self, monkeypatch):
        """알 수 없는 태그는 복호화·네트워크 호출 전에 ConfigurationError"""
        def forbidden(*args, **kwargs):
            raise AssertionError("복호화가 호출되면 안 됩니다")

        monkeypatch.setattr(factory, "decrypt_config", forbidden)
        monkeypatch.setattr(httpx.AsyncClient, "send", forbidden)

        with pytest.raises(ConfigurationError) as exc_info:
            create_channel_adapter("UNKNOWN", "not-even-ciphertext")

        assert "UNKNOWN" in exc_info.value.message

    @pytest.mark.parametrize("platform", [ChannelPlatform.OWN_MALL, ChannelPlatform.OTHER])
    def test_tag_without_adapter(self, platform):
        with pytest.raises(ConfigurationError):
            resolve_platform(platform)

    def test_registry_covers_api_platforms(self):
        assert set(ADAPTER_REGISTRY) == {
            ChannelPlatform.MUSINSA, ChannelPlatform.TWENTYNINE_CM, ChannelPlatform.CAFE24
        }

    def test_string_tag_is_accepted(self):
        assert resolve_platform("CAFE24") is ChannelPlatform.CAFE24


class TestAdapterCreation:
    """복호화 → 어댑터 생성 테스트"""

    @pytest.mark.parametrize("platform,config,adapter_class", [
        (ChannelPlatform.MUSINSA, {"apiKey": "k"}, MusinsaAdapter),
        (ChannelPlatform.TWENTYNINE_CM, {"partnerKey": "p"}, TwentyNineCMAdapter),
        (ChannelPlatform.CAFE24, {"mallId": "m", "clientId": "c", "clientSecret": "s", "refreshToken": "r"},
         Cafe24Adapter),
    ])
    def test_dispatch(self, secret_key, platform, config, adapter_class):
        adapter = create_channel_adapter(platform, encrypt_config(config))
        assert isinstance(adapter, adapter_class)

    def test_missing_field_is_configuration_error(self, secret_key):
        with pytest.raises(ConfigurationError):
            create_channel_adapter(ChannelPlatform.TWENTYNINE_CM, encrypt_config({}))

    def test_dependencies_are_injected(self, secret_key, fake_clock):
        client = httpx.AsyncClient()
        deps = AdapterDependencies(client=client, clock=fake_clock)

        adapter = create_channel_adapter(ChannelPlatform.MUSINSA, encrypt_config({"apiKey": "k"}), deps)

        assert adapter.client is client
        assert adapter.clock is fake_clock


class TestSecretBox:
    """AES-256-GCM 설정 암호화 테스트"""

    def test_ciphertext_format(self, secret_key):
        parts = encrypt_text("hello", secret_key).split(":")

        assert len(parts) == 3
        assert len(parts[0]) == 32  # 16바이트 IV
        assert len(parts[1]) == 32  # 16바이트 태그

    def test_config_round_trip_flattens_values(self, secret_key):
        blob = encrypt_config({"apiKey": "k", "retries": 3, "nested": {"a": 1}, "empty": None})

        assert decrypt_config(blob) == {"apiKey": "k", "retries": "3", "nested": '{"a": 1}'}

    def test_tampered_ciphertext(self, secret_key):
        iv, tag, cipher = encrypt_text("secret").split(":")
        tampered = f"{iv}:{tag}:{'00' if cipher[:2] != '00' else '11'}{cipher[2:]}"

        with pytest.raises(DecryptionError):
            decrypt_text(tampered)

    @pytest.mark.parametrize("blob", ["", "abc", "a:b", "zz:zz:zz"])
    def test_malformed_ciphertext(self, secret_key, blob):
        with pytest.raises(DecryptionError):
            decrypt_text(blob)

    def test_non_object_config(self, secret_key):
        with pytest.raises(DecryptionError):
            decrypt_config(encrypt_text("[1, 2]"))

    def test_missing_key(self, no_secret_key):
        with pytest.raises(ConfigurationError):
            encrypt_text("x")

    def test_wrong_key_length(self):
        with pytest.raises(ConfigurationError):
            encrypt_text("x", "abcd")
