"""채널 어댑터 팩토리: 플랫폼 태그에 맞는 어댑터 생성

지원 플랫폼은 import 시점에 고정된 레지스트리로 결정된다.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Union

import httpx

from channel_sync.core.ports.channel_port import ChannelAdapter, ChannelPlatform
from channel_sync.core.ports.clock_port import ClockPort
from channel_sync.core.ports.token_sink import RefreshTokenSink
from channel_sync.core.exceptions import ConfigurationError
from channel_sync.adapters.crypto.secret_box import decrypt_config
from channel_sync.adapters.channels.musinsa_adapter import MusinsaAdapter
from channel_sync.adapters.channels.cafe24_adapter import Cafe24Adapter
from channel_sync.adapters.channels.twentynine_cm_adapter import TwentyNineCMAdapter
from channel_sync.shared.logging import get_logger

logger = get_logger(__name__)


@dataclass
class AdapterDependencies:
    """어댑터에 주입할 선택적 협력 객체"""
    client: Optional[httpx.AsyncClient] = None
    clock: Optional[ClockPort] = None
    token_sink: Optional[RefreshTokenSink] = None


AdapterBuilder = Callable[[Dict[str, str], AdapterDependencies], ChannelAdapter]


ADAPTER_REGISTRY: Dict[ChannelPlatform, AdapterBuilder] = {
    ChannelPlatform.MUSINSA: lambda config, deps: MusinsaAdapter(
        config, client=deps.client, clock=deps.clock
    ),
    ChannelPlatform.TWENTYNINE_CM: lambda config, deps: TwentyNineCMAdapter(config),
    ChannelPlatform.CAFE24: lambda config, deps: Cafe24Adapter(
        config, client=deps.client, clock=deps.clock, token_sink=deps.token_sink
    ),
}


def resolve_platform(platform: Union[ChannelPlatform, str]) -> ChannelPlatform:
    """플랫폼 태그 검증: 레지스트리에 없으면 즉시 ConfigurationError"""
    try:
        resolved = ChannelPlatform(platform)
    except ValueError:
        raise ConfigurationError(f"[채널 오류] 지원하지 않는 플랫폼: {platform}") from None

    if resolved not in ADAPTER_REGISTRY:
        raise ConfigurationError(f"[채널 오류] 지원하지 않는 플랫폼: {resolved.value}")
    return resolved


def build_channel_adapter(
    platform: Union[ChannelPlatform, str],
    config: Dict[str, str],
    dependencies: Optional[AdapterDependencies] = None
) -> ChannelAdapter:
    """복호화된 설정으로 어댑터 생성"""
    resolved = resolve_platform(platform)
    adapter = ADAPTER_REGISTRY[resolved](config, dependencies or AdapterDependencies())
    logger.info(f"[채널] {adapter.channel_name} 어댑터 생성")
    return adapter


def create_channel_adapter(
    platform: Union[ChannelPlatform, str],
    api_config_enc: str,
    dependencies: Optional[AdapterDependencies] = None,
    key_hex: Optional[str] = None
) -> ChannelAdapter:
    """암호화된 API 설정을 복호화하여 플랫폼별 어댑터 생성

    플랫폼 검증은 복호화·네트워크 호출보다 먼저 수행한다.
    """
    resolved = resolve_platform(platform)
    config = decrypt_config(api_config_enc, key_hex)
    return build_channel_adapter(resolved, config, dependencies)
