"""Refresh Token 저장소 어댑터"""
from typing import Dict, Optional
import asyncio

from channel_sync.core.ports.token_sink import RefreshTokenSink
from channel_sync.adapters.crypto.secret_box import decrypt_config, encrypt_config
from channel_sync.shared.logging import LoggerMixin


class InMemoryRefreshTokenStore(RefreshTokenSink, LoggerMixin):
    """채널별 최신 Refresh Token 보관

    작업 종료 후 reseal_config() 로 암호화된 채널 설정에 반영해
    다음 동기화 작업이 새 토큰으로 시작하도록 한다.
    """

    def __init__(self, key_hex: Optional[str] = None):
        self.key_hex = key_hex
        self._tokens: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def save_refresh_token(self, key: str, refresh_token: str) -> None:
        async with self._lock:
            self._tokens[key] = refresh_token
        self.logger.info(f"[토큰 저장소] {key} Refresh Token 갱신 보관")

    async def get_refresh_token(self, key: str) -> Optional[str]:
        async with self._lock:
            return self._tokens.get(key)

    async def reseal_config(self, key: str, api_config_enc: str) -> str:
        """보관된 토큰이 있으면 refreshToken 을 교체한 새 암호문 반환"""
        token = await self.get_refresh_token(key)
        if not token:
            return api_config_enc

        config = decrypt_config(api_config_enc, self.key_hex)
        config["refreshToken"] = token
        self.logger.info(f"[토큰 저장소] {key} 채널 설정 재암호화")
        return encrypt_config(config, self.key_hex)

    async def invalidate(self, key: str) -> None:
        async with self._lock:
            self._tokens.pop(key, None)
