"""갱신된 Refresh Token 저장 포트"""
from abc import ABC, abstractmethod
from typing import Optional


class RefreshTokenSink(ABC):
    """업스트림이 Refresh Token 을 교체 발급했을 때 다음 실행을 위해 보관

    key 는 자격증명 단위 식별자 (예: 카페24 mallId) 로, 같은 플랫폼의
    여러 몰이 서로의 토큰을 덮어쓰지 않게 한다.
    """

    @abstractmethod
    async def save_refresh_token(self, key: str, refresh_token: str) -> None:
        pass

    async def get_refresh_token(self, key: str) -> Optional[str]:
        """보관 중인 최신 토큰 (보관하지 않는 구현은 None)"""
        return None

    async def reseal_config(self, key: str, api_config_enc: str) -> str:
        """보관 토큰을 반영한 채널 설정 암호문 (반영할 것이 없으면 그대로)"""
        return api_config_enc
