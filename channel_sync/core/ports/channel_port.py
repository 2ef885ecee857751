"""외부 판매 채널 연동 포트 (인터페이스)"""
from abc import ABC, abstractmethod
from typing import List, Any, Optional
from datetime import datetime
from enum import Enum

from channel_sync.core.entities.order import CanonicalOrder
from channel_sync.core.entities.claim import CanonicalClaim
from channel_sync.core.entities.sales import SalesAggregate


class ChannelPlatform(str, Enum):
    """채널 플랫폼 (DB 스키마의 플랫폼 태그와 동일)"""
    MUSINSA = "MUSINSA"
    TWENTYNINE_CM = "TWENTYNINE_CM"
    CAFE24 = "CAFE24"
    OWN_MALL = "OWN_MALL"
    OTHER = "OTHER"


class ChannelAdapter(ABC):
    """모든 채널 어댑터가 구현해야 하는 공통 인터페이스

    어댑터 인스턴스는 동기화 작업마다 새로 만들고 작업이 끝나면 버린다.
    """

    channel_name: str = ""
    # 갱신 토큰 보관 키 (토큰을 교체 발급하는 채널만 설정)
    token_key: Optional[str] = None

    @abstractmethod
    async def authenticate(self) -> None:
        """인증 (이미 유효하면 네트워크 호출 없이 반환)"""
        pass

    @abstractmethod
    async def fetch_orders(self, since: datetime) -> List[CanonicalOrder]:
        """since 이후 주문 전체 (페이지 도착 순서대로 이어 붙임)"""
        pass

    @abstractmethod
    async def fetch_sales_report(self, date_from: datetime, date_to: datetime) -> SalesAggregate:
        """기간 매출 집계"""
        pass

    @abstractmethod
    async def handle_webhook(self, payload: Any) -> None:
        """Webhook 처리 (알 수 없는 형태는 로그만 남김)"""
        pass

    async def fetch_claims(self, since: datetime) -> List[CanonicalClaim]:
        """CS(클레임) 조회: 지원하는 채널만 재정의"""
        raise NotImplementedError(f"{self.channel_name} 채널은 클레임 조회를 지원하지 않습니다")

    @property
    def supports_claims(self) -> bool:
        return type(self).fetch_claims is not ChannelAdapter.fetch_claims

    async def aclose(self) -> None:
        """보유한 HTTP 클라이언트 정리"""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
