"""29CM 채널 어댑터 (Partner-Key 헤더 인증)

주문/매출 API 는 아직 연동 전이라 네트워크 호출 없이 빈 결과를 돌려준다.
"""
from typing import List, Dict, Any, Optional
from datetime import datetime

from channel_sync.core.ports.channel_port import ChannelAdapter
from channel_sync.core.entities.order import CanonicalOrder
from channel_sync.core.entities.sales import SalesAggregate
from channel_sync.core.exceptions import ConfigurationError
from channel_sync.shared.config import get_settings
from channel_sync.shared.logging import get_logger

logger = get_logger(__name__)

CHANNEL_NAME = "29CM"
PARTNER_KEY_HEADER = "Partner-Key"


class TwentyNineCMAdapter(ChannelAdapter):
    """29CM 어댑터: 토큰 발급 없이 모든 요청에 고정 헤더"""

    channel_name = CHANNEL_NAME

    def __init__(self, config: Dict[str, str], timeout: Optional[float] = None):
        self.partner_key = config.get("partnerKey") or ""
        if not self.partner_key:
            raise ConfigurationError("[29CM 어댑터] partnerKey가 설정되지 않았습니다.")

        settings = get_settings()
        self.base_url = (config.get("baseUrl") or settings.twentynine_cm_api_url).rstrip("/")
        self.timeout = timeout or settings.channel_request_timeout

    @property
    def headers(self) -> Dict[str, str]:
        return {
            PARTNER_KEY_HEADER: self.partner_key,
            "Content-Type": "application/json",
        }

    async def authenticate(self) -> None:
        # 헤더 인증: 별도 토큰 발급 불필요
        logger.info("[29CM] Partner-Key 인증 확인 완료")

    async def fetch_orders(self, since: datetime) -> List[CanonicalOrder]:
        # TODO: 29CM 파트너 API 주문 조회 엔드포인트 확정 후 headers 로 연동
        logger.info(f"[29CM] {since.isoformat()} 이후 주문 수집 요청 (미연동: 0건)")
        return []

    async def fetch_sales_report(self, date_from: datetime, date_to: datetime) -> SalesAggregate:
        logger.info(f"[29CM] {date_from.isoformat()} ~ {date_to.isoformat()} 매출 리포트 요청 (미연동)")
        return SalesAggregate.empty(self.channel_name, date_from, date_to)

    async def handle_webhook(self, payload: Any) -> None:
        logger.info(f"[29CM] Webhook 수신: {type(payload).__name__}")
