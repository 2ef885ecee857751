"""무신사 파트너스 API 어댑터

- API 인증키 헤더 직접 사용 (OAuth 아님)
- HTTP 상태코드별 에러 메시지 세분화
- 결제완료/주문확인 상태만 수집 (status 쿼리 파라미터로 서버에서 필터)
- CS(취소/반품/교환)는 읽기 전용 조회
"""
import time
from typing import List, Dict, Any, Optional, Callable, TypeVar
from datetime import datetime

import httpx

from channel_sync.core.ports.channel_port import ChannelAdapter
from channel_sync.core.ports.clock_port import ClockPort
from channel_sync.core.entities.order import CanonicalOrder
from channel_sync.core.entities.claim import CanonicalClaim
from channel_sync.core.entities.sales import SalesAggregate
from channel_sync.core.entities.product_status import ProductStatusRecord
from channel_sync.core.exceptions import (
    ChannelApiError, ChannelAuthError, ConfigurationError, NetworkError
)
from channel_sync.adapters.clock_adapter import SystemClock
from channel_sync.adapters.channels.conversion import (
    convert_order, convert_claim, convert_goods, format_api_date
)
from channel_sync.shared.config import get_settings
from channel_sync.shared.logging import get_logger, log_api_request, log_channel_sync

logger = get_logger(__name__)

T = TypeVar('T')

CHANNEL_NAME = "무신사"
PARTNER_KEY_HEADER = "MUSINSA-PARTNER-KEY"

ORDERS_PATH = "/api/v1/orders"
CLAIMS_PATH = "/api/v1/claims"
SETTLEMENTS_PATH = "/api/v1/settlements"
GOODS_PATH = "/api/v1/goods"

ORDER_PAGE_SIZE = 50
CLAIM_PAGE_SIZE = 50
GOODS_PAGE_SIZE = 100

# 수집 대상 상태 (결제완료, 주문확인)
COLLECTIBLE_STATUSES = ("결제완료", "주문확인")

# 무신사 API 에러 코드별 메시지
ERROR_MESSAGES: Dict[int, str] = {
    400: "[무신사] 요청 형식이 잘못되었습니다. 파라미터를 확인해 주세요.",
    401: "[무신사] API 인증키가 올바르지 않거나 만료되었습니다. 파트너센터에서 키를 재확인해 주세요.",
    403: (
        "[무신사] 접근이 거부되었습니다. 가능한 원인:\n"
        "  1) 서버 IP가 화이트리스트에 등록되지 않았습니다\n"
        "  2) API 대행사 설정이 일치하지 않습니다\n"
        "  3) 서브 계정으로는 접근할 수 없습니다 (마스터 계정 필요)"
    ),
    404: "[무신사] 요청한 API 경로를 찾을 수 없습니다. Base URL을 확인해 주세요.",
    429: "[무신사] 요청 횟수가 너무 많습니다. 잠시 후 다시 시도해 주세요.",
    500: "[무신사] 무신사 서버 내부 오류입니다. 잠시 후 다시 시도해 주세요.",
    503: "[무신사] 무신사 서버가 점검 중입니다. 잠시 후 다시 시도해 주세요.",
}

AUTH_STATUS_CODES = (401, 403)


def error_message_for(status_code: int) -> str:
    """상태코드 → 에러 메시지 (목록에 없으면 일반 메시지)"""
    return ERROR_MESSAGES.get(status_code, f"[무신사] 알 수 없는 오류 (HTTP {status_code})")


class MusinsaAdapter(ChannelAdapter):
    """무신사 파트너 API 어댑터 (고정 인증키 헤더)"""

    channel_name = CHANNEL_NAME

    def __init__(
        self,
        config: Dict[str, str],
        client: Optional[httpx.AsyncClient] = None,
        clock: Optional[ClockPort] = None,
        timeout: Optional[float] = None
    ):
        settings = get_settings()
        self.api_key = config.get("apiKey") or settings.musinsa_api_key or ""
        self.base_url = (config.get("baseUrl") or settings.musinsa_api_url).rstrip("/")
        self.timeout = timeout or settings.channel_request_timeout
        self.clock = clock or SystemClock()

        if not self.api_key:
            raise ConfigurationError(
                "[무신사] API 인증키가 설정되지 않았습니다.\n설정 → 무신사 → API 키 입력이 필요합니다."
            )

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=self.timeout)
        self._verified = False

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    # ─── HTTP 요청 공통 메서드 ───
    async def _request(
        self,
        path: str,
        method: str = "GET",
        body: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """모든 API 호출은 이 메서드를 통과한다"""
        url = f"{self.base_url}{path}"
        headers = {
            PARTNER_KEY_HEADER: self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        started = time.perf_counter()
        try:
            response = await self.client.request(
                method,
                url,
                params=params,
                json=body if body is not None and method.upper() == "POST" else None,
                headers=headers,
                timeout=self.timeout,
            )
        except httpx.TransportError as e:
            logger.error(f"[무신사] 네트워크 오류 ({type(e).__name__}): {url}")
            raise NetworkError(
                f"[무신사] 서버에 연결할 수 없습니다.\n"
                f"Base URL ({self.base_url})을 확인하거나, 네트워크 상태를 점검해 주세요.",
                channel=self.channel_name,
                details={"base_url": self.base_url, "reason": type(e).__name__}
            ) from e

        log_api_request(logger, method.upper(), path, response.status_code, time.perf_counter() - started)

        if not response.is_success:
            raise self._build_error(response)

        try:
            payload = response.json()
        except ValueError as e:
            raise ChannelApiError(
                response.status_code,
                f"[무신사] 응답 형식 오류: JSON 이 아닙니다. ({response.text[:100]})",
                channel=self.channel_name,
                details={"body": response.text[:200]}
            ) from e

        if not isinstance(payload, dict):
            raise ChannelApiError(
                response.status_code,
                f"[무신사] 응답 형식 오류: 객체가 아닙니다. ({type(payload).__name__})",
                channel=self.channel_name
            )
        return payload

    def _build_error(self, response: httpx.Response) -> ChannelApiError:
        """상태코드별 예외 생성 (응답 본문 일부를 상세로 첨부)"""
        status_code = response.status_code
        message = error_message_for(status_code)
        detail = response.text[:200] if response.text else ""
        if detail:
            message = f"{message}\n상세: {detail}"

        error_class = ChannelAuthError if status_code in AUTH_STATUS_CODES else ChannelApiError
        return error_class(status_code, message, channel=self.channel_name, details={"body": detail})

    async def _collect_pages(
        self,
        path: str,
        page_size: int,
        convert: Callable[[Dict[str, Any]], T],
        params: Optional[Dict[str, str]] = None,
        label: str = "데이터"
    ) -> List[T]:
        """page=1 부터 순차 조회; 마지막 페이지가 page_size 보다 작거나 비면 종료"""
        results: List[T] = []
        page = 1

        while True:
            query = {"page": str(page), "size": str(page_size)}
            if params:
                query.update(params)

            try:
                response = await self._request(path, "GET", params=query)
            except ChannelApiError:
                logger.error(f"[무신사] {label} 수집 {page}페이지 오류")
                raise

            rows = response.get("data") or []
            if not rows:
                break

            results.extend(convert(row) for row in rows)

            if len(rows) < page_size:
                break
            page += 1

        return results

    # ─── 인증 확인 ───
    async def authenticate(self) -> None:
        """주문 1건 조회로 인증키·IP 허용 여부 확인 (한 번 성공하면 재호출 생략)"""
        if self._verified:
            return

        await self._request(ORDERS_PATH, "GET", params={"page": "1", "size": "1"})
        self._verified = True
        logger.info("[무신사] API 연결 테스트 성공")

    # ─── 주문 수집 ───
    async def fetch_orders(self, since: datetime) -> List[CanonicalOrder]:
        """결제완료/주문확인 상태 주문만 수집"""
        logger.info(f"[무신사] {since.isoformat()} 이후 주문 수집 시작")
        now = self.clock.now()

        orders = await self._collect_pages(
            ORDERS_PATH,
            ORDER_PAGE_SIZE,
            lambda row: convert_order(row, now),
            params={
                "startDate": format_api_date(since),
                "endDate": format_api_date(now),
                "status": ",".join(COLLECTIBLE_STATUSES),
            },
            label="주문"
        )

        log_channel_sync(logger, self.channel_name, "주문 수집 완료", len(orders))
        return orders

    # ─── CS(클레임) 조회 (읽기 전용) ───
    async def fetch_claims(self, since: datetime) -> List[CanonicalClaim]:
        """취소/반품/교환 조회 (처리는 파트너센터에서 직접)"""
        logger.info(f"[무신사] {since.isoformat()} 이후 CS 조회 시작")
        now = self.clock.now()

        claims = await self._collect_pages(
            CLAIMS_PATH,
            CLAIM_PAGE_SIZE,
            lambda row: convert_claim(row, now),
            params={
                "startDate": format_api_date(since),
                "endDate": format_api_date(now),
            },
            label="CS"
        )

        log_channel_sync(logger, self.channel_name, "CS 조회 완료", len(claims))
        return claims

    # ─── 매출 리포트 ───
    async def fetch_sales_report(self, date_from: datetime, date_to: datetime) -> SalesAggregate:
        logger.info(f"[무신사] {date_from.isoformat()} ~ {date_to.isoformat()} 매출 리포트 요청")

        response = await self._request(
            SETTLEMENTS_PATH,
            "GET",
            params={
                "startDate": format_api_date(date_from),
                "endDate": format_api_date(date_to),
            }
        )
        data = response.get("data") or {}

        return SalesAggregate(
            channel_name=self.channel_name,
            period_start=date_from,
            period_end=date_to,
            total_sales=data.get("totalSales") or 0,
            total_commission=data.get("totalCommission") or 0,
            net_amount=data.get("netAmount") or 0,
            order_count=data.get("orderCount") or 0,
        )

    async def handle_webhook(self, payload: Any) -> None:
        # 무신사는 Webhook 을 제공하지 않음
        logger.info(f"[무신사] Webhook 수신 (처리 대상 아님): {type(payload).__name__}")

    # ─── 상품 상태 조회 ───
    async def fetch_product_status(self) -> List[ProductStatusRecord]:
        """전체 상품의 판매 상태"""
        logger.info("[무신사] 상품 상태 조회 시작")

        products = await self._collect_pages(GOODS_PATH, GOODS_PAGE_SIZE, convert_goods, label="상품")

        log_channel_sync(logger, self.channel_name, "상품 상태 조회 완료", len(products))
        return products
