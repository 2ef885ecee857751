"""카페24 (자사몰 LLUD) 채널 어댑터: OAuth 2.0 Refresh Token 인증"""
import time
from typing import List, Dict, Any, Optional
from datetime import datetime

import httpx

from channel_sync.core.ports.channel_port import ChannelAdapter
from channel_sync.core.ports.clock_port import ClockPort
from channel_sync.core.ports.token_sink import RefreshTokenSink
from channel_sync.core.entities.order import CanonicalOrder
from channel_sync.core.entities.sales import SalesAggregate, SalesLine
from channel_sync.core.entities.token import TokenState
from channel_sync.core.exceptions import AuthError, ChannelApiError, ConfigurationError, NetworkError
from channel_sync.adapters.clock_adapter import SystemClock
from channel_sync.adapters.channels.conversion import convert_cafe24_order, format_api_date
from channel_sync.shared.config import get_settings
from channel_sync.shared.logging import get_logger, log_api_request, log_channel_sync

logger = get_logger(__name__)

CHANNEL_NAME = "LLUD (카페24)"
REQUIRED_KEYS = ("mallId", "clientId", "clientSecret", "refreshToken")
TOKEN_PATH = "/api/v2/oauth/token"
ORDERS_PATH = "/api/v2/admin/orders"
API_VERSION = "2024-06-01"
ORDER_PAGE_SIZE = 100
# 만료 직전 토큰으로 요청하지 않도록 미리 갱신
TOKEN_EXPIRY_BUFFER_MINUTES = 5


def _json_body(response: httpx.Response) -> Any:
    """2xx 응답 본문 파싱 (JSON 이 아니면 응답 형식 오류)"""
    try:
        return response.json()
    except ValueError as e:
        raise ChannelApiError(
            response.status_code,
            f"[카페24] 응답 형식 오류: JSON 이 아닙니다. ({response.text[:100]})",
            channel=CHANNEL_NAME
        ) from e


class Cafe24Adapter(ChannelAdapter):
    """카페24 Admin API 어댑터

    Access Token 은 인스턴스 메모리에만 보관하고, 만료 시에만 갱신한다.
    """

    channel_name = CHANNEL_NAME

    def __init__(
        self,
        config: Dict[str, str],
        client: Optional[httpx.AsyncClient] = None,
        clock: Optional[ClockPort] = None,
        token_sink: Optional[RefreshTokenSink] = None,
        timeout: Optional[float] = None
    ):
        missing = [key for key in REQUIRED_KEYS if not config.get(key)]
        if missing:
            raise ConfigurationError(
                f"[카페24 어댑터] {', '.join(REQUIRED_KEYS)}이 필요합니다. (누락: {', '.join(missing)})"
            )

        settings = get_settings()
        self.mall_id = config["mallId"]
        self.client_id = config["clientId"]
        self.client_secret = config["clientSecret"]
        self.refresh_token = config["refreshToken"]
        self.base_url = f"https://{self.mall_id}.{settings.cafe24_api_domain}"
        self.timeout = timeout or settings.channel_request_timeout
        self.clock = clock or SystemClock()
        self.token_sink = token_sink
        self.token_key = f"cafe24:{self.mall_id}"
        self.token = TokenState()

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=self.timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def authenticate(self) -> None:
        """Access Token 발급/갱신 (아직 유효하면 생략)"""
        expired = self.clock.is_expired(self.token.expires_at, TOKEN_EXPIRY_BUFFER_MINUTES)
        if self.token.access_token and not expired:
            return

        await self._load_stored_refresh_token()

        try:
            response = await self.client.post(
                f"{self.base_url}{TOKEN_PATH}",
                auth=(self.client_id, self.client_secret),
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": self.refresh_token,
                },
                timeout=self.timeout,
            )
        except httpx.TransportError as e:
            raise NetworkError(
                f"[카페24] 토큰 서버에 연결할 수 없습니다. ({self.base_url})",
                channel=self.channel_name
            ) from e

        if not response.is_success:
            raise AuthError(
                f"[카페24 인증 실패] HTTP {response.status_code}: {response.text[:200]}",
                details={"status_code": response.status_code}
            )

        token = _json_body(response)
        access_token = token.get("access_token") if isinstance(token, dict) else None
        if not access_token:
            raise AuthError(
                "[카페24 인증 실패] 토큰 응답에 access_token 이 없습니다.",
                details={"status_code": response.status_code, "body": response.text[:200]}
            )
        self.token.update(access_token, int(token.get("expires_in") or 0), self.clock.now())

        rotated = token.get("refresh_token")
        if rotated and rotated != self.refresh_token:
            self.refresh_token = rotated
            await self._persist_refresh_token(rotated)

        logger.info(f"[카페24] 토큰 갱신 완료 (만료: {self.token.expires_at.isoformat()})")

    async def _load_stored_refresh_token(self) -> None:
        """이전 작업이 교체 발급받아 보관한 토큰이 있으면 설정값 대신 사용"""
        if self.token_sink is None:
            return
        stored = await self.token_sink.get_refresh_token(self.token_key)
        if stored and stored != self.refresh_token:
            logger.info(f"[카페24] 보관된 Refresh Token 사용 ({self.token_key})")
            self.refresh_token = stored

    async def _persist_refresh_token(self, refresh_token: str) -> None:
        """교체 발급된 Refresh Token 을 다음 실행을 위해 넘김"""
        if self.token_sink is None:
            logger.warning("[카페24] 새 Refresh Token 발급됨: 저장소가 연결되지 않아 채널 설정 업데이트 필요")
            return
        try:
            await self.token_sink.save_refresh_token(self.token_key, refresh_token)
            logger.info("[카페24] 새 Refresh Token 저장 완료")
        except Exception as e:
            logger.error(f"[카페24] 새 Refresh Token 저장 실패: {e}")

    @property
    def auth_headers(self) -> Dict[str, str]:
        return {
            "Authorization": self.token.authorization or "",
            "Content-Type": "application/json",
            "X-Cafe24-Api-Version": API_VERSION,
        }

    async def _get(self, path: str, params: Dict[str, str]) -> Dict[str, Any]:
        started = time.perf_counter()
        try:
            response = await self.client.get(
                f"{self.base_url}{path}", params=params, headers=self.auth_headers, timeout=self.timeout
            )
        except httpx.TransportError as e:
            raise NetworkError(
                f"[카페24] 서버에 연결할 수 없습니다. ({self.base_url})",
                channel=self.channel_name
            ) from e

        log_api_request(logger, "GET", path, response.status_code, time.perf_counter() - started)
        if not response.is_success:
            raise ChannelApiError(
                response.status_code,
                f"[카페24] API 오류 (HTTP {response.status_code}): {response.text[:200]}",
                channel=self.channel_name
            )
        body = _json_body(response)
        if not isinstance(body, dict):
            raise ChannelApiError(
                response.status_code,
                f"[카페24] 응답 형식 오류: 객체가 아닙니다. ({type(body).__name__})",
                channel=self.channel_name
            )
        return body

    async def _collect_orders(self, date_from: datetime, date_to: datetime) -> List[CanonicalOrder]:
        """offset 페이지네이션으로 기간 주문 전체 조회"""
        now = self.clock.now()
        orders: List[CanonicalOrder] = []
        offset = 0

        while True:
            response = await self._get(ORDERS_PATH, {
                "start_date": format_api_date(date_from),
                "end_date": format_api_date(date_to),
                "limit": str(ORDER_PAGE_SIZE),
                "offset": str(offset),
                "embed": "items,receivers",
            })
            rows = response.get("orders") or []
            if not rows:
                break

            orders.extend(convert_cafe24_order(row, now) for row in rows)

            if len(rows) < ORDER_PAGE_SIZE:
                break
            offset += ORDER_PAGE_SIZE

        return orders

    async def fetch_orders(self, since: datetime) -> List[CanonicalOrder]:
        await self.authenticate()

        logger.info(f"[카페24] {since.isoformat()} 이후 주문 수집 요청")
        orders = await self._collect_orders(since, self.clock.now())

        log_channel_sync(logger, self.channel_name, "주문 수집 완료", len(orders))
        return orders

    async def fetch_sales_report(self, date_from: datetime, date_to: datetime) -> SalesAggregate:
        """자사몰은 정산 API 가 없어 기간 주문 합계로 집계 (수수료 0)"""
        await self.authenticate()

        logger.info(f"[카페24] {date_from.isoformat()} ~ {date_to.isoformat()} 매출 리포트 요청")
        orders = await self._collect_orders(date_from, date_to)
        total_sales = sum(order.total_amount for order in orders)

        lines: Dict[str, SalesLine] = {}
        for order in orders:
            for item in order.items:
                code = item.external_product_id or item.product_name
                line = lines.setdefault(code, SalesLine(code, item.product_name, 0, 0))
                line.quantity += item.quantity
                line.sales_amount += item.line_total()

        return SalesAggregate(
            channel_name=self.channel_name,
            period_start=date_from,
            period_end=date_to,
            total_sales=total_sales,
            total_commission=0,
            net_amount=total_sales,
            order_count=len(orders),
            items=list(lines.values()),
        )

    async def handle_webhook(self, payload: Any) -> None:
        """주문 이벤트 Webhook (resource.order_id): 그 외 형태는 로그만"""
        resource = payload.get("resource") if isinstance(payload, dict) else None
        if isinstance(resource, dict) and resource.get("order_id"):
            logger.info(
                f"[카페24] Webhook 주문 이벤트 수신: event_no={payload.get('event_no')} order_id={resource['order_id']}"
            )
            return
        logger.warning(f"[카페24] 알 수 없는 Webhook 페이로드: {type(payload).__name__}")
