"""무신사 어댑터 테스트 (httpx.MockTransport)"""
import pytest
import httpx
from datetime import datetime

from channel_sync.adapters.channels.musinsa_adapter import (
    MusinsaAdapter, ERROR_MESSAGES, PARTNER_KEY_HEADER, COLLECTIBLE_STATUSES
)
from channel_sync.core.exceptions import (
    ChannelApiError, ChannelAuthError, AuthError, ConfigurationError, NetworkError
)
from channel_sync.core.entities.order import OrderStatus
from channel_sync.core.entities.product_status import ProductSaleStatus
from channel_sync.shared.config import settings

BASE_URL = "https://partner.test"
SINCE = datetime(2024, 5, 1)


def make_adapter(handler, fake_clock) -> MusinsaAdapter:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MusinsaAdapter({"apiKey": "test-key", "baseUrl": BASE_URL}, client=client, clock=fake_clock)


def order_rows(start: int, count: int):
    return [
        {
            "orderId": f"ORD-{n}",
            "orderNumber": f"2024052{n:05d}",
            "orderStatus": "결제완료",
            "totalPrice": 10000,
            "items": [{"goodsNo": "G1", "optionNo": "S", "goodsName": "티셔츠", "quantity": 1, "price": 10000}],
        }
        for n in range(start, start + count)
    ]


class TestMusinsaConfiguration:
    """설정 검증 테스트"""

    def test_missing_api_key(self, monkeypatch):
        """API 키가 없으면 생성 시점에 ConfigurationError"""
        monkeypatch.setattr(settings, "musinsa_api_key", None)

        with pytest.raises(ConfigurationError):
            MusinsaAdapter({})

    def test_supports_claims(self, fake_clock):
        adapter = make_adapter(lambda request: httpx.Response(200, json={}), fake_clock)
        assert adapter.supports_claims is True


class TestMusinsaErrors:
    """상태코드별 에러 메시지 테스트"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", sorted(ERROR_MESSAGES))
    async def test_status_code_catalog(self, status_code, fake_clock):
        """각 상태코드는 고정 메시지와 같은 status_code 를 가진 오류로"""
        adapter = make_adapter(lambda request: httpx.Response(status_code), fake_clock)

        with pytest.raises(ChannelApiError) as exc_info:
            await adapter.authenticate()

        error = exc_info.value
        assert error.status_code == status_code
        assert error.message == ERROR_MESSAGES[status_code]
        assert isinstance(error, AuthError) == (status_code in (401, 403))

    @pytest.mark.asyncio
    async def test_error_body_is_attached(self, fake_clock):
        adapter = make_adapter(lambda request: httpx.Response(403, text="IP not allowed"), fake_clock)

        with pytest.raises(ChannelAuthError) as exc_info:
            await adapter.authenticate()

        assert exc_info.value.message.startswith(ERROR_MESSAGES[403])
        assert "상세: IP not allowed" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_network_error(self, fake_clock):
        """연결 실패는 status_code 0 의 NetworkError"""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        adapter = make_adapter(handler, fake_clock)

        with pytest.raises(NetworkError) as exc_info:
            await adapter.fetch_orders(SINCE)

        assert exc_info.value.status_code == 0
        assert exc_info.value.retryable is True
        assert BASE_URL in exc_info.value.message

    @pytest.mark.asyncio
    async def test_retryable_flags(self, fake_clock):
        adapter = make_adapter(lambda request: httpx.Response(429), fake_clock)

        with pytest.raises(ChannelApiError) as exc_info:
            await adapter.fetch_orders(SINCE)

        assert exc_info.value.retryable is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="<html>점검 안내</html>"),
        httpx.Response(200, json=[{"orderId": "O1"}]),
    ])
    async def test_malformed_success_body(self, fake_clock, response):
        """2xx 라도 JSON 객체가 아니면 ChannelApiError"""
        adapter = make_adapter(lambda request: response, fake_clock)

        with pytest.raises(ChannelApiError) as exc_info:
            await adapter.fetch_orders(SINCE)

        assert "응답 형식 오류" in exc_info.value.message
        assert exc_info.value.channel == "무신사"


class TestMusinsaOrders:
    """주문 수집 테스트"""

    @pytest.mark.asyncio
    async def test_two_pages_concatenated(self, fake_clock):
        """50건 + 10건 페이지 → 60건, 상태 필터는 쿼리 파라미터로"""
        requests = []

        def handler(request: httpx.Request):
            requests.append(request)
            page = int(request.url.params["page"])
            rows = {1: order_rows(0, 50), 2: order_rows(50, 10)}.get(page, [])
            return httpx.Response(200, json={"data": rows})

        adapter = make_adapter(handler, fake_clock)
        orders = await adapter.fetch_orders(SINCE)

        assert len(orders) == 60
        assert [o.external_order_id for o in orders[:2]] == ["ORD-0", "ORD-1"]
        assert orders[-1].external_order_id == "ORD-59"
        assert all(o.status == OrderStatus.PAYMENT_COMPLETED for o in orders)

        assert len(requests) == 2
        for request in requests:
            assert request.url.path == "/api/v1/orders"
            assert request.headers[PARTNER_KEY_HEADER] == "test-key"
            assert request.url.params["status"] == ",".join(COLLECTIBLE_STATUSES)
            assert request.url.params["size"] == "50"
            assert request.url.params["startDate"] == "2024-05-01"
            assert request.url.params["endDate"] == "2024-05-20"

    @pytest.mark.asyncio
    async def test_exact_multiple_stops_on_empty_page(self, fake_clock):
        """마지막 페이지가 꽉 차 있으면 빈 페이지에서 종료"""
        calls = []

        def handler(request):
            page = int(request.url.params["page"])
            calls.append(page)
            return httpx.Response(200, json={"data": order_rows(0, 50) if page == 1 else []})

        orders = await make_adapter(handler, fake_clock).fetch_orders(SINCE)

        assert len(orders) == 50
        assert calls == [1, 2]

    @pytest.mark.asyncio
    async def test_later_page_failure_discards_partial_result(self, fake_clock):
        """2페이지 503 이면 1페이지 결과 없이 오류 전파, 3페이지는 요청하지 않음"""
        calls = []

        def handler(request):
            page = int(request.url.params["page"])
            calls.append(page)
            if page == 2:
                return httpx.Response(503)
            return httpx.Response(200, json={"data": order_rows(0, 50)})

        with pytest.raises(ChannelApiError) as exc_info:
            await make_adapter(handler, fake_clock).fetch_orders(SINCE)

        assert exc_info.value.status_code == 503
        assert exc_info.value.message == ERROR_MESSAGES[503]
        assert exc_info.value.retryable is True
        assert calls == [1, 2]

    @pytest.mark.asyncio
    async def test_authenticate_is_cached(self, fake_clock):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"data": []})

        adapter = make_adapter(handler, fake_clock)
        await adapter.authenticate()
        await adapter.authenticate()

        assert len(calls) == 1
        assert calls[0].url.params["size"] == "1"


class TestMusinsaClaimsAndSales:
    """CS / 매출 / 상품상태 테스트"""

    @pytest.mark.asyncio
    async def test_fetch_claims(self, fake_clock):
        def handler(request):
            assert request.url.path == "/api/v1/claims"
            return httpx.Response(200, json={"data": [
                {"claimNo": "C1", "orderId": "O1", "claimType": "반품", "claimStatus": "접수"},
            ]})

        claims = await make_adapter(handler, fake_clock).fetch_claims(SINCE)

        assert len(claims) == 1
        assert claims[0].claim_type.value == "RETURN"

    @pytest.mark.asyncio
    async def test_sales_report(self, fake_clock):
        def handler(request):
            assert request.url.path == "/api/v1/settlements"
            return httpx.Response(200, json={"data": {
                "totalSales": 1000000, "totalCommission": 250000, "netAmount": 750000, "orderCount": 42
            }})

        aggregate = await make_adapter(handler, fake_clock).fetch_sales_report(SINCE, datetime(2024, 5, 31))

        assert aggregate.channel_name == "무신사"
        assert aggregate.net_amount == 750000
        assert aggregate.order_count == 42

    @pytest.mark.asyncio
    async def test_sales_report_without_data(self, fake_clock):
        aggregate = await make_adapter(
            lambda request: httpx.Response(200, json={}), fake_clock
        ).fetch_sales_report(SINCE, datetime(2024, 5, 31))

        assert aggregate.total_sales == 0

    @pytest.mark.asyncio
    async def test_product_status_pages_of_100(self, fake_clock):
        def handler(request):
            assert request.url.params["size"] == "100"
            page = int(request.url.params["page"])
            count = 100 if page == 1 else 3
            rows = [{"goodsNo": f"{page}-{n}", "saleStatus": "ON_SALE"} for n in range(count)]
            return httpx.Response(200, json={"data": rows})

        products = await make_adapter(handler, fake_clock).fetch_product_status()

        assert len(products) == 103
        assert products[0].status == ProductSaleStatus.ON_SALE
