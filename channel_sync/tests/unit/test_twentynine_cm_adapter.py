"""29CM 어댑터 테스트 (미연동 채널 계약)"""
import pytest
import httpx
from datetime import datetime

from channel_sync.adapters.channels.twentynine_cm_adapter import TwentyNineCMAdapter, PARTNER_KEY_HEADER
from channel_sync.core.exceptions import ConfigurationError

SINCE = datetime(2024, 5, 1)


@pytest.fixture
def no_network(monkeypatch):
    """외부 요청이 나가면 실패"""
    def forbidden(*args, **kwargs):
        raise AssertionError("29CM 어댑터는 네트워크를 사용하지 않습니다")

    monkeypatch.setattr(httpx.AsyncClient, "send", forbidden)


class TestTwentyNineCMAdapter:
    """29CM 어댑터 테스트"""

    def test_missing_partner_key(self):
        with pytest.raises(ConfigurationError):
            TwentyNineCMAdapter({"partnerKey": ""})

    def test_headers_and_base_url(self):
        adapter = TwentyNineCMAdapter({"partnerKey": "p-key", "baseUrl": "https://api.29cm.test/"})

        assert adapter.headers[PARTNER_KEY_HEADER] == "p-key"
        assert adapter.base_url == "https://api.29cm.test"
        assert adapter.supports_claims is False
        assert adapter.token_key is None

    @pytest.mark.asyncio
    async def test_contract_without_network(self, no_network):
        """인증·주문·매출·Webhook 모두 예외 없이 빈 결과"""
        async with TwentyNineCMAdapter({"partnerKey": "p-key"}) as adapter:
            await adapter.authenticate()
            orders = await adapter.fetch_orders(SINCE)
            aggregate = await adapter.fetch_sales_report(SINCE, datetime(2024, 5, 31))
            await adapter.handle_webhook({"event": "order"})

        assert orders == []
        assert aggregate.channel_name == "29CM"
        assert (aggregate.total_sales, aggregate.order_count, aggregate.items) == (0, 0, [])
        assert aggregate.period_start == SINCE

    @pytest.mark.asyncio
    async def test_claims_not_supported(self):
        adapter = TwentyNineCMAdapter({"partnerKey": "p-key"})

        with pytest.raises(NotImplementedError):
            await adapter.fetch_claims(SINCE)
