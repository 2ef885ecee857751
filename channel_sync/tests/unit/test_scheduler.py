"""이지어드민 일일 수집 스케줄러 테스트"""
import pytest

from channel_sync.app.scheduler import DAILY_COLLECTION_JOB_ID, create_scheduler, run_daily_collection
from channel_sync.core.entities.scrape_result import ScrapeResult
from channel_sync.shared.config import Settings


class RecordingScraper:
    """호출 순서를 기록하는 스크래퍼"""

    def __init__(self, orders_ok: bool = True):
        self.calls = []
        self.orders_ok = orders_ok

    async def scrape_orders(self):
        self.calls.append("orders")
        if not self.orders_ok:
            return ScrapeResult.failed("이지어드민 로그인 실패")
        return ScrapeResult.ok([{"주문번호": "1"}])

    async def scrape_stock(self):
        self.calls.append("stock")
        return ScrapeResult.ok([{"상품코드": "A-1"}, {"상품코드": "A-2"}])


class TestCreateScheduler:
    """스케줄러 등록 테스트"""

    def test_disabled_by_default(self):
        assert create_scheduler(RecordingScraper(), Settings()) is None

    def test_daily_cron_job(self):
        scraper = RecordingScraper()
        scheduler = create_scheduler(scraper, Settings(ezadmin_schedule_enabled=True))

        job = scheduler.get_job(DAILY_COLLECTION_JOB_ID)
        fields = {field.name: str(field) for field in job.trigger.fields}

        assert fields["hour"] == "9"
        assert fields["minute"] == "30"
        assert str(job.trigger.timezone) == "Asia/Seoul"
        assert job.args == (scraper,)
        assert job.max_instances == 1
        assert job.coalesce is True
        assert len(scheduler.get_jobs()) == 1

    def test_custom_time(self):
        settings = Settings(ezadmin_schedule_enabled=True, ezadmin_schedule_hour=6, ezadmin_schedule_minute=5)

        job = create_scheduler(RecordingScraper(), settings).get_job(DAILY_COLLECTION_JOB_ID)
        fields = {field.name: str(field) for field in job.trigger.fields}

        assert (fields["hour"], fields["minute"]) == ("6", "5")


class TestDailyCollection:
    """일일 수집 작업 테스트"""

    @pytest.mark.asyncio
    async def test_orders_then_stock(self, caplog):
        scraper = RecordingScraper()

        await run_daily_collection(scraper)

        assert scraper.calls == ["orders", "stock"]
        assert any("재고 2건" in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_stock_still_collected_after_order_failure(self, caplog):
        scraper = RecordingScraper(orders_ok=False)

        await run_daily_collection(scraper)

        assert scraper.calls == ["orders", "stock"]
        assert any("주문 수집 실패" in record.getMessage() for record in caplog.records)
