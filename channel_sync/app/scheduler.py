"""이지어드민 일일 자동 수집 스케줄러 (APScheduler)"""
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from channel_sync.adapters.scraping.ezadmin_scraper import EzadminScraper
from channel_sync.shared.config import Settings
from channel_sync.shared.logging import get_logger

logger = get_logger(__name__)

DAILY_COLLECTION_JOB_ID = "ezadmin-daily-collection"


async def run_daily_collection(scraper: EzadminScraper) -> None:
    """주문 → 재고 순서로 수집 (실패해도 다음 수집은 계속)"""
    logger.info("[스케줄러] 이지어드민 일일 수집 시작")

    orders = await scraper.scrape_orders()
    if orders.success:
        logger.info(f"[스케줄러] 주문 {orders.total_count}건 수집")
    else:
        logger.error(f"[스케줄러] 주문 수집 실패: {orders.error}")

    stock = await scraper.scrape_stock()
    if stock.success:
        logger.info(f"[스케줄러] 재고 {stock.total_count}건 수집")
    else:
        logger.error(f"[스케줄러] 재고 수집 실패: {stock.error}")


def create_scheduler(scraper: EzadminScraper, settings: Settings) -> Optional[AsyncIOScheduler]:
    """설정이 켜져 있으면 cron 작업을 등록한 스케줄러 (시작은 호출자가)"""
    if not settings.ezadmin_schedule_enabled:
        return None

    scheduler = AsyncIOScheduler(timezone=settings.ezadmin_schedule_timezone)
    scheduler.add_job(
        run_daily_collection,
        "cron",
        args=[scraper],
        id=DAILY_COLLECTION_JOB_ID,
        hour=settings.ezadmin_schedule_hour,
        minute=settings.ezadmin_schedule_minute,
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    logger.info(
        f"[스케줄러] 이지어드민 일일 수집 등록: 매일 "
        f"{settings.ezadmin_schedule_hour:02d}:{settings.ezadmin_schedule_minute:02d} "
        f"({settings.ezadmin_schedule_timezone})"
    )
    return scheduler
