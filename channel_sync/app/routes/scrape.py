"""이지어드민 스크래핑 라우트

스크래핑 실패는 HTTP 오류가 아니라 success=False 결과로 응답한다.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from channel_sync.app.di import get_clock, get_ezadmin_scraper
from channel_sync.adapters.scraping.ezadmin_scraper import EzadminScraper
from channel_sync.adapters.scraping.row_mapping import convert_rows, scraped_row_to_order, scraped_row_to_stock
from channel_sync.core.entities.scrape_result import ScrapeResult
from channel_sync.core.ports.clock_port import ClockPort
from channel_sync.presentation.schemas.channels import ScrapeResponse
from channel_sync.shared.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)

SCRAPE_KINDS = ("stock", "orders", "product-status", "explore")


def _to_response(result: ScrapeResult, records=None) -> ScrapeResponse:
    return ScrapeResponse(
        success=result.success,
        data=result.data,
        error=result.error,
        current_url=result.current_url,
        total_count=result.total_count,
        headers=result.headers,
        records=[record.to_dict() for record in records or []],
        meta=result.meta,
    )


@router.post("/close")
async def close_browser(scraper: EzadminScraper = Depends(get_ezadmin_scraper)):
    """공유 브라우저 종료"""
    await scraper.close()
    return {"success": True, "message": "브라우저 종료"}


@router.post("/{kind}", response_model=ScrapeResponse)
async def run_scrape(
    kind: str,
    scraper: EzadminScraper = Depends(get_ezadmin_scraper),
    clock: ClockPort = Depends(get_clock)
):
    """스크래핑 실행 (stock / orders / product-status / explore)"""
    if kind not in SCRAPE_KINDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"알 수 없는 스크래핑 유형: {kind} (가능: {', '.join(SCRAPE_KINDS)})"
        )

    if kind == "stock":
        result = await scraper.scrape_stock()
        records = convert_rows(result.data, scraped_row_to_stock, result.headers)
        return _to_response(result, records)

    if kind == "orders":
        result = await scraper.scrape_orders()
        records = convert_rows(result.data, scraped_row_to_order, clock.now())
        if result.success:
            logger.info(f"[주문수집] {len(result.data)}행 중 주문 {len(records)}건 변환")
        return _to_response(result, records)

    if kind == "product-status":
        return _to_response(await scraper.scrape_product_status())

    return _to_response(await scraper.explore())
