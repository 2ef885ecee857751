"""FastAPI 애플리케이션 메인 파일 (채널 동기화)"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware

from channel_sync.app.routes import health, channels, scrape
from channel_sync.app.scheduler import create_scheduler
from channel_sync.adapters.auth.token_store import InMemoryRefreshTokenStore
from channel_sync.adapters.clock_adapter import SystemClock
from channel_sync.adapters.scraping.browser_pool import BrowserPool
from channel_sync.adapters.scraping.ezadmin_scraper import EzadminScraper
from channel_sync.shared.config import get_settings
from channel_sync.shared.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


def create_app() -> FastAPI:
    """FastAPI 애플리케이션 생성"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """애플리케이션 생명주기 관리"""
        logger.info("채널 동기화 서비스 시작")

        app.state.browser_pool = BrowserPool(
            headless=settings.scraper_headless,
            default_timeout_ms=settings.scraper_protocol_timeout_ms
        )
        app.state.token_store = InMemoryRefreshTokenStore()
        if not settings.channel_secret_key:
            logger.warning("CHANNEL_SECRET_KEY 가 설정되지 않았습니다: 채널 설정 복호화 불가")

        app.state.scheduler = create_scheduler(
            EzadminScraper(app.state.browser_pool, settings, SystemClock()), settings
        )
        if app.state.scheduler is not None:
            app.state.scheduler.start()

        yield

        if app.state.scheduler is not None:
            app.state.scheduler.shutdown(wait=False)
        await app.state.browser_pool.close()
        logger.info("채널 동기화 서비스 종료")

    app = FastAPI(
        title="채널 동기화 서비스",
        description="외부 판매 채널 주문/CS/매출/상품상태 수집 및 정규화",
        version="1.0.0",
        lifespan=lifespan
    )

    # CORS 미들웨어
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # 실제 운영시 특정 도메인만 허용
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_router = APIRouter(prefix="/api/v1")
    api_router.include_router(health.router, tags=["health"])
    api_router.include_router(channels.router, prefix="/channels", tags=["channels"])
    api_router.include_router(scrape.router, prefix="/scrape", tags=["scrape"])
    app.include_router(api_router)

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return {
            "message": "채널 동기화 API 서버",
            "docs": "/docs",
            "health": "/api/v1/health"
        }

    return app


# 애플리케이션 인스턴스
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "channel_sync.app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower()
    )
