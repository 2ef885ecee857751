"""의존성 주입 설정"""
from functools import partial
from fastapi import Depends, Request

from channel_sync.core.ports.clock_port import ClockPort
from channel_sync.core.ports.token_sink import RefreshTokenSink
from channel_sync.core.usecases.sync_channel import AdapterFactory, SyncChannelUseCase
from channel_sync.adapters.channels.factory import AdapterDependencies, create_channel_adapter
from channel_sync.adapters.clock_adapter import SystemClock
from channel_sync.adapters.scraping.browser_pool import BrowserPool
from channel_sync.adapters.scraping.ezadmin_scraper import EzadminScraper
from channel_sync.shared.config import Settings, get_settings
from channel_sync.shared.logging import get_logger

logger = get_logger(__name__)


def get_app_settings() -> Settings:
    """설정"""
    return get_settings()


def get_clock() -> ClockPort:
    """클록 포트 구현체"""
    return SystemClock()


# 앱 수명 동안 공유되는 객체는 app.state 에 둔다 (main.lifespan 에서 생성)
def get_browser_pool(request: Request) -> BrowserPool:
    return request.app.state.browser_pool


def get_token_sink(request: Request) -> RefreshTokenSink:
    return request.app.state.token_store


def get_adapter_factory(
    clock: ClockPort = Depends(get_clock),
    token_sink: RefreshTokenSink = Depends(get_token_sink)
) -> AdapterFactory:
    """채널 어댑터 팩토리 (요청마다 새 어댑터)"""
    return partial(
        create_channel_adapter,
        dependencies=AdapterDependencies(clock=clock, token_sink=token_sink)
    )


def get_sync_channel_usecase(
    adapter_factory: AdapterFactory = Depends(get_adapter_factory),
    clock: ClockPort = Depends(get_clock),
    token_sink: RefreshTokenSink = Depends(get_token_sink)
) -> SyncChannelUseCase:
    """채널 동기화 유즈케이스"""
    return SyncChannelUseCase(adapter_factory, clock, token_sink)


def get_ezadmin_scraper(
    pool: BrowserPool = Depends(get_browser_pool),
    settings: Settings = Depends(get_app_settings),
    clock: ClockPort = Depends(get_clock)
) -> EzadminScraper:
    """이지어드민 스크래퍼"""
    return EzadminScraper(pool, settings, clock)
