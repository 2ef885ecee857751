"""브라우저 리소스 풀 (Playwright Chromium)

프로세스 수명 동안 브라우저 하나를 공유하고, 작업마다 새 페이지(탭)를 빌려준다.
페이지는 어떤 경로로 끝나든 반드시 닫힌다.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional, Sequence
import asyncio

from playwright.async_api import Browser, Page, Playwright, Route, async_playwright

from channel_sync.shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-gpu",
    "--disable-dev-shm-usage",
)
BLOCKED_RESOURCE_TYPES = ("image", "font", "media")


async def block_heavy_resources(route: Route) -> None:
    """이미지/폰트/미디어와 javascript: URL 요청 차단"""
    request = route.request
    if request.resource_type in BLOCKED_RESOURCE_TYPES or request.url.startswith("javascript:"):
        await route.abort()
    else:
        await route.continue_()


class BrowserPool:
    """공유 브라우저 + 페이지 임대"""

    def __init__(
        self,
        headless: bool = True,
        launch_args: Sequence[str] = DEFAULT_LAUNCH_ARGS,
        default_timeout_ms: Optional[int] = None,
        playwright_factory: Callable = async_playwright
    ):
        self.headless = headless
        self.launch_args = list(launch_args)
        self.default_timeout_ms = default_timeout_ms
        self._playwright_factory = playwright_factory
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def acquire_browser(self) -> Browser:
        """연결된 브라우저 재사용, 끊겼으면 다시 실행"""
        async with self._lock:
            if self._browser is not None and self._browser.is_connected():
                return self._browser

            if self._playwright is None:
                self._playwright = await self._playwright_factory().start()

            logger.info(f"[브라우저] Chromium 실행 (headless={self.headless})")
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=self.launch_args,
            )
            return self._browser

    @asynccontextmanager
    async def lease(self) -> AsyncIterator[Page]:
        """새 페이지 임대 (블록 종료 시 항상 닫음)"""
        browser = await self.acquire_browser()
        page = await browser.new_page()
        try:
            if self.default_timeout_ms:
                page.set_default_timeout(self.default_timeout_ms)
            await page.route("**/*", block_heavy_resources)
            yield page
        finally:
            await self._close_page(page)

    async def _close_page(self, page: Page) -> None:
        try:
            await page.close()
        except Exception as e:
            # 브라우저가 이미 죽은 경우 등. 원래 예외를 가리지 않도록 기록만 한다.
            logger.warning(f"[브라우저] 페이지 닫기 실패: {e}")

    async def close(self) -> None:
        """브라우저와 Playwright 종료"""
        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
                logger.info("[브라우저] 종료")
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
