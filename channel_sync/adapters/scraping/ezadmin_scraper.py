"""이지어드민 스크래핑 서비스

API 가 없는 이지어드민을 브라우저로 조작한다.
로그인 → 템플릿 화면 이동 → 검색 → 결과 테이블 탐색 → 페이지네이션 순서로 진행하며,
모든 실패는 예외 대신 ScrapeResult(success=False) 로 반환한다.
"""
import math
import re
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
from urllib.parse import urljoin, urlparse

from playwright.async_api import Error as PlaywrightError, Page

from channel_sync.adapters.scraping.browser_pool import BrowserPool
from channel_sync.adapters.scraping.row_extraction import ScrapedRow, extract_rows, normalize_headers
from channel_sync.adapters.scraping.row_mapping import convert_rows, scraped_row_to_product_status
from channel_sync.adapters.scraping.table_matchers import (
    ReportProfile, STOCK_PROFILE, ORDER_PROFILE, PRODUCT_STATUS_PROFILE, parse_tables, select_table
)
from channel_sync.core.entities.scrape_result import ScrapeResult
from channel_sync.core.exceptions import ChannelSyncError, ConfigurationError, ScrapeError
from channel_sync.core.ports.clock_port import ClockPort
from channel_sync.shared.config import Settings
from channel_sync.shared.logging import get_logger
from channel_sync.shared.waiting import poll_until

logger = get_logger(__name__)

ADMIN_DOMAIN = "ezadmin.co.kr"
SEARCH_LABELS = ("검색", "검색하기")
MAX_MENU_ITEMS = 80

# ─── 페이지 내 실행 스크립트 ───

CRYPTO_READY_SCRIPT = "() => typeof window.encrypt === 'function'"

SHOW_LOGIN_POPUP_SCRIPT = """() => {
    const popup = document.querySelector('#login-popup');
    if (popup) popup.style.display = 'block';
}"""

# 로그인 폼 직렬화 → 페이지 자체 encrypt() → #encpar 에 암호문 기록
ENCRYPT_LOGIN_SCRIPT = """(loginPath) => {
    const encform = document.querySelector('#encform');
    encform.action = loginPath;
    const loginform = document.querySelector('form[name="loginform"]');
    const params = new URLSearchParams(new FormData(loginform)).toString();
    document.querySelector('#encpar').value = window.encrypt(params);
}"""

SUBMIT_LOGIN_SCRIPT = "() => document.querySelector('#encform').submit()"

SELECT_PAGE_SIZE_SCRIPT = """(sizes) => {
    for (const sel of Array.from(document.querySelectorAll('select'))) {
        const values = Array.from(sel.options).map(o => o.value);
        for (const size of sizes) {
            if (values.includes(size)) {
                sel.value = size;
                sel.dispatchEvent(new Event('change', { bubbles: true }));
                return size;
            }
        }
    }
    return null;
}"""

SELECT_CHANNEL_SCRIPT = """(keywords) => {
    for (const sel of Array.from(document.querySelectorAll('select'))) {
        const option = Array.from(sel.options).find(
            o => keywords.some(k => o.text.includes(k) || o.value.includes(k))
        );
        if (option) {
            sel.value = option.value;
            sel.dispatchEvent(new Event('change', { bubbles: true }));
            return option.text;
        }
    }
    return null;
}"""

TRIGGER_SEARCH_SCRIPT = """(labels) => {
    if (typeof window.search_btn === 'function') {
        window.search_btn(1);
        return 'script';
    }
    const candidates = document.querySelectorAll('input[type="button"], input[type="submit"], button, a');
    for (const el of Array.from(candidates)) {
        const text = (el.value || el.textContent || '').trim();
        const onclick = el.getAttribute('onclick') || '';
        if (labels.includes(text) || onclick.includes('search')) {
            el.click();
            return 'button';
        }
    }
    return null;
}"""

# 다음 페이지: search_btn(n) onclick 링크, 허용 시 숫자 텍스트 링크
GOTO_PAGE_SCRIPT = """([pageNumber, allowText]) => {
    for (const link of Array.from(document.querySelectorAll('a'))) {
        const onclick = link.getAttribute('onclick') || '';
        const text = (link.textContent || '').trim();
        if ((onclick.includes('search_btn') && onclick.includes('(' + pageNumber + ')')) ||
            (allowText && text === String(pageNumber))) {
            link.click();
            return true;
        }
    }
    return false;
}"""

MENU_LINKS_SCRIPT = """() => Array.from(document.querySelectorAll('a')).map(
    a => ({ text: (a.textContent || '').trim(), href: a.href || '' })
)"""

BODY_TEXT_SCRIPT = "() => ((document.body && document.body.innerText) || '').substring(0, 3000)"


def is_logged_in_url(url: str, entry_url: str) -> bool:
    """로그인 성공 추정: 관리자 도메인 안에 있고 진입 페이지를 벗어났는지

    긍정 신호가 없으므로 URL 변화만으로 판단한다.
    """
    entry_file = urlparse(entry_url).path.rsplit("/", 1)[-1] or "index.html"
    return ADMIN_DOMAIN in (url or "") and entry_file not in url


def admin_base_from_url(url: str, default: str) -> str:
    """로그인 후 URL 에서 관리자 origin 추출 (예: https://ga16.ezadmin.co.kr)"""
    match = re.search(r"(https?://[^/]+\." + re.escape(ADMIN_DOMAIN) + r")", url or "")
    return match.group(1) if match else default


def template_url(admin_base: str, template: str) -> str:
    return f"{admin_base}/template35.htm?template={template}"


class EzadminScraper:
    """이지어드민 재고/주문/상품상태 스크래퍼"""

    def __init__(self, pool: BrowserPool, settings: Settings, clock: ClockPort):
        self.pool = pool
        self.settings = settings
        self.clock = clock

    # ─── 대기 ───

    def _attempts(self, seconds: float) -> int:
        return max(1, math.ceil(seconds / self.settings.scraper_poll_interval))

    async def _poll(self, condition: Callable[[], Any], seconds: float) -> Any:
        return await poll_until(
            condition,
            self.clock,
            attempts=self._attempts(seconds),
            interval=self.settings.scraper_poll_interval
        )

    # ─── 로그인 ───

    def _credentials(self) -> Tuple[str, str, str]:
        domain = self.settings.ezadmin_domain
        user_id = self.settings.ezadmin_id
        password = self.settings.ezadmin_password
        if not (domain and user_id and password):
            raise ConfigurationError(
                "이지어드민 계정 설정이 없습니다",
                {"required": ["EZADMIN_DOMAIN", "EZADMIN_ID", "EZADMIN_PASSWORD"]}
            )
        return domain, user_id, password

    async def _attempt_login(self, page: Page) -> bool:
        domain, user_id, password = self._credentials()
        settings = self.settings

        await page.goto(
            settings.ezadmin_entry_url,
            wait_until="domcontentloaded",
            timeout=settings.scraper_navigation_timeout_ms
        )

        # 암호화 모듈 로드 대기
        ready = await self._poll(lambda: page.evaluate(CRYPTO_READY_SCRIPT), settings.scraper_crypto_init_delay)
        if not ready:
            raise ScrapeError("암호화 모듈 로드 실패", page.url)

        await page.evaluate(SHOW_LOGIN_POPUP_SCRIPT)
        await self.clock.sleep(settings.scraper_control_delay)

        await page.fill("#login-domain", domain)
        await page.fill("#login-id", user_id)
        await page.fill("#login-pwd", password)

        await page.evaluate(ENCRYPT_LOGIN_SCRIPT, settings.ezadmin_login_path)
        async with page.expect_navigation(
            wait_until="domcontentloaded",
            timeout=settings.scraper_navigation_timeout_ms
        ):
            await page.evaluate(SUBMIT_LOGIN_SCRIPT)

        # 추가 리다이렉트 대기
        await self._poll(
            lambda: is_logged_in_url(page.url, settings.ezadmin_entry_url),
            settings.scraper_settle_delay
        )
        await self.clock.sleep(settings.scraper_settle_delay)

        logged_in = is_logged_in_url(page.url, settings.ezadmin_entry_url)
        logger.info(f"[이지어드민] 로그인 {'성공' if logged_in else '실패'}: {page.url}")
        return logged_in

    async def login(self, page: Page) -> str:
        """로그인 후 관리자 origin 반환 (실패 시 ScrapeError)"""
        if not await self._attempt_login(page):
            raise ScrapeError("이지어드민 로그인 실패", page.url)
        return admin_base_from_url(page.url, self.settings.ezadmin_default_admin_base)

    # ─── 화면 조작 ───

    async def _open_template(self, page: Page, admin_base: str, template: str) -> None:
        await page.goto(
            template_url(admin_base, template),
            wait_until="domcontentloaded",
            timeout=self.settings.scraper_page_timeout_ms
        )
        await self.clock.sleep(self.settings.scraper_settle_delay)

    async def _prepare_controls(self, page: Page, profile: ReportProfile) -> None:
        if profile.channel_filter_keywords:
            selected = await page.evaluate(SELECT_CHANNEL_SCRIPT, list(profile.channel_filter_keywords))
            logger.debug(f"[이지어드민] 쇼핑몰 필터: {selected}")
            await self.clock.sleep(self.settings.scraper_control_delay)

        size = await page.evaluate(SELECT_PAGE_SIZE_SCRIPT, list(profile.page_size_options))
        logger.debug(f"[이지어드민] 표시 수: {size}")
        await self.clock.sleep(self.settings.scraper_control_delay)

    async def _trigger_search(self, page: Page) -> None:
        how = await page.evaluate(TRIGGER_SEARCH_SCRIPT, list(SEARCH_LABELS))
        if how is None:
            raise ScrapeError("검색 버튼을 찾을 수 없습니다", page.url)
        logger.debug(f"[이지어드민] 검색 실행 ({how})")

    async def _wait_for_results(self, page: Page, profile: ReportProfile) -> str:
        """결과 테이블이 보일 때까지 대기 후 HTML 반환"""
        async def table_visible() -> Optional[str]:
            html = await page.content()
            return html if profile.detect(parse_tables(html)) else None

        html = await self._poll(table_visible, self.settings.scraper_search_delay)
        return html or await page.content()

    async def _wait_for_page_change(self, page: Page, previous_html: str) -> Optional[str]:
        """페이지 이동 후 바뀐 HTML (끝까지 그대로면 None)"""
        async def changed() -> Optional[str]:
            html = await page.content()
            return html if html != previous_html else None

        return await self._poll(changed, self.settings.scraper_page_delay)

    # ─── 리포트 수집 ───

    async def _collect_report(self, page: Page, profile: ReportProfile) -> Tuple[List[ScrapedRow], List[str]]:
        """로그인부터 페이지네이션까지 → (헤더 키 행 목록, 헤더)"""
        admin_base = await self.login(page)
        await self._open_template(page, admin_base, profile.template)
        await self._prepare_controls(page, profile)
        await self._trigger_search(page)

        html = await self._wait_for_results(page, profile)
        table, strategy = select_table(parse_tables(html), profile.strategies)
        if table is None:
            raise ScrapeError(f"{profile.template} 결과 테이블을 찾을 수 없습니다", page.url)

        headers = normalize_headers(table.headers, profile.max_header_length)
        rows = extract_rows(table, profile, headers)
        logger.info(f"[이지어드민] {profile.name} 테이블({strategy}) 헤더: {', '.join(headers)}")
        logger.info(f"[이지어드민] {profile.name} 1페이지: {len(rows)}건")
        previous_rows = list(rows)

        for page_number in range(2, self.settings.scraper_max_pages + 1):
            moved = await page.evaluate(GOTO_PAGE_SCRIPT, [page_number, profile.allow_numbered_links])
            if not moved:
                break

            next_html = await self._wait_for_page_change(page, html)
            if next_html is None:
                logger.warning(f"[이지어드민] {profile.name} {page_number}페이지로 넘어가지 않음: 수집 종료")
                break
            html = next_html

            table, _ = select_table(parse_tables(html), profile.strategies)
            if table is None:
                break

            page_rows = extract_rows(table, profile, headers)
            if not page_rows:
                break
            if page_rows == previous_rows:
                logger.warning(f"[이지어드민] {profile.name} {page_number}페이지가 이전 페이지와 동일: 수집 종료")
                break
            rows.extend(page_rows)
            previous_rows = page_rows
            logger.info(f"[이지어드민] {profile.name} {page_number}페이지: +{len(page_rows)}건 (누적 {len(rows)}건)")

        return rows, headers

    async def _run(self, label: str, operation: Callable[[Page], Awaitable[ScrapeResult]]) -> ScrapeResult:
        """페이지 임대 + 실패를 결과로 변환"""
        current_url = None
        try:
            async with self.pool.lease() as page:
                try:
                    return await operation(page)
                finally:
                    current_url = page.url
        except ScrapeError as e:
            logger.error(f"[{label}] {e.message} ({e.current_url})")
            return ScrapeResult.failed(e.message, e.current_url or current_url)
        except ChannelSyncError as e:
            logger.error(f"[{label}] {e.message}")
            return ScrapeResult.failed(e.message, current_url)
        except Exception as e:
            # 브라우저/네트워크 오류 (Playwright 타임아웃 포함)
            logger.error(f"[{label}] 에러: {e}")
            return ScrapeResult.failed(str(e) or f"{label} 실패", current_url)

    # ─── 공개 작업 ───

    async def scrape_stock(self) -> ScrapeResult:
        """재고조회(I100) 전체 수집"""
        async def operation(page: Page) -> ScrapeResult:
            rows, headers = await self._collect_report(page, STOCK_PROFILE)
            logger.info(f"[재고수집] 완료: 총 {len(rows)}건")
            return ScrapeResult.ok(rows, page.url, headers)

        return await self._run("재고수집", operation)

    async def scrape_orders(self) -> ScrapeResult:
        """확장주문검색2(DS03) 결과 수집"""
        async def operation(page: Page) -> ScrapeResult:
            rows, headers = await self._collect_report(page, ORDER_PROFILE)
            logger.info(f"[주문수집] 완료: 총 {len(rows)}건")
            return ScrapeResult.ok(rows, page.url, headers)

        return await self._run("주문수집", operation)

    async def scrape_product_status(self) -> ScrapeResult:
        """상품현황(GA00) 무신사 상품 판매상태 수집"""
        async def operation(page: Page) -> ScrapeResult:
            rows, headers = await self._collect_report(page, PRODUCT_STATUS_PROFILE)
            records = convert_rows(rows, scraped_row_to_product_status, headers)
            logger.info(f"[상품상태] 완료: 총 {len(records)}건")
            return ScrapeResult.ok([record.to_dict() for record in records], page.url, headers)

        return await self._run("상품상태", operation)

    async def explore(self) -> ScrapeResult:
        """로그인 후 메뉴 링크 탐색 (진단용)"""
        async def operation(page: Page) -> ScrapeResult:
            logged_in = await self._attempt_login(page)
            menu_items = await self._collect_menu_links(page)
            page_content = await page.evaluate(BODY_TEXT_SCRIPT)
            return ScrapeResult(
                success=logged_in,
                data=menu_items,
                error=None if logged_in else "이지어드민 로그인 실패",
                current_url=page.url,
                total_count=len(menu_items),
                meta={"title": await page.title(), "page_content": page_content},
            )

        return await self._run("탐색", operation)

    async def _collect_menu_links(self, page: Page) -> List[Dict[str, str]]:
        """모든 프레임의 링크 수집 (중복 제거, 최대 80개)"""
        seen = set()
        items: List[Dict[str, str]] = []

        for frame in page.frames:
            try:
                links = await frame.evaluate(MENU_LINKS_SCRIPT)
            except PlaywrightError as e:
                logger.debug(f"[탐색] 프레임 링크 수집 실패: {e}")
                continue

            for link in links:
                text, href = link.get("text", ""), link.get("href", "")
                if not (1 < len(text) < 30) or not href or href.startswith("javascript"):
                    continue
                key = (text, urljoin(page.url, href))
                if key in seen:
                    continue
                seen.add(key)
                items.append({"text": text, "href": key[1]})

        return items[:MAX_MENU_ITEMS]

    async def close(self) -> None:
        """공유 브라우저 종료"""
        await self.pool.close()
