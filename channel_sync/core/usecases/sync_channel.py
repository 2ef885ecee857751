"""채널 동기화 유즈케이스

작업마다 어댑터를 새로 만들고 (토큰 캐시 공유 없음), 인증 → 주문/CS 수집 →
SKU 매핑 적용 후 어댑터를 닫는다. 어댑터 오류는 재시도하지 않고 Failure 로 반환한다.
"""
from typing import Callable, Iterable, Optional, Union
from datetime import datetime

from channel_sync.core.ports.channel_port import ChannelAdapter, ChannelPlatform
from channel_sync.core.ports.clock_port import ClockPort
from channel_sync.core.ports.token_sink import RefreshTokenSink
from channel_sync.core.entities.sku_mapping import SkuMapping
from channel_sync.core.entities.sales import SalesAggregate
from channel_sync.core.entities.sync_report import SyncReport
from channel_sync.core.exceptions import ChannelSyncError
from channel_sync.core.usecases.apply_sku_mapping import SkuMappingIndex, apply_sku_mappings
from channel_sync.shared.result import Result, success, failure
from channel_sync.shared.logging import get_logger

logger = get_logger(__name__)

AdapterFactory = Callable[[Union[ChannelPlatform, str], str], ChannelAdapter]


class SyncChannelUseCase:
    """채널 주문/CS 수집 유즈케이스"""

    def __init__(
        self,
        adapter_factory: AdapterFactory,
        clock: ClockPort,
        token_sink: Optional[RefreshTokenSink] = None
    ):
        self.adapter_factory = adapter_factory
        self.clock = clock
        self.token_sink = token_sink

    async def reseal_config(self, adapter: ChannelAdapter, api_config_enc: str) -> Optional[str]:
        """작업 중 교체 발급된 토큰이 있으면 새 설정 암호문 (없으면 None)

        성공/실패와 무관하게 호출한다. 업스트림이 이미 이전 토큰을 폐기했을 수 있다.
        """
        if self.token_sink is None or adapter.token_key is None:
            return None
        try:
            resealed = await self.token_sink.reseal_config(adapter.token_key, api_config_enc)
        except ChannelSyncError as e:
            logger.error(f"[동기화] {adapter.channel_name} 채널 설정 재암호화 실패: {e.message}")
            return None
        return resealed if resealed != api_config_enc else None

    async def execute(
        self,
        platform: Union[ChannelPlatform, str],
        api_config_enc: str,
        since: datetime,
        include_claims: bool = True,
        mappings: Optional[Iterable[SkuMapping]] = None
    ) -> Result[SyncReport]:
        """주문(및 지원 시 CS) 수집"""
        try:
            adapter = self.adapter_factory(platform, api_config_enc)
        except ChannelSyncError as e:
            logger.error(f"[동기화] 어댑터 생성 실패: {e.message}")
            return failure(e.message, error_type=type(e).__name__, cause=e)

        report = SyncReport(
            channel_name=adapter.channel_name,
            since=since,
            started_at=self.clock.now(),
            claims_supported=adapter.supports_claims,
        )

        try:
            async with adapter:
                await adapter.authenticate()
                report.orders = await adapter.fetch_orders(since)
                if include_claims and adapter.supports_claims:
                    report.claims = await adapter.fetch_claims(since)
        except ChannelSyncError as e:
            logger.error(f"[동기화] {adapter.channel_name} 수집 실패: {e.message}")
            report.finished_at = self.clock.now()
            report.updated_config_enc = await self.reseal_config(adapter, api_config_enc)
            return failure(e.message, report, type(e).__name__, e)

        index = SkuMappingIndex(mappings or ())
        report.unmapped_count = apply_sku_mappings([*report.orders, *report.claims], index)
        report.updated_config_enc = await self.reseal_config(adapter, api_config_enc)
        report.finished_at = self.clock.now()

        logger.info(
            f"[동기화] {report.channel_name} 완료: 주문 {len(report.orders)}건 "
            f"(수량 {sum(order.item_count() for order in report.orders)}개), "
            f"CS {len(report.claims)}건, 미매핑 {report.unmapped_count}건"
        )
        return success(report)

    async def sales_report(
        self,
        platform: Union[ChannelPlatform, str],
        api_config_enc: str,
        date_from: datetime,
        date_to: datetime
    ) -> Result[SalesAggregate]:
        """기간 매출 집계 조회"""
        try:
            adapter = self.adapter_factory(platform, api_config_enc)
            async with adapter:
                await adapter.authenticate()
                aggregate = await adapter.fetch_sales_report(date_from, date_to)
        except ChannelSyncError as e:
            logger.error(f"[매출] 조회 실패: {e.message}")
            return failure(e.message, error_type=type(e).__name__, cause=e)

        return success(aggregate)
