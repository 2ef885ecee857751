"""채널 연동 라우트 (무신사 / 카페24 / 29CM)"""
from fastapi import APIRouter, Depends, HTTPException, status

from channel_sync.app.di import get_adapter_factory, get_sync_channel_usecase
from channel_sync.core.entities.sku_mapping import SkuMapping
from channel_sync.core.exceptions import ChannelSyncError, create_http_exception
from channel_sync.core.ports.channel_port import ChannelPlatform
from channel_sync.core.usecases.sync_channel import AdapterFactory, SyncChannelUseCase
from channel_sync.presentation.schemas.channels import (
    ChannelConfigRequest, ClaimSyncRequest, ConnectionTestResponse,
    OrderSyncRequest, SalesReportRequest, SyncReportResponse
)
from channel_sync.shared.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


def _failure_to_http(result) -> HTTPException:
    if result.cause is None:
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=result.get_error())

    error = create_http_exception(result.cause)
    report = result.get_value()
    # 실패한 작업에서도 교체 발급된 토큰은 호출자가 저장해야 한다
    if getattr(report, "updated_config_enc", None) and isinstance(error.detail, dict):
        error.detail["updated_config_enc"] = report.updated_config_enc
    return error


@router.post("/musinsa/product-status")
async def musinsa_product_status(
    request: ChannelConfigRequest,
    adapter_factory: AdapterFactory = Depends(get_adapter_factory)
):
    """무신사 상품 판매상태 조회"""
    try:
        adapter = adapter_factory(ChannelPlatform.MUSINSA, request.api_config_enc)
        async with adapter:
            records = await adapter.fetch_product_status()
    except ChannelSyncError as e:
        raise create_http_exception(e)

    return {
        "success": True,
        "total": len(records),
        "products": [record.to_dict() for record in records]
    }


@router.post("/{platform}/test-connection", response_model=ConnectionTestResponse)
async def test_connection(
    platform: str,
    request: ChannelConfigRequest,
    usecase: SyncChannelUseCase = Depends(get_sync_channel_usecase)
):
    """채널 인증 확인"""
    try:
        adapter = usecase.adapter_factory(platform, request.api_config_enc)
        async with adapter:
            await adapter.authenticate()
    except ChannelSyncError as e:
        logger.warning(f"[연결 테스트] {platform} 실패: {e.message}")
        raise create_http_exception(e)

    return ConnectionTestResponse(
        success=True,
        channel_name=adapter.channel_name,
        message=f"{adapter.channel_name} 연결 성공",
        updated_config_enc=await usecase.reseal_config(adapter, request.api_config_enc)
    )


@router.post("/{platform}/orders", response_model=SyncReportResponse)
async def sync_orders(
    platform: str,
    request: OrderSyncRequest,
    usecase: SyncChannelUseCase = Depends(get_sync_channel_usecase)
):
    """주문(및 CS) 수집 + SKU 매핑 적용"""
    mappings = [
        SkuMapping(
            product_code=mapping.product_code,
            option_code=mapping.option_code,
            erp_sku=mapping.erp_sku,
            product_name=mapping.product_name or ""
        )
        for mapping in request.mappings
    ]

    result = await usecase.execute(
        platform,
        request.api_config_enc,
        request.since,
        include_claims=request.include_claims,
        mappings=mappings
    )
    if result.is_failure():
        raise _failure_to_http(result)

    report = result.get_value()
    return SyncReportResponse(
        success=True,
        message=f"{report.channel_name} 주문 {len(report.orders)}건, CS {len(report.claims)}건 수집",
        report=report.to_dict()
    )


@router.post("/{platform}/claims")
async def sync_claims(
    platform: str,
    request: ClaimSyncRequest,
    adapter_factory: AdapterFactory = Depends(get_adapter_factory)
):
    """CS 수집 (지원하지 않는 채널은 400)"""
    try:
        adapter = adapter_factory(platform, request.api_config_enc)
        async with adapter:
            if not adapter.supports_claims:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"{adapter.channel_name}은(는) CS 수집을 지원하지 않습니다"
                )
            await adapter.authenticate()
            claims = await adapter.fetch_claims(request.since)
    except ChannelSyncError as e:
        raise create_http_exception(e)

    return {
        "success": True,
        "total": len(claims),
        "claims": [claim.to_dict() for claim in claims]
    }


@router.post("/{platform}/sales")
async def sales_report(
    platform: str,
    request: SalesReportRequest,
    usecase: SyncChannelUseCase = Depends(get_sync_channel_usecase)
):
    """기간 매출 집계"""
    if request.date_from > request.date_to:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="시작일이 종료일보다 늦습니다"
        )

    result = await usecase.sales_report(platform, request.api_config_enc, request.date_from, request.date_to)
    if result.is_failure():
        raise _failure_to_http(result)

    return {"success": True, "sales": result.get_value().to_dict()}
