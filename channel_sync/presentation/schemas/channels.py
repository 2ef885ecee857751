"""채널 동기화 / 스크래핑 DTO 스키마"""
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime


class ChannelConfigRequest(BaseModel):
    """암호화된 채널 API 설정"""
    api_config_enc: str = Field(..., min_length=1)


class SkuMappingPayload(BaseModel):
    """SKU 매핑 (품번코드 + 단품코드 → ERP SKU)"""
    product_code: str
    option_code: str = ""
    erp_sku: str
    product_name: Optional[str] = None


class OrderSyncRequest(ChannelConfigRequest):
    """주문 수집 요청"""
    since: datetime
    include_claims: bool = True
    mappings: List[SkuMappingPayload] = Field(default_factory=list)


class ClaimSyncRequest(ChannelConfigRequest):
    """CS(취소/반품/교환) 수집 요청"""
    since: datetime


class SalesReportRequest(ChannelConfigRequest):
    """매출 집계 요청"""
    date_from: datetime
    date_to: datetime


class ConnectionTestResponse(BaseModel):
    """연결 테스트 응답"""
    success: bool
    channel_name: str
    message: str
    # Refresh Token 이 교체 발급된 경우 새 채널 설정 암호문
    updated_config_enc: Optional[str] = None


class SyncReportResponse(BaseModel):
    """주문 수집 응답"""
    success: bool
    message: str
    report: Dict[str, Any]


class ScrapeResponse(BaseModel):
    """스크래핑 응답 (실패도 200 으로 반환)"""
    success: bool
    data: List[Any] = Field(default_factory=list)
    error: Optional[str] = None
    current_url: Optional[str] = None
    total_count: Optional[int] = None
    headers: List[str] = Field(default_factory=list)
    records: List[Dict[str, Any]] = Field(default_factory=list)
    meta: Dict[str, Any] = Field(default_factory=dict)
