"""채널 원시 응답 → 정규화 레코드 변환 (순수 함수)"""
from typing import Dict, Any, Optional, List
from datetime import datetime, date

from channel_sync.core.entities.order import CanonicalOrder, CanonicalOrderItem, OrderStatus
from channel_sync.core.entities.claim import CanonicalClaim, ClaimType
from channel_sync.core.entities.product_status import (
    ProductStatusRecord, ProductSaleStatus, store_from_channel
)

# 무신사 주문 상태 한글 → 표준 토큰
ORDER_STATUS_MAP: Dict[str, str] = {
    '결제완료': OrderStatus.PAYMENT_COMPLETED,
    '주문확인': OrderStatus.ORDER_CONFIRMED,
    '상품준비중': OrderStatus.PREPARING,
    '배송준비중': OrderStatus.PREPARING,
    '출고완료': OrderStatus.SHIPPED,
    '배송중': OrderStatus.IN_TRANSIT,
    '배송완료': OrderStatus.DELIVERED,
    '구매확정': OrderStatus.PURCHASE_CONFIRMED,
}

# 클레임 유형 (한글/영문)
CLAIM_TYPE_MAP: Dict[str, ClaimType] = {
    'CANCEL': ClaimType.CANCEL,
    '취소': ClaimType.CANCEL,
    'RETURN': ClaimType.RETURN,
    '반품': ClaimType.RETURN,
    'EXCHANGE': ClaimType.EXCHANGE,
    '교환': ClaimType.EXCHANGE,
}

# 상품 판매상태 (영문 API 값 + 한글 값)
GOODS_STATUS_MAP: Dict[str, str] = {
    'ON_SALE': ProductSaleStatus.ON_SALE,
    'SOLD_OUT': ProductSaleStatus.SOLD_OUT,
    'STOP': ProductSaleStatus.STOPPED,
    'REJECT': ProductSaleStatus.REJECTED,
    'WAITING': ProductSaleStatus.IN_REVIEW,
    'TEMPORARY': ProductSaleStatus.DRAFT,
    '판매중': ProductSaleStatus.ON_SALE,
    '품절': ProductSaleStatus.SOLD_OUT,
    '판매중지': ProductSaleStatus.STOPPED,
    '검수반려': ProductSaleStatus.REJECTED,
    '검수중': ProductSaleStatus.IN_REVIEW,
    '임시저장': ProductSaleStatus.DRAFT,
    '삭제': ProductSaleStatus.DELETED,
}


def map_order_status(raw_status: Any) -> str:
    """주문 상태 매핑: 모르는 값은 원문 그대로 (빈 값은 UNKNOWN)"""
    if not raw_status:
        return OrderStatus.UNKNOWN
    raw_status = str(raw_status).strip()
    return ORDER_STATUS_MAP.get(raw_status, raw_status)


def map_claim_type(raw_type: Any) -> ClaimType:
    """클레임 유형 매핑: 모르는 값은 CANCEL 로 간주"""
    return CLAIM_TYPE_MAP.get(str(raw_type or "").strip(), ClaimType.CANCEL)


def map_goods_status(raw_status: Any) -> str:
    """상품 판매상태 매핑: 결과는 항상 판매상태 도메인 안의 값"""
    if not raw_status:
        return ProductSaleStatus.UNKNOWN
    return GOODS_STATUS_MAP.get(str(raw_status).strip(), ProductSaleStatus.UNKNOWN)


def format_api_date(value: datetime) -> str:
    """API 날짜 파라미터 (YYYY-MM-DD)"""
    return value.strftime("%Y-%m-%d")


def parse_api_datetime(value: Optional[str], default: Optional[datetime] = None) -> Optional[datetime]:
    """ISO-8601 문자열 파싱 (없거나 잘못되면 default)"""
    if not value:
        return default
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        parsed = date.fromisoformat(text[:10])
        return datetime(parsed.year, parsed.month, parsed.day)
    except ValueError:
        return default


def _to_int(value: Any, default: int = 0) -> int:
    """숫자 필드 (None/빈 값/잘못된 값 → default)"""
    if value is None or value == "":
        return default
    try:
        return int(float(str(value).replace(",", "")))
    except (TypeError, ValueError):
        return default


def _to_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def convert_order_item(data: Dict[str, Any]) -> CanonicalOrderItem:
    """주문 상품 변환 (수량 누락 → 1, 가격 누락 → 0)"""
    option_info = _to_str(data.get("optionInfo"))
    quantity = _to_int(data.get("quantity"), 1) or 1
    return CanonicalOrderItem(
        external_product_id=_to_str(data.get("goodsNo")),
        external_sku_id=_to_str(data.get("optionNo")),
        barcode=_to_str(data.get("barcode")),
        product_name=data.get("goodsName") or "",
        option_info=option_info,
        size_option=option_info or "",
        quantity=quantity,
        unit_price=_to_int(data.get("price")),
        discount_amount=_to_int(data.get("discountPrice")),
    )


def _convert_items(raw_items: Any) -> List[CanonicalOrderItem]:
    if not isinstance(raw_items, list):
        return []
    return [convert_order_item(item) for item in raw_items if isinstance(item, dict)]


def convert_order(data: Dict[str, Any], now: Optional[datetime] = None) -> CanonicalOrder:
    """무신사 주문 → 정규화 주문"""
    now = now or datetime.now()
    return CanonicalOrder(
        external_order_id=str(data.get("orderId") or data.get("orderNumber") or ""),
        order_number=str(data.get("orderNumber") or ""),
        customer_name=data.get("buyerName") or "",
        customer_phone=data.get("buyerPhone") or "",
        customer_address=data.get("receiverAddress") or "",
        customer_zipcode=_to_str(data.get("receiverZipcode")),
        total_amount=_to_int(data.get("totalPrice")),
        total_discount=_to_int(data.get("discountPrice")),
        shipping_fee=_to_int(data.get("shippingFee")),
        ordered_at=parse_api_datetime(data.get("orderDate"), now),
        status=map_order_status(data.get("orderStatus")),
        items=_convert_items(data.get("items")),
    )


def convert_claim(data: Dict[str, Any], now: Optional[datetime] = None) -> CanonicalClaim:
    """무신사 클레임 → 정규화 클레임"""
    now = now or datetime.now()
    return CanonicalClaim(
        claim_id=str(data.get("claimNo") or ""),
        external_order_id=str(data.get("orderId") or ""),
        order_number=str(data.get("orderNumber") or ""),
        claim_type=map_claim_type(data.get("claimType")),
        claim_status=data.get("claimStatus") or "",
        claim_reason=data.get("claimReason") or "",
        customer_name=data.get("buyerName") or "",
        claim_amount=_to_int(data.get("claimPrice")),
        requested_at=parse_api_datetime(data.get("requestDate"), now),
        processed_at=parse_api_datetime(data.get("completeDate")),
        items=_convert_items(data.get("items")),
    )


def convert_goods(data: Dict[str, Any]) -> ProductStatusRecord:
    """무신사 상품 → 상품 상태 레코드"""
    return ProductStatusRecord(
        goods_no=str(data.get("goodsNo") or ""),
        goods_name=data.get("goodsName") or "",
        style_code=data.get("styleCode") or data.get("brandStyleCode") or "",
        status=map_goods_status(data.get("saleStatus") or data.get("status")),
        store=store_from_channel(data.get("channel") or data.get("salesChannel") or ""),
        selling_price=_to_int(data.get("sellingPrice") or data.get("price")),
        tag_price=_to_int(data.get("normalPrice") or data.get("tagPrice")),
    )


# 카페24 품목 주문상태 코드 → 표준 토큰
CAFE24_ORDER_STATUS_MAP: Dict[str, str] = {
    'N10': OrderStatus.PREPARING,
    'N20': OrderStatus.PREPARING,
    'N21': OrderStatus.PREPARING,
    'N22': OrderStatus.PREPARING,
    'N30': OrderStatus.IN_TRANSIT,
    'N40': OrderStatus.DELIVERED,
    'N50': OrderStatus.PURCHASE_CONFIRMED,
}


def map_cafe24_order_status(raw_status: Any) -> str:
    """카페24 상태코드 매핑: 모르는 값은 원문 그대로"""
    if not raw_status:
        return OrderStatus.UNKNOWN
    raw_status = str(raw_status).strip()
    return CAFE24_ORDER_STATUS_MAP.get(raw_status, raw_status)


def convert_cafe24_item(data: Dict[str, Any]) -> CanonicalOrderItem:
    """카페24 주문 품목 변환"""
    option_value = _to_str(data.get("option_value"))
    return CanonicalOrderItem(
        external_product_id=_to_str(data.get("product_code")),
        external_sku_id=_to_str(data.get("variant_code")),
        product_name=data.get("product_name") or "",
        option_info=option_value,
        size_option=option_value or "",
        quantity=_to_int(data.get("quantity"), 1) or 1,
        unit_price=_to_int(data.get("product_price")),
        discount_amount=_to_int(data.get("additional_discount_price")),
    )


def convert_cafe24_order(data: Dict[str, Any], now: Optional[datetime] = None) -> CanonicalOrder:
    """카페24 주문 → 정규화 주문 (상태는 첫 품목 기준)"""
    now = now or datetime.now()
    raw_items = data.get("items") if isinstance(data.get("items"), list) else []
    receivers = data.get("receivers") if isinstance(data.get("receivers"), list) else []
    receiver = receivers[0] if receivers and isinstance(receivers[0], dict) else {}
    first_status = raw_items[0].get("order_status") if raw_items and isinstance(raw_items[0], dict) else None

    return CanonicalOrder(
        external_order_id=str(data.get("order_id") or ""),
        order_number=str(data.get("order_id") or ""),
        customer_name=data.get("billing_name") or receiver.get("name") or "",
        customer_phone=receiver.get("cellphone") or receiver.get("phone") or "",
        customer_address=" ".join(
            part for part in (receiver.get("address1"), receiver.get("address2")) if part
        ),
        customer_zipcode=_to_str(receiver.get("zipcode")),
        total_amount=_to_int(data.get("payment_amount") or data.get("actual_payment_amount")),
        total_discount=_to_int(data.get("membership_discount_amount")),
        shipping_fee=_to_int(data.get("shipping_fee")),
        ordered_at=parse_api_datetime(data.get("order_date"), now),
        status=map_cafe24_order_status(first_status),
        items=[convert_cafe24_item(item) for item in raw_items if isinstance(item, dict)],
    )
