"""정규화 주문 도메인 엔티티"""
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from datetime import datetime


# 수집 대상 주문 상태 (외부 플랫폼 원문 → 내부 표준 토큰)
class OrderStatus:
    """내부 표준 주문 상태 토큰"""
    PAYMENT_COMPLETED = "PAYMENT_COMPLETED"
    ORDER_CONFIRMED = "ORDER_CONFIRMED"
    PREPARING = "PREPARING"
    SHIPPED = "SHIPPED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    PURCHASE_CONFIRMED = "PURCHASE_CONFIRMED"
    UNKNOWN = "UNKNOWN"


@dataclass
class CanonicalOrderItem:
    """정규화 주문 상품"""
    product_name: str
    size_option: str = ""
    quantity: int = 1
    unit_price: int = 0
    discount_amount: int = 0
    external_product_id: Optional[str] = None  # 품번코드
    external_sku_id: Optional[str] = None      # 단품코드
    barcode: Optional[str] = None
    option_info: Optional[str] = None
    # SKU 매핑 결과 (수집 후 매핑 단계에서 채움)
    mapped_erp_sku: Optional[str] = None
    is_mapped: Optional[bool] = None

    def line_total(self) -> int:
        """상품 라인 금액 (할인 차감)"""
        return self.quantity * self.unit_price - self.discount_amount

    def to_dict(self) -> Dict[str, Any]:
        return {
            'external_product_id': self.external_product_id,
            'external_sku_id': self.external_sku_id,
            'barcode': self.barcode,
            'product_name': self.product_name,
            'option_info': self.option_info,
            'size_option': self.size_option,
            'quantity': self.quantity,
            'unit_price': self.unit_price,
            'discount_amount': self.discount_amount,
            'mapped_erp_sku': self.mapped_erp_sku,
            'is_mapped': self.is_mapped,
        }


@dataclass
class CanonicalOrder:
    """정규화 주문 (식별자: external_order_id)"""
    external_order_id: str
    order_number: str
    customer_name: str
    customer_phone: str
    customer_address: str
    ordered_at: datetime
    status: str
    items: List[CanonicalOrderItem] = field(default_factory=list)
    total_amount: int = 0
    total_discount: int = 0
    shipping_fee: int = 0
    customer_zipcode: Optional[str] = None

    def item_count(self) -> int:
        """주문 수량 합계"""
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리 변환 (직렬화용)"""
        return {
            'external_order_id': self.external_order_id,
            'order_number': self.order_number,
            'customer_name': self.customer_name,
            'customer_phone': self.customer_phone,
            'customer_address': self.customer_address,
            'customer_zipcode': self.customer_zipcode,
            'items': [item.to_dict() for item in self.items],
            'total_amount': self.total_amount,
            'total_discount': self.total_discount,
            'shipping_fee': self.shipping_fee,
            'ordered_at': self.ordered_at.isoformat(),
            'status': self.status,
        }
