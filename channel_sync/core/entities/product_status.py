"""상품 판매상태 엔티티 (무신사 상품 / 이지어드민 상품현황)"""
from dataclasses import dataclass
from typing import Dict, Any


class ProductSaleStatus:
    """판매상태 도메인 (고정 집합)"""
    ON_SALE = "판매중"
    SOLD_OUT = "품절"
    STOPPED = "판매중지"
    REJECTED = "검수반려"
    IN_REVIEW = "검수중"
    DRAFT = "임시저장"
    DELETED = "삭제"
    UNKNOWN = "알수없음"

    ALL = (ON_SALE, SOLD_OUT, STOPPED, REJECTED, IN_REVIEW, DRAFT, DELETED, UNKNOWN)


class Store:
    """판매 채널 구분"""
    NORMAL = "normal"
    OUTLET = "outlet"


@dataclass
class ProductStatusRecord:
    """상품 상태 레코드 (식별자: goods_no)"""
    goods_no: str
    goods_name: str
    style_code: str
    status: str
    store: str = Store.NORMAL
    selling_price: int = 0
    tag_price: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'goods_no': self.goods_no,
            'goods_name': self.goods_name,
            'style_code': self.style_code,
            'status': self.status,
            'store': self.store,
            'selling_price': self.selling_price,
            'tag_price': self.tag_price,
        }


def store_from_channel(raw_channel: str) -> str:
    """채널 원문에 outlet/아울렛이 포함되면 outlet"""
    lowered = (raw_channel or "").lower()
    if "outlet" in lowered or "아울렛" in lowered:
        return Store.OUTLET
    return Store.NORMAL
