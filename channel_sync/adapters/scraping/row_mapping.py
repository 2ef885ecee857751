"""스크래핑 행 → 정규화 레코드 (헤더명 휴리스틱)

스크래핑 행은 헤더 텍스트를 키로 가지므로 키워드 포함 여부로 필드를 찾는다.
헤더가 없는 열은 col{i} 키로 대체된다.
"""
import re
from datetime import datetime
from typing import Any, List, Optional, Sequence

from channel_sync.adapters.channels.conversion import parse_api_datetime, _to_int
from channel_sync.adapters.scraping.row_extraction import ScrapedRow
from channel_sync.core.entities.order import CanonicalOrder, CanonicalOrderItem, OrderStatus
from channel_sync.core.entities.product_status import ProductSaleStatus, ProductStatusRecord, store_from_channel
from channel_sync.core.entities.stock import StockRecord

_ORDER_NUMBER = re.compile(r"^\d")

# 부분 문자열 → 판매상태 (순서대로 검사)
_STATUS_RULES = (
    (("품절",), ProductSaleStatus.SOLD_OUT),
    (("중지", "일시"), ProductSaleStatus.STOPPED),
    (("반려",), ProductSaleStatus.REJECTED),
    (("검수",), ProductSaleStatus.IN_REVIEW),
    (("임시",), ProductSaleStatus.DRAFT),
    (("삭제",), ProductSaleStatus.DELETED),
    (("판매", "진행"), ProductSaleStatus.ON_SALE),
)


def find_header(headers: Sequence[str], *keywords: str) -> str:
    """키워드 중 하나를 포함하는 첫 헤더 (없으면 빈 문자열)"""
    for header in headers:
        if any(keyword in header for keyword in keywords):
            return header
    return ""


def _text(row: ScrapedRow, *keys: str) -> str:
    """후보 키 중 값이 있는 첫 값"""
    for key in keys:
        if key and row.get(key) not in (None, ""):
            return str(row[key]).strip()
    return ""


def _number(row: ScrapedRow, *keys: str) -> int:
    text = _text(row, *keys)
    return _to_int(re.sub(r"[^0-9.\-]", "", text)) if text else 0


def normalize_scraped_status(raw_status: Any) -> str:
    """판매상태 원문 정규화 (인식 못 하면 판매중)"""
    text = str(raw_status or "").strip()
    for keywords, status in _STATUS_RULES:
        if any(keyword in text for keyword in keywords):
            return status
    return ProductSaleStatus.ON_SALE


def scraped_row_to_product_status(row: ScrapedRow, headers: Sequence[str]) -> Optional[ProductStatusRecord]:
    """상품현황 행 변환 (상품코드와 상품명이 모두 없으면 None)"""
    code = _text(row, find_header(headers, "상품코드", "상품번호", "코드"))
    name = _text(row, find_header(headers, "상품명"))
    if not code and not name:
        return None

    return ProductStatusRecord(
        goods_no=code,
        goods_name=name,
        style_code=_text(row, find_header(headers, "품번", "스타일코드", "자체코드", "모델명")),
        status=normalize_scraped_status(_text(row, find_header(headers, "판매상태", "상태", "판매"))),
        store=store_from_channel(_text(row, find_header(headers, "쇼핑몰", "채널", "판매채널"))),
        selling_price=_number(row, find_header(headers, "판매가", "판매단가")),
        tag_price=_number(row, find_header(headers, "정상가", "소비자가", "정가")),
    )


def scraped_row_to_stock(row: ScrapedRow, headers: Sequence[str]) -> Optional[StockRecord]:
    """재고조회 행 변환 (품번이 없으면 None)"""
    style_code = _text(row, find_header(headers, "품번", "공급처상품명", "상품코드"), "col0")
    if not style_code:
        return None

    return StockRecord(
        style_code=style_code,
        option=_text(row, find_header(headers, "옵션")),
        product_name=_text(row, find_header(headers, "상품명")),
        barcode=_text(row, find_header(headers, "바코드")) or None,
        normal_stock=_number(row, find_header(headers, "정상재고")),
        defective_stock=_number(row, find_header(headers, "불량재고")),
        available_stock=_number(row, find_header(headers, "가용재고")),
    )


def scraped_row_to_order(row: ScrapedRow, now: datetime) -> Optional[CanonicalOrder]:
    """주문 행 변환

    주문번호가 숫자로 시작하지 않는 행(헤더 반복, 메타데이터 행)은 None.
    이지어드민 주문은 수집 시점에 이미 확정된 주문으로 본다.
    """
    order_id = _text(row, "주문번호", "col0")
    if not order_id or not _ORDER_NUMBER.match(order_id):
        return None

    ordered_on = _text(row, "주문일", "col1")
    ordered_time = _text(row, "주문시간")
    ordered_at = parse_api_datetime(f"{ordered_on} {ordered_time}".strip(), None)
    if ordered_at is None:
        ordered_at = parse_api_datetime(ordered_on, now)

    amount = _number(row, "결제금액", "col10")
    item = CanonicalOrderItem(
        product_name=_text(row, "상품명", "col7"),
        size_option=_text(row, "옵션명") or "FREE",
        quantity=_to_int(_text(row, "주문수량", "col9"), 1) or 1,
        unit_price=amount,
        external_product_id=_text(row, "품번", "col8") or None,
        barcode=_text(row, "바코드") or None,
    )

    return CanonicalOrder(
        external_order_id=order_id,
        order_number=order_id,
        customer_name=_text(row, "수령자이름", "col4"),
        customer_phone=_text(row, "수령자휴대폰", "col5"),
        customer_address=_text(row, "수령자주소", "col6"),
        ordered_at=ordered_at,
        status=OrderStatus.PURCHASE_CONFIRMED,
        items=[item],
        total_amount=amount,
    )


def convert_rows(rows: Sequence[ScrapedRow], convert, *args) -> List[Any]:
    """변환 결과가 None 인 행은 버린다"""
    converted = []
    for row in rows:
        record = convert(row, *args)
        if record is not None:
            converted.append(record)
    return converted
