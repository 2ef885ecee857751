"""스크래핑 행 → 정규화 레코드 변환 테스트"""
import pytest
from datetime import datetime

from channel_sync.adapters.scraping.row_mapping import (
    find_header, normalize_scraped_status, scraped_row_to_product_status,
    scraped_row_to_stock, scraped_row_to_order, convert_rows
)
from channel_sync.core.entities.order import OrderStatus
from channel_sync.core.entities.product_status import ProductSaleStatus, Store

NOW = datetime(2024, 5, 20, 9, 0, 0)


class TestHeaderHeuristics:
    """헤더명 휴리스틱 테스트"""

    def test_find_header_first_match(self):
        headers = ["No", "상품코드", "상품명", "판매상태"]

        assert find_header(headers, "상품번호", "상품코드") == "상품코드"
        assert find_header(headers, "재고") == ""

    @pytest.mark.parametrize("raw,expected", [
        ("품절", ProductSaleStatus.SOLD_OUT),
        ("일시중지", ProductSaleStatus.STOPPED),
        ("판매중지", ProductSaleStatus.STOPPED),
        ("검수반려", ProductSaleStatus.REJECTED),
        ("검수대기", ProductSaleStatus.IN_REVIEW),
        ("임시저장", ProductSaleStatus.DRAFT),
        ("삭제됨", ProductSaleStatus.DELETED),
        ("진행중", ProductSaleStatus.ON_SALE),
        ("", ProductSaleStatus.ON_SALE),
    ])
    def test_normalize_scraped_status(self, raw, expected):
        assert normalize_scraped_status(raw) == expected


class TestProductStatusRows:
    """상품현황 행 변환 테스트"""

    HEADERS = ["상품코드", "상품명", "품번", "판매상태", "쇼핑몰", "판매가", "정상가"]

    def test_full_row(self):
        row = {
            "상품코드": 3812345, "상품명": "울 코트", "품번": "23W-CT01", "판매상태": "품절",
            "쇼핑몰": "무신사 아울렛", "판매가": "129,000원", "정상가": 259000,
        }

        record = scraped_row_to_product_status(row, self.HEADERS)

        assert record.goods_no == "3812345"
        assert record.status == ProductSaleStatus.SOLD_OUT
        assert record.store == Store.OUTLET
        assert record.selling_price == 129000
        assert record.tag_price == 259000

    def test_row_without_code_and_name_is_dropped(self):
        assert scraped_row_to_product_status({"판매상태": "판매중"}, self.HEADERS) is None


class TestStockRows:
    """재고 행 변환 테스트"""

    HEADERS = ["상품코드", "바코드", "상품명", "옵션", "정상재고", "불량재고", "가용재고"]

    def test_stock_row(self):
        row = {"상품코드": "23F02DJ001-BK", "바코드": "23F02DJ001-BK_A", "상품명": "데님 자켓",
               "옵션": "[1]", "정상재고": 12, "불량재고": 1, "가용재고": 11}

        record = scraped_row_to_stock(row, self.HEADERS)

        assert record.style_code == "23F02DJ001-BK"
        assert record.size_label == "1"
        assert (record.normal_stock, record.defective_stock, record.available_stock) == (12, 1, 11)

    def test_empty_option_is_os(self):
        record = scraped_row_to_stock({"상품코드": "A", "옵션": ""}, self.HEADERS)
        assert record.size_label == "OS"


class TestOrderRows:
    """주문 행 변환 테스트"""

    def test_order_row(self):
        row = {
            "주문번호": "2024052000012", "주문일": "2024-05-19", "주문시간": "14:30:00",
            "수령자이름": "김민지", "상품명": "맨투맨", "품번": "MT-01", "옵션명": "L",
            "주문수량": 2, "결제금액": 59000,
        }

        order = scraped_row_to_order(row, NOW)

        assert order.external_order_id == "2024052000012"
        assert order.ordered_at == datetime(2024, 5, 19, 14, 30)
        assert order.status == OrderStatus.PURCHASE_CONFIRMED
        assert order.total_amount == 59000
        assert order.items[0].quantity == 2
        assert order.items[0].size_option == "L"
        assert order.item_count() == 2

    @pytest.mark.parametrize("order_id", ["상품명", "클센추가항목5", "", None])
    def test_non_numeric_order_number_is_dropped(self, order_id):
        assert scraped_row_to_order({"주문번호": order_id}, NOW) is None

    def test_column_index_fallback(self):
        row = {"col0": 1001, "col1": "날짜아님", "col4": "홍길동"}

        order = scraped_row_to_order(row, NOW)

        assert order.external_order_id == "1001"
        assert order.ordered_at == NOW
        assert order.customer_name == "홍길동"
        assert order.items[0].size_option == "FREE"

    def test_convert_rows_skips_none(self):
        rows = [{"주문번호": "1"}, {"주문번호": "합계"}, {"주문번호": "2"}]

        orders = convert_rows(rows, scraped_row_to_order, NOW)

        assert [order.external_order_id for order in orders] == ["1", "2"]
