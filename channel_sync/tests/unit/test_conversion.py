"""채널 응답 변환 함수 테스트"""
import pytest
from datetime import datetime

from channel_sync.adapters.channels.conversion import (
    ORDER_STATUS_MAP, map_order_status, map_claim_type, map_goods_status,
    convert_order_item, convert_order, convert_claim, convert_goods,
    convert_cafe24_order, map_cafe24_order_status, parse_api_datetime, format_api_date
)
from channel_sync.core.entities.claim import ClaimType
from channel_sync.core.entities.order import OrderStatus
from channel_sync.core.entities.product_status import ProductSaleStatus, Store

NOW = datetime(2024, 5, 20, 9, 0, 0)


class TestOrderStatusMapping:
    """주문 상태 매핑 테스트"""

    @pytest.mark.parametrize("raw,expected", list(ORDER_STATUS_MAP.items()))
    def test_known_statuses(self, raw, expected):
        """알려진 한글 상태는 표준 토큰으로"""
        assert map_order_status(raw) == expected

    def test_unknown_status_passes_through(self):
        """모르는 상태는 원문 그대로 (예외/누락 없음)"""
        assert map_order_status("반품보류") == "반품보류"

    def test_empty_status_is_unknown(self):
        assert map_order_status(None) == OrderStatus.UNKNOWN
        assert map_order_status("") == OrderStatus.UNKNOWN

    def test_cafe24_status_codes(self):
        assert map_cafe24_order_status("N40") == OrderStatus.DELIVERED
        assert map_cafe24_order_status("C00") == "C00"

    def test_numeric_status_code_is_stringified(self):
        """숫자 상태코드도 문자열 원문으로 통과"""
        assert map_order_status(40) == "40"
        assert map_cafe24_order_status(40) == "40"


class TestClaimTypeMapping:
    """클레임 유형 매핑 테스트"""

    @pytest.mark.parametrize("raw,expected", [
        ("취소", ClaimType.CANCEL),
        ("RETURN", ClaimType.RETURN),
        ("반품", ClaimType.RETURN),
        ("교환", ClaimType.EXCHANGE),
        (" EXCHANGE ", ClaimType.EXCHANGE),
    ])
    def test_known_types(self, raw, expected):
        assert map_claim_type(raw) == expected

    def test_unrecognized_type_defaults_to_cancel(self):
        """알 수 없는 클레임 유형은 CANCEL 로 분류"""
        assert map_claim_type("부분환불") == ClaimType.CANCEL
        assert map_claim_type(None) == ClaimType.CANCEL

    def test_numeric_type_does_not_raise(self):
        assert map_claim_type(3) == ClaimType.CANCEL
        assert map_claim_type(0) == ClaimType.CANCEL


class TestGoodsStatusMapping:
    """상품 판매상태 매핑 테스트"""

    def test_api_values(self):
        assert map_goods_status("ON_SALE") == ProductSaleStatus.ON_SALE
        assert map_goods_status("WAITING") == ProductSaleStatus.IN_REVIEW

    def test_result_always_in_domain(self):
        """모르는 값도 판매상태 도메인 안의 값으로"""
        for raw in ("ON_SALE", "판매중지", "HIDDEN", "", None):
            assert map_goods_status(raw) in ProductSaleStatus.ALL
        assert map_goods_status("HIDDEN") == ProductSaleStatus.UNKNOWN

    def test_numeric_status_does_not_raise(self):
        """숫자 판매상태 코드는 UNKNOWN 으로 (예외 없음)"""
        assert map_goods_status(1) == ProductSaleStatus.UNKNOWN
        assert map_goods_status(1.5) == ProductSaleStatus.UNKNOWN


class TestOrderConversion:
    """무신사 주문 변환 테스트"""

    def test_malformed_item_gets_defaults(self):
        """수량/가격 누락 상품은 수량 1, 가격 0"""
        item = convert_order_item({"goodsName": "반팔 티셔츠"})

        assert item.quantity == 1
        assert item.unit_price == 0
        assert item.product_name == "반팔 티셔츠"

    def test_garbage_numbers_get_defaults(self):
        item = convert_order_item({"goodsName": "양말", "quantity": "abc", "price": None})

        assert item.quantity == 1
        assert item.unit_price == 0

    def test_convert_order(self):
        order = convert_order({
            "orderId": "ORD-1",
            "orderNumber": "202405200001",
            "buyerName": "홍길동",
            "orderDate": "2024-05-19T10:30:00Z",
            "orderStatus": "결제완료",
            "totalPrice": "39,000",
            "items": [
                {"goodsNo": "G100", "optionNo": "O1", "goodsName": "후드", "quantity": 2, "price": 19500},
                "not-a-dict",
            ],
        }, NOW)

        assert order.external_order_id == "ORD-1"
        assert order.status == OrderStatus.PAYMENT_COMPLETED
        assert order.total_amount == 39000
        assert order.ordered_at.year == 2024 and order.ordered_at.day == 19
        assert len(order.items) == 1
        assert order.items[0].line_total() == 39000

    def test_missing_order_date_uses_now(self):
        order = convert_order({"orderId": "X"}, NOW)

        assert order.ordered_at == NOW
        assert order.items == []

    def test_convert_claim(self):
        claim = convert_claim({
            "claimNo": "C-1",
            "orderId": "ORD-1",
            "claimType": "정체불명",
            "claimStatus": "접수",
            "requestDate": "2024-05-18",
        }, NOW)

        assert claim.claim_type == ClaimType.CANCEL
        assert claim.claim_status == "접수"
        assert claim.requested_at == datetime(2024, 5, 18)
        assert claim.processed_at is None

    def test_convert_goods_outlet(self):
        record = convert_goods({
            "goodsNo": 1234,
            "goodsName": "데님 팬츠",
            "saleStatus": "SOLD_OUT",
            "channel": "Musinsa Outlet",
            "sellingPrice": "59,000",
        })

        assert record.goods_no == "1234"
        assert record.status == ProductSaleStatus.SOLD_OUT
        assert record.store == Store.OUTLET
        assert record.selling_price == 59000


class TestCafe24Conversion:
    """카페24 주문 변환 테스트"""

    def test_convert_order_with_receiver(self):
        order = convert_cafe24_order({
            "order_id": "20240520-0000001",
            "billing_name": "김철수",
            "order_date": "2024-05-20T08:00:00+09:00",
            "payment_amount": "25000.00",
            "items": [{"product_code": "P0001", "variant_code": "P0001000A", "order_status": "N20",
                       "product_name": "캡모자", "quantity": 1, "product_price": "25000.00"}],
            "receivers": [{"cellphone": "010-1111-2222", "address1": "서울시", "address2": "101호", "zipcode": "01234"}],
        }, NOW)

        assert order.status == OrderStatus.PREPARING
        assert order.customer_address == "서울시 101호"
        assert order.total_amount == 25000
        assert order.items[0].external_sku_id == "P0001000A"

    def test_order_without_items(self):
        order = convert_cafe24_order({"order_id": "A"}, NOW)

        assert order.status == OrderStatus.UNKNOWN
        assert order.items == []


class TestDateHelpers:
    """날짜 유틸 테스트"""

    def test_format_api_date(self):
        assert format_api_date(datetime(2024, 1, 5, 23, 59)) == "2024-01-05"

    def test_parse_invalid_returns_default(self):
        assert parse_api_datetime("어제", NOW) == NOW
        assert parse_api_datetime(None) is None
