"""매출/정산 집계 엔티티"""
from dataclasses import dataclass, field
from typing import List, Dict, Any
from datetime import datetime


@dataclass
class SalesLine:
    """상품별 매출"""
    product_code: str
    product_name: str
    quantity: int
    sales_amount: int


@dataclass
class SalesAggregate:
    """채널·기간별 매출 집계

    기간 경계는 플랫폼 정의를 그대로 따른다 (채널 간 정규화하지 않음).
    """
    channel_name: str
    period_start: datetime
    period_end: datetime
    total_sales: int = 0
    total_commission: int = 0
    net_amount: int = 0
    order_count: int = 0
    items: List[SalesLine] = field(default_factory=list)

    @classmethod
    def empty(cls, channel_name: str, period_start: datetime, period_end: datetime) -> 'SalesAggregate':
        return cls(channel_name=channel_name, period_start=period_start, period_end=period_end)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'channel_name': self.channel_name,
            'period_start': self.period_start.isoformat(),
            'period_end': self.period_end.isoformat(),
            'total_sales': self.total_sales,
            'total_commission': self.total_commission,
            'net_amount': self.net_amount,
            'order_count': self.order_count,
            'items': [
                {
                    'product_code': line.product_code,
                    'product_name': line.product_name,
                    'quantity': line.quantity,
                    'sales_amount': line.sales_amount,
                }
                for line in self.items
            ],
        }
