"""CS(클레임) 도메인 엔티티: 취소/반품/교환"""
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from datetime import datetime
from enum import Enum

from channel_sync.core.entities.order import CanonicalOrderItem


class ClaimType(str, Enum):
    """클레임 유형 (닫힌 집합)"""
    CANCEL = "CANCEL"
    RETURN = "RETURN"
    EXCHANGE = "EXCHANGE"


@dataclass
class CanonicalClaim:
    """정규화 클레임 (식별자: claim_id)

    claim_status/claim_reason 은 플랫폼 원문을 그대로 보존한다.
    """
    claim_id: str
    external_order_id: str
    order_number: str
    claim_type: ClaimType
    claim_status: str
    claim_reason: str
    customer_name: str
    requested_at: datetime
    items: List[CanonicalOrderItem] = field(default_factory=list)
    claim_amount: int = 0
    processed_at: Optional[datetime] = None

    def is_processed(self) -> bool:
        return self.processed_at is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'claim_id': self.claim_id,
            'external_order_id': self.external_order_id,
            'order_number': self.order_number,
            'claim_type': self.claim_type.value,
            'claim_status': self.claim_status,
            'claim_reason': self.claim_reason,
            'customer_name': self.customer_name,
            'items': [item.to_dict() for item in self.items],
            'claim_amount': self.claim_amount,
            'requested_at': self.requested_at.isoformat(),
            'processed_at': self.processed_at.isoformat() if self.processed_at else None,
        }
