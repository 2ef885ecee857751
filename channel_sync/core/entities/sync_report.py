"""채널 동기화 작업 결과"""
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from datetime import datetime

from channel_sync.core.entities.order import CanonicalOrder
from channel_sync.core.entities.claim import CanonicalClaim


@dataclass
class SyncReport:
    """한 채널 동기화 작업의 수집 결과"""
    channel_name: str
    since: datetime
    started_at: datetime
    finished_at: Optional[datetime] = None
    orders: List[CanonicalOrder] = field(default_factory=list)
    claims: List[CanonicalClaim] = field(default_factory=list)
    unmapped_count: int = 0
    claims_supported: bool = False
    # 작업 중 Refresh Token 이 교체 발급되면 새 토큰을 반영한 채널 설정 암호문
    updated_config_enc: Optional[str] = None

    @property
    def total_processed(self) -> int:
        return len(self.orders) + len(self.claims)

    def duration_seconds(self) -> float:
        if not self.finished_at:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'channel_name': self.channel_name,
            'since': self.since.isoformat(),
            'started_at': self.started_at.isoformat(),
            'finished_at': self.finished_at.isoformat() if self.finished_at else None,
            'duration_seconds': self.duration_seconds(),
            'total_processed': self.total_processed,
            'unmapped_count': self.unmapped_count,
            'claims_supported': self.claims_supported,
            'updated_config_enc': self.updated_config_enc,
            'orders': [order.to_dict() for order in self.orders],
            'claims': [claim.to_dict() for claim in self.claims],
        }
