"""OAuth 토큰 상태 (어댑터 인스턴스 메모리 전용)"""
from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime, timedelta


@dataclass
class TokenState:
    """Access Token 과 만료 시각

    authenticate() 에서만 갱신되며 영속화하지 않는다.
    """
    access_token: str = ""
    expires_at: datetime = field(default_factory=lambda: datetime.min)
    token_type: str = "Bearer"

    def update(self, access_token: str, expires_in: int, now: datetime) -> None:
        self.access_token = access_token
        self.expires_at = now + timedelta(seconds=expires_in)

    @property
    def authorization(self) -> Optional[str]:
        if not self.access_token:
            return None
        return f"{self.token_type} {self.access_token}"
