"""시간 포트 (인터페이스)"""
from abc import ABC, abstractmethod
from datetime import datetime


class ClockPort(ABC):
    """시간 및 대기 인터페이스 (테스트에서 교체 가능)"""

    @abstractmethod
    def now(self) -> datetime:
        """현재 시간 반환"""
        pass

    @abstractmethod
    def is_expired(self, expire_at: datetime, buffer_minutes: int = 0) -> bool:
        """토큰/세션이 만료되었는지 확인"""
        pass

    @abstractmethod
    async def sleep(self, seconds: float) -> None:
        """비동기 대기"""
        pass
