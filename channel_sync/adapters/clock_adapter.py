"""시간 어댑터"""
from datetime import datetime, timedelta
import asyncio

from channel_sync.core.ports.clock_port import ClockPort


class SystemClock(ClockPort):
    """시스템 시계 구현체"""

    def now(self) -> datetime:
        return datetime.now()

    def is_expired(self, expire_at: datetime, buffer_minutes: int = 0) -> bool:
        if not expire_at:
            return True
        return datetime.now() + timedelta(minutes=buffer_minutes) >= expire_at

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
