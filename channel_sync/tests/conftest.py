"""공통 테스트 픽스처"""
import pytest
from datetime import datetime, timedelta

from channel_sync.core.ports.clock_port import ClockPort
from channel_sync.shared.config import settings

TEST_SECRET_KEY = "00112233445566778899aabbccddeeff00112233445566778899aabbccddeeff"
FIXED_NOW = datetime(2024, 5, 20, 9, 0, 0)


class FakeClock(ClockPort):
    """sleep 하면 시간만 앞으로 가는 테스트용 시계"""

    def __init__(self, now: datetime = FIXED_NOW):
        self.current = now
        self.sleeps = []

    def now(self) -> datetime:
        return self.current

    def is_expired(self, expire_at: datetime, buffer_minutes: int = 0) -> bool:
        return self.current + timedelta(minutes=buffer_minutes) >= expire_at

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def fake_clock():
    """고정 시각 시계"""
    return FakeClock()


@pytest.fixture
def secret_key(monkeypatch):
    """채널 설정 암호화 키"""
    monkeypatch.setattr(settings, "channel_secret_key", TEST_SECRET_KEY)
    return TEST_SECRET_KEY


@pytest.fixture
def no_secret_key(monkeypatch):
    monkeypatch.setattr(settings, "channel_secret_key", None)
