"""조건 대기 유틸리티 (고정 지연 대신 조건 폴링)"""
import inspect
from typing import Any, Awaitable, Callable, Union

from channel_sync.core.ports.clock_port import ClockPort

Condition = Callable[[], Union[Any, Awaitable[Any]]]


async def poll_until(
    condition: Condition,
    clock: ClockPort,
    attempts: int = 20,
    interval: float = 0.5
) -> Any:
    """조건이 참이 될 때까지 최대 attempts 회 확인

    조건 함수는 동기/비동기 모두 허용한다. 마지막으로 확인한 값을 반환하며
    시간 초과 시에도 예외를 던지지 않는다 (판단은 호출자 몫).
    """
    value: Any = None
    for attempt in range(max(attempts, 1)):
        value = condition()
        if inspect.isawaitable(value):
            value = await value
        if value:
            return value
        if attempt < attempts - 1:
            await clock.sleep(interval)
    return value
