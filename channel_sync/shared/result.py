"""Result/Either 패턴 (유즈케이스 반환값)"""
from typing import TypeVar, Generic, Union, Optional, Callable, Any
from dataclasses import dataclass

T = TypeVar('T')


@dataclass
class Success(Generic[T]):
    """성공 결과"""
    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def get_value(self) -> T:
        return self.value

    def get_error(self) -> None:
        return None

    def map(self, fn: Callable[[T], Any]) -> 'Result[Any]':
        return Success(fn(self.value))


@dataclass
class Failure(Generic[T]):
    """실패 결과 (오류 유형과 부분 결과 포함)"""
    error: str
    value: Optional[T] = None
    error_type: Optional[str] = None
    cause: Optional[Exception] = None

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def get_value(self) -> Optional[T]:
        return self.value

    def get_error(self) -> str:
        return self.error

    def map(self, fn: Callable[[T], Any]) -> 'Result[Any]':
        return Failure(self.error, self.value, self.error_type, self.cause)


Result = Union[Success[T], Failure[T]]


def success(value: T) -> Result[T]:
    """성공 결과 생성"""
    return Success(value)


def failure(
    error: str,
    value: T = None,
    error_type: Optional[str] = None,
    cause: Optional[Exception] = None
) -> Result[T]:
    """실패 결과 생성"""
    return Failure(error, value, error_type, cause)
