"""채널 연동 예외 계층"""
from typing import Optional, Dict, Any

from fastapi import HTTPException, status


class ChannelSyncError(Exception):
    """채널 연동 기본 예외"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ChannelSyncError):
    """설정 오류 (필수 필드 누락, 미지원 플랫폼): 재시도 불가"""
    pass


class DecryptionError(ConfigurationError):
    """채널 설정 복호화 실패"""
    pass


class AuthError(ChannelSyncError):
    """인증 실패"""
    pass


class ChannelApiError(ChannelSyncError):
    """채널 API가 보고한 HTTP 오류"""

    RETRYABLE_STATUS_CODES = (429, 500, 503)

    def __init__(
        self,
        status_code: int,
        message: str,
        channel: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.channel = channel

    @property
    def retryable(self) -> bool:
        """호출자가 재시도를 고려할 수 있는 오류인지"""
        return self.status_code in self.RETRYABLE_STATUS_CODES


class ChannelAuthError(ChannelApiError, AuthError):
    """401/403: 인증키 또는 접근 권한 문제"""
    pass


class NetworkError(ChannelApiError):
    """타임아웃, DNS, 연결 끊김 (상태코드 0)"""

    def __init__(self, message: str, channel: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(0, message, channel, details)

    @property
    def retryable(self) -> bool:
        return True


class ScrapeError(ChannelSyncError):
    """스크래핑 실패 (로그인 미확인, 테이블/페이지 컨트롤 없음)"""

    def __init__(self, message: str, current_url: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.current_url = current_url


def create_http_exception(error: Exception) -> HTTPException:
    """채널 예외를 HTTP 예외로 변환"""
    if not isinstance(error, ChannelSyncError):
        return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))

    error_type_mapping = [
        (ConfigurationError, status.HTTP_400_BAD_REQUEST),
        (AuthError, status.HTTP_401_UNAUTHORIZED),
        (ChannelApiError, status.HTTP_502_BAD_GATEWAY),
    ]

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    if isinstance(error, ChannelApiError) and error.status_code == 429:
        status_code = status.HTTP_429_TOO_MANY_REQUESTS
    else:
        for error_type, mapped_status in error_type_mapping:
            if isinstance(error, error_type):
                status_code = mapped_status
                break

    detail: Dict[str, Any] = {
        "message": error.message,
        "type": error.__class__.__name__,
        "details": error.details
    }
    if isinstance(error, ChannelApiError):
        detail["status_code"] = error.status_code
        detail["retryable"] = error.retryable

    return HTTPException(status_code=status_code, detail=detail)
