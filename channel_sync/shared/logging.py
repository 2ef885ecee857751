"""구조화된 로깅 유틸리티"""
import logging
import logging.config
from typing import Optional
import sys


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """로거 인스턴스 반환"""

    if not level:
        from channel_sync.shared.config import get_settings
        level = get_settings().log_level.upper()

    log_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            }
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'stream': sys.stdout
            }
        },
        'loggers': {
            name: {
                'handlers': ['console'],
                'level': level,
                'propagate': True
            }
        }
    }

    logging.config.dictConfig(log_config)
    return logging.getLogger(name)


class LoggerMixin:
    """로거 믹스인 클래스"""

    @property
    def logger(self) -> logging.Logger:
        """인스턴스 로거 반환"""
        if not hasattr(self, '_logger'):
            self._logger = get_logger(f"{self.__module__}.{self.__class__.__name__}")
        return self._logger


def log_channel_sync(logger: logging.Logger, channel: str, action: str, count: int, details: Optional[dict] = None):
    """채널 동기화 로그"""
    log_data = {
        'channel': channel,
        'sync_action': action,
        'record_count': count,
    }

    if details:
        log_data.update(details)

    logger.info(f"[{channel}] {action}: {count}건", extra=log_data)


def log_api_request(logger: logging.Logger, method: str, endpoint: str, status_code: int, duration: float):
    """API 요청 로그"""
    log_data = {
        'http_method': method,
        'endpoint': endpoint,
        'status_code': status_code,
        'duration_ms': duration * 1000
    }

    logger.debug(f"API Request: {method} {endpoint} - {status_code}", extra=log_data)
