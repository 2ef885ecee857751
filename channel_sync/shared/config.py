"""애플리케이션 설정"""
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field
import os


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 로깅
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # API 설정
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_reload: bool = Field(default=False)

    # 채널 설정 암호화 키 (32바이트 hex)
    channel_secret_key: Optional[str] = Field(default=None)

    # 무신사 파트너 API
    musinsa_api_url: str = Field(default="https://bizest.musinsa.com")
    musinsa_api_key: Optional[str] = Field(default=None)

    # 카페24 / 29CM
    cafe24_api_domain: str = Field(default="cafe24api.com")
    twentynine_cm_api_url: str = Field(default="https://api.29cm.co.kr")

    # 채널 요청 설정
    channel_request_timeout: float = Field(default=15.0)

    # 이지어드민 스크래핑
    ezadmin_entry_url: str = Field(default="https://www.ezadmin.co.kr/index.html")
    ezadmin_login_path: str = Field(default="/login_process40.php")
    ezadmin_default_admin_base: str = Field(default="https://ga16.ezadmin.co.kr")
    ezadmin_domain: str = Field(default="")
    ezadmin_id: str = Field(default="")
    ezadmin_password: str = Field(default="")

    # 브라우저 설정
    scraper_headless: bool = Field(default=True)
    scraper_protocol_timeout_ms: int = Field(default=120000)
    scraper_navigation_timeout_ms: int = Field(default=30000)
    scraper_page_timeout_ms: int = Field(default=15000)
    scraper_max_pages: int = Field(default=20)

    # 대기 설정 (초)
    scraper_crypto_init_delay: float = Field(default=5.0)
    scraper_settle_delay: float = Field(default=3.0)
    scraper_control_delay: float = Field(default=0.5)
    scraper_search_delay: float = Field(default=5.0)
    scraper_page_delay: float = Field(default=3.0)
    scraper_poll_interval: float = Field(default=0.5)

    # 이지어드민 일일 자동 수집 (주문 → 재고)
    ezadmin_schedule_enabled: bool = Field(default=False)
    ezadmin_schedule_hour: int = Field(default=9)
    ezadmin_schedule_minute: int = Field(default=30)
    ezadmin_schedule_timezone: str = Field(default="Asia/Seoul")

    # .env 파일이 있는 경우에만 읽기
    class Config:
        env_file = ".env" if os.path.exists(".env") else None
        case_sensitive = False


# 전역 설정 인스턴스
settings = Settings()


def get_settings() -> Settings:
    """설정 인스턴스 반환"""
    return settings
