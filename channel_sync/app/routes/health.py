"""헬스체크 라우트"""
from fastapi import APIRouter, Depends
from datetime import datetime

from channel_sync.app.di import get_browser_pool
from channel_sync.adapters.scraping.browser_pool import BrowserPool
from channel_sync.adapters.channels.factory import ADAPTER_REGISTRY
from channel_sync.shared.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health")
async def health_check(pool: BrowserPool = Depends(get_browser_pool)):
    """서비스 헬스체크"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "service": "channel-sync",
        "version": "1.0.0",
        "platforms": [platform.value for platform in ADAPTER_REGISTRY],
        "browser_running": pool.is_running
    }
