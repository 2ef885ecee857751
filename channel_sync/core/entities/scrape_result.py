"""스크래핑 작업 결과 (실패도 예외 대신 결과로 반환)"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ScrapeResult:
    success: bool
    data: List[Any] = field(default_factory=list)
    error: Optional[str] = None
    current_url: Optional[str] = None
    total_count: Optional[int] = None
    headers: List[str] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: List[Any], current_url: Optional[str] = None, headers: Optional[List[str]] = None,
           **meta: Any) -> "ScrapeResult":
        return cls(
            success=True,
            data=list(data),
            current_url=current_url,
            total_count=len(data),
            headers=list(headers or []),
            meta=meta,
        )

    @classmethod
    def failed(cls, error: str, current_url: Optional[str] = None, **meta: Any) -> "ScrapeResult":
        return cls(success=False, data=[], error=error, current_url=current_url, meta=meta)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'success': self.success,
            'data': self.data,
            'error': self.error,
            'current_url': self.current_url,
            'total_count': self.total_count,
            'headers': self.headers,
        }
        result.update(self.meta)
        return result
