"""SKU 매핑 엔티티: 플랫폼 품번/단품코드 ↔ ERP SKU"""
from dataclasses import dataclass, field
from typing import Optional, Tuple
from datetime import date


@dataclass(frozen=True)
class SkuMapping:
    """수동 등록 SKU 매핑 (복합키: 품번코드 + 단품코드)"""
    product_code: str
    option_code: str
    erp_sku: str
    product_name: str = ""
    erp_product_name: Optional[str] = None
    mapped_at: date = field(default_factory=date.today)
    mapped_by: str = "manual"

    @property
    def key(self) -> Tuple[str, str]:
        return (self.product_code, self.option_code or "")
