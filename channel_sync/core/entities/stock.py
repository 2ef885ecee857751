"""재고 엔티티 (이지어드민 재고조회)"""
from dataclasses import dataclass
from typing import Dict, Any, Optional


@dataclass
class StockRecord:
    """품번 + 옵션 단위 재고"""
    style_code: str
    option: str
    product_name: str = ""
    barcode: Optional[str] = None
    normal_stock: int = 0
    defective_stock: int = 0
    available_stock: int = 0

    @property
    def size_label(self) -> str:
        """[0], [OS] 같은 옵션 표기에서 괄호 제거 (없으면 OS)"""
        return self.option.replace("[", "").replace("]", "").strip() or "OS"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'style_code': self.style_code,
            'option': self.option,
            'size_label': self.size_label,
            'product_name': self.product_name,
            'barcode': self.barcode,
            'normal_stock': self.normal_stock,
            'defective_stock': self.defective_stock,
            'available_stock': self.available_stock,
        }
