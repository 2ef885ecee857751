"""SKU 매핑 적용 유즈케이스 (수집 이후 단계)"""
from typing import Dict, Iterable, Optional, Tuple, Union

from channel_sync.core.entities.order import CanonicalOrder, CanonicalOrderItem
from channel_sync.core.entities.claim import CanonicalClaim
from channel_sync.core.entities.sku_mapping import SkuMapping
from channel_sync.shared.logging import get_logger

logger = get_logger(__name__)


class SkuMappingIndex:
    """(품번코드, 단품코드) → ERP SKU 조회 인덱스"""

    def __init__(self, mappings: Iterable[SkuMapping] = ()):
        self._index: Dict[Tuple[str, str], SkuMapping] = {}
        for mapping in mappings:
            self.add(mapping)

    def add(self, mapping: SkuMapping) -> None:
        self._index[mapping.key] = mapping

    def __len__(self) -> int:
        return len(self._index)

    def lookup(self, product_code: Optional[str], option_code: Optional[str]) -> Optional[SkuMapping]:
        """단품 매핑이 없으면 품번 단위 매핑(단품코드 빈 값)으로 대체"""
        if not product_code:
            return None
        return (
            self._index.get((product_code, option_code or ""))
            or self._index.get((product_code, ""))
        )


def map_item(item: CanonicalOrderItem, index: SkuMappingIndex) -> bool:
    mapping = index.lookup(item.external_product_id, item.external_sku_id)
    item.mapped_erp_sku = mapping.erp_sku if mapping else None
    item.is_mapped = mapping is not None
    return item.is_mapped


def apply_sku_mappings(
    records: Iterable[Union[CanonicalOrder, CanonicalClaim]],
    index: SkuMappingIndex
) -> int:
    """모든 상품에 매핑 결과 기록, 미매핑 상품 수 반환 (미매핑은 오류가 아님)"""
    unmapped = 0
    for record in records:
        for item in record.items:
            if not map_item(item, index):
                unmapped += 1

    if unmapped:
        logger.warning(f"[SKU 매핑] 미매핑 상품 {unmapped}건: 수동 매핑 필요")
    return unmapped
