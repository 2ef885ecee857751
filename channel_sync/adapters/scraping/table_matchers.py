"""결과 테이블 탐색 전략

관리자 화면의 결과 테이블에는 안정적인 id/class 가 없으므로 헤더 텍스트로
찾는다. 전략은 순서대로 시도하며 처음 찾은 테이블을 쓴다.
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

_WHITESPACE = re.compile(r"\s+")


def clean_text(text: Optional[str]) -> str:
    """앞뒤 공백 제거 + 연속 공백 하나로"""
    return _WHITESPACE.sub(" ", (text or "").strip())


@dataclass
class Table:
    """HTML 테이블 스냅샷 (헤더 텍스트 + 데이터 행 셀 텍스트)"""
    headers: List[str]
    rows: List[List[str]]
    row_count: int  # 헤더 포함 전체 <tr> 수
    index: int = 0

    def has_header(self, keyword: str) -> bool:
        return any(keyword in header for header in self.headers)


def parse_tables(html: str) -> List[Table]:
    """페이지 HTML 의 모든 <table> 을 Table 로 변환"""
    soup = BeautifulSoup(html or "", "html.parser")
    tables: List[Table] = []

    for index, element in enumerate(soup.find_all("table")):
        headers = [clean_text(th.get_text()) for th in element.find_all("th")]

        body_rows = [tr for tbody in element.find_all("tbody") for tr in tbody.find_all("tr")]
        all_rows = element.find_all("tr")
        target_rows = body_rows or all_rows

        rows = [
            [cell.get_text().strip() for cell in tr.find_all("td")]
            for tr in target_rows
        ]
        tables.append(Table(headers=headers, rows=rows, row_count=len(all_rows), index=index))

    return tables


class TableMatcher(ABC):
    """테이블 선택 전략"""

    name: str = ""

    @abstractmethod
    def match(self, tables: Sequence[Table]) -> Optional[Table]:
        pass


@dataclass
class KeywordGroupsMatcher(TableMatcher):
    """모든 키워드 그룹이 각각 어느 헤더에든 포함된 첫 테이블

    그룹 안의 키워드는 OR, 그룹끼리는 AND.
    """
    groups: Tuple[Tuple[str, ...], ...]
    name: str = "keywords"

    def accepts(self, table: Table) -> bool:
        return all(
            any(table.has_header(keyword) for keyword in group)
            for group in self.groups
        )

    def match(self, tables: Sequence[Table]) -> Optional[Table]:
        for table in tables:
            if self.accepts(table):
                return table
        return None


@dataclass
class MostRowsMatcher(TableMatcher):
    """행(<tr>)이 가장 많은 테이블 (동률이면 앞선 테이블)"""
    name: str = "most-rows"

    def match(self, tables: Sequence[Table]) -> Optional[Table]:
        best: Optional[Table] = None
        for table in tables:
            if table.row_count > (best.row_count if best else 0):
                best = table
        return best


def select_table(tables: Sequence[Table], strategies: Sequence[TableMatcher]) -> Tuple[Optional[Table], Optional[str]]:
    """전략을 순서대로 시도 → (테이블, 성공한 전략 이름)"""
    for strategy in strategies:
        table = strategy.match(tables)
        if table is not None:
            return table, strategy.name
    return None, None


@dataclass
class ReportProfile:
    """리포트(관리자 화면) 유형별 탐색·추출 규칙"""
    name: str
    template: str
    strategies: Tuple[TableMatcher, ...]
    max_header_length: Optional[int] = 30
    required_any_keys: Tuple[str, ...] = ()
    page_size_options: Tuple[str, ...] = ("500",)
    channel_filter_keywords: Tuple[str, ...] = ()
    allow_numbered_links: bool = True
    min_cells: int = 3

    def detect(self, tables: Sequence[Table]) -> bool:
        """키워드 전략(마지막 fallback 제외)으로 테이블이 보이는지"""
        keyword_strategies = [s for s in self.strategies if not isinstance(s, MostRowsMatcher)]
        return select_table(tables, keyword_strategies)[0] is not None


# 재고조회 (I100): 상품코드와 가용재고가 모두 있는 테이블만
STOCK_PROFILE = ReportProfile(
    name="stock",
    template="I100",
    strategies=(KeywordGroupsMatcher(groups=(("상품코드",), ("가용재고",)), name="stock-headers"),),
    max_header_length=None,
    required_any_keys=("상품코드", "col2"),
    allow_numbered_links=False,
)

# 확장주문검색2 (DS03)
ORDER_PROFILE = ReportProfile(
    name="orders",
    template="DS03",
    strategies=(
        KeywordGroupsMatcher(groups=(("주문번호", "주문일", "판매건"),), name="order-headers"),
        MostRowsMatcher(),
    ),
    page_size_options=("500", "200", "100"),
)

# 상품현황 (GA00)
PRODUCT_STATUS_PROFILE = ReportProfile(
    name="product-status",
    template="GA00",
    strategies=(
        KeywordGroupsMatcher(
            groups=(("상품코드", "상품번호"), ("상품명", "판매상태", "상태")),
            name="product-headers"
        ),
        MostRowsMatcher(),
    ),
    channel_filter_keywords=("무신사", "musinsa"),
)
