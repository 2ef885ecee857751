"""선택된 테이블 → 헤더 키 행 레코드 변환"""
import re
from typing import Any, Dict, List, Optional, Sequence, Union

from channel_sync.adapters.scraping.table_matchers import Table, ReportProfile, clean_text

CellValue = Union[str, int, float]
ScrapedRow = Dict[str, CellValue]

_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
MAX_NUMERIC_LENGTH = 12


def coerce_cell(value: Any) -> CellValue:
    """셀 값 trim 후, 콤마 제거 시 깔끔한 숫자이고 12자 미만이면 숫자로 변환

    12자 이상 숫자(주문번호, 바코드 등)는 정밀도 손실을 막기 위해 문자열 유지.
    """
    text = str(value if value is not None else "").strip()
    if not text or len(text) >= MAX_NUMERIC_LENGTH:
        return text

    candidate = text.replace(",", "")
    if not _NUMBER.match(candidate):
        return text

    if "." in candidate:
        return float(candidate)
    return int(candidate)


def normalize_headers(raw_headers: Sequence[str], max_length: Optional[int] = 30) -> List[str]:
    """빈 헤더 제거, 너무 긴 헤더(설명 문구 등) 제거"""
    headers = []
    for raw in raw_headers:
        text = clean_text(raw)
        if not text:
            continue
        if max_length is not None and len(text) >= max_length:
            continue
        headers.append(text)
    return headers


def row_to_record(cells: Sequence[str], headers: Sequence[str]) -> ScrapedRow:
    """헤더가 모자라는 셀은 col{i} 로 키 부여"""
    record: ScrapedRow = {}
    for index, cell in enumerate(cells):
        key = headers[index] if index < len(headers) else f"col{index}"
        record[key] = coerce_cell(cell)
    return record


def extract_rows(
    table: Table,
    profile: ReportProfile,
    headers: Optional[Sequence[str]] = None
) -> List[ScrapedRow]:
    """테이블 행 추출

    headers 를 주면 (이전 페이지 헤더 재사용) 테이블 자체 헤더 대신 사용한다.
    """
    keys = list(headers) if headers else normalize_headers(table.headers, profile.max_header_length)
    records: List[ScrapedRow] = []

    for cells in table.rows:
        if len(cells) < profile.min_cells:
            continue

        record = row_to_record(cells, keys)
        if profile.required_any_keys and not any(record.get(key) for key in profile.required_any_keys):
            continue
        records.append(record)

    return records
