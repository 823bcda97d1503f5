"""
정렬 비교기
SortConfig로 두 레코드의 순서를 결정합니다.
"""

from functools import cmp_to_key
from typing import Any, Callable, Iterable, Optional

from app.schemas.query import SortConfig, SortDirection
from .fields import FieldCatalog, read_field

Comparator = Callable[[Any, Any], int]


def _order(left: Any, right: Any) -> int:
    # 값 없음은 오름차순에서 맨 뒤
    if left is None and right is None:
        return 0
    if left is None:
        return 1
    if right is None:
        return -1

    try:
        if left < right:
            return -1
        if left > right:
            return 1
    except TypeError:
        # 비교 불가능한 타입끼리는 동률
        return 0
    return 0


def compare(
    a: Any,
    b: Any,
    sort: Optional[SortConfig],
    catalog: Optional[FieldCatalog] = None,
) -> int:
    """
    두 레코드를 비교합니다.

    Returns:
        -1, 0, 1 (정렬이 없으면 항상 0)
    """
    if sort is None:
        return 0

    read = catalog.read if catalog is not None else read_field
    result = _order(read(a, sort.field), read(b, sort.field))
    if sort.direction == SortDirection.DESC:
        return -result
    return result


def build_comparator(
    sort: Optional[SortConfig],
    catalog: Optional[FieldCatalog] = None,
) -> Comparator:
    """두 인자 비교 함수 생성"""
    def comparator(a: Any, b: Any) -> int:
        return compare(a, b, sort, catalog)

    return comparator


def sort_records(
    records: Iterable[Any],
    sort: Optional[SortConfig],
    catalog: Optional[FieldCatalog] = None,
) -> list[Any]:
    """
    안정 정렬

    정렬 키가 같은 레코드는 입력 순서를 유지합니다 (방향과 무관).
    """
    if sort is None:
        return list(records)
    return sorted(records, key=cmp_to_key(build_comparator(sort, catalog)))
