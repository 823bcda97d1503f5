"""
CreditLens 스키마 패키지
목록 조회 상태와 결과 스키마를 정의합니다.
"""

from .query import (
    FieldType,
    OperatorKind,
    SortDirection,
    OPERATORS_BY_TYPE,
    FilterConfig,
    SortConfig,
    FilterState,
)
from .results import QueryResult, ListView, ImportResult

__all__ = [
    "FieldType",
    "OperatorKind",
    "SortDirection",
    "OPERATORS_BY_TYPE",
    "FilterConfig",
    "SortConfig",
    "FilterState",
    "QueryResult",
    "ListView",
    "ImportResult",
]
