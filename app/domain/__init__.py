"""
CreditLens 도메인 로직 패키지
레코드 조건 평가, 정렬 비교, 상태 직렬화를 담당합니다.
모든 함수는 입력 레코드를 변경하지 않습니다.
"""

from .errors import (
    QueryEngineError,
    MalformedStateError,
    UnrecognizedOperatorError,
    UnknownFieldError,
)
from .fields import FieldCatalog, FieldDefinition, read_field
from .predicates import PredicateEvaluator
from .sorting import compare, build_comparator, sort_records
from .serializer import export_state, import_state

__all__ = [
    "QueryEngineError",
    "MalformedStateError",
    "UnrecognizedOperatorError",
    "UnknownFieldError",
    "FieldCatalog",
    "FieldDefinition",
    "read_field",
    "PredicateEvaluator",
    "compare",
    "build_comparator",
    "sort_records",
    "export_state",
    "import_state",
]
