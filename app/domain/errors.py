"""
조회 엔진 예외
"""

from typing import Any


class QueryEngineError(Exception):
    """조회 엔진 예외 기본 클래스"""
    pass


class MalformedStateError(QueryEngineError):
    """가져온 필터 상태를 해석할 수 없음"""
    pass


class UnrecognizedOperatorError(QueryEngineError):
    """필드 타입에 허용되지 않은 연산자"""

    def __init__(self, field: str, operator: Any, field_type: Any):
        self.field = field
        self.operator = operator
        self.field_type = field_type
        super().__init__(
            f"operator '{operator}' is not allowed for {field_type} field '{field}'"
        )


class UnknownFieldError(QueryEngineError):
    """필드 카탈로그에 없는 필드"""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"unknown field '{field}'")
