"""
목록 조회 스키마
필터/정렬/검색/페이지 상태를 구조화합니다.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator

from app.config import settings


class FieldType(str, Enum):
    """필드 타입"""
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    SELECT = "select"


class OperatorKind(str, Enum):
    """필터 연산자"""
    EQUALS = "equals"
    CONTAINS = "contains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    BETWEEN = "between"
    IN = "in"
    NOT_IN = "notIn"


class SortDirection(str, Enum):
    """정렬 방향"""
    ASC = "asc"
    DESC = "desc"


# 필드 타입별 허용 연산자
OPERATORS_BY_TYPE: dict[FieldType, tuple[OperatorKind, ...]] = {
    FieldType.STRING: (
        OperatorKind.EQUALS,
        OperatorKind.CONTAINS,
        OperatorKind.STARTS_WITH,
        OperatorKind.ENDS_WITH,
    ),
    FieldType.NUMBER: (
        OperatorKind.EQUALS,
        OperatorKind.GT,
        OperatorKind.GTE,
        OperatorKind.LT,
        OperatorKind.LTE,
        OperatorKind.BETWEEN,
    ),
    FieldType.DATE: (
        OperatorKind.EQUALS,
        OperatorKind.GT,
        OperatorKind.GTE,
        OperatorKind.LT,
        OperatorKind.LTE,
        OperatorKind.BETWEEN,
    ),
    FieldType.BOOLEAN: (OperatorKind.EQUALS,),
    FieldType.SELECT: (
        OperatorKind.EQUALS,
        OperatorKind.IN,
        OperatorKind.NOT_IN,
    ),
}


def is_operator_allowed(field_type: Any, operator: Any) -> bool:
    """필드 타입에 대해 연산자가 허용되는지 확인"""
    try:
        return OperatorKind(operator) in OPERATORS_BY_TYPE[FieldType(field_type)]
    except ValueError:
        return False


def _normalize_value(value: Any) -> Any:
    """직렬화 후에도 같은 값이 되도록 필터 값을 JSON 형태로 맞춤"""
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_normalize_value(v) for v in value]
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


class FilterConfig(BaseModel):
    """
    단일 필드 필터 조건

    value 형태는 연산자에 따라 다릅니다:
    - between: [최소, 최대]
    - in / notIn: 값 목록
    - 그 외: 단일 값
    """
    model_config = ConfigDict(use_enum_values=True, frozen=True)

    field: str = Field(
        min_length=1,
        description="필드 키",
        examples=["age"]
    )
    operator: OperatorKind = Field(
        default=OperatorKind.EQUALS,
        description="연산자"
    )
    value: Any = Field(
        default=None,
        description="비교 값",
        examples=[25, [18, 65], ["ACTIVE", "PENDING"]]
    )
    type: FieldType = Field(
        default=FieldType.STRING,
        description="필드 타입"
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if isinstance(data, dict) and "value" in data:
            data = {**data, "value": _normalize_value(data["value"])}
        return data


class SortConfig(BaseModel):
    """정렬 조건 (한 번에 하나만 활성)"""
    model_config = ConfigDict(use_enum_values=True, frozen=True)

    field: str = Field(min_length=1, description="정렬 필드 키")
    direction: SortDirection = Field(
        default=SortDirection.ASC,
        description="정렬 방향"
    )


class FilterState(BaseModel):
    """
    목록 조회 상태

    목록 화면마다 하나씩 생성되며, FilterStore를 통해서만 변경됩니다.
    filters는 field 기준으로 중복이 없습니다.
    """
    model_config = ConfigDict(
        use_enum_values=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "filters": [
                    {"field": "age", "operator": "gt", "value": 25, "type": "number"},
                    {"field": "status", "operator": "in", "value": ["ACTIVE"], "type": "select"},
                ],
                "sort": {"field": "age", "direction": "asc"},
                "search": "ali",
                "page": 1,
                "limit": 10,
            }
        }
    )

    filters: tuple[FilterConfig, ...] = Field(
        default=(),
        description="활성 필터 (추가 순서 유지)"
    )
    sort: Optional[SortConfig] = Field(
        default=None,
        description="정렬 조건"
    )
    search: str = Field(
        default="",
        description="전체 검색어"
    )
    page: int = Field(default=1, ge=1, description="현재 페이지 (1부터)")
    limit: int = Field(
        default_factory=lambda: settings.DEFAULT_PAGE_LIMIT,
        ge=1,
        description="페이지당 항목 수"
    )

    @model_validator(mode="after")
    def _check_unique_fields(self) -> "FilterState":
        seen = set()
        for cfg in self.filters:
            if cfg.field in seen:
                raise ValueError(f"duplicate filter for field '{cfg.field}'")
            seen.add(cfg.field)
        return self

    @property
    def has_active_filters(self) -> bool:
        return len(self.filters) > 0 or len(self.search) > 0

    @property
    def has_active_sort(self) -> bool:
        return self.sort is not None
