"""
필드 접근
레코드 필드 읽기와 목록별 필드 카탈로그를 담당합니다.
"""

from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Iterable, Optional
from pydantic import BaseModel, Field, ConfigDict

from app.schemas.query import (
    FieldType,
    FilterConfig,
    OperatorKind,
    OPERATORS_BY_TYPE,
    SortConfig,
    is_operator_allowed,
)
from .errors import UnknownFieldError, UnrecognizedOperatorError

Accessor = Callable[[Any], Any]


def read_field(record: Any, key: str) -> Any:
    """
    레코드에서 필드 값을 읽습니다.

    dict 등 Mapping은 키로, 그 외 객체(pydantic 모델 등)는 속성으로 읽습니다.
    값이 없으면 None을 반환합니다.
    """
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def stringify(value: Any) -> str:
    """검색/문자열 비교용 문자열 변환"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class FieldDefinition(BaseModel):
    """
    목록 필드 정의

    accessor를 지정하면 키 대신 해당 함수로 값을 읽습니다.
    (예: 중첩 필드, 계산 필드)
    """
    model_config = ConfigDict(use_enum_values=True, frozen=True)

    key: str = Field(min_length=1, examples=["monthly_income"])
    label: str = Field(default="", description="화면 표시 이름")
    type: FieldType = FieldType.STRING
    options: list[str] = Field(
        default_factory=list,
        description="select 타입 선택지"
    )
    accessor: Optional[Accessor] = Field(default=None, exclude=True)

    def read(self, record: Any) -> Any:
        if self.accessor is not None:
            return self.accessor(record)
        return read_field(record, self.key)

    @property
    def operators(self) -> tuple[OperatorKind, ...]:
        return OPERATORS_BY_TYPE[FieldType(self.type)]


class FieldCatalog:
    """
    필드 카탈로그

    레코드 타입 하나에 대한 필드 키 -> 정의 테이블입니다.
    필터/정렬/검색 필드를 구성할 때 한 번 검사하고,
    이후 읽기는 정의된 accessor로 수행합니다.
    """

    def __init__(self, fields: Iterable[FieldDefinition]):
        self._fields: dict[str, FieldDefinition] = {}
        for definition in fields:
            if definition.key in self._fields:
                raise ValueError(f"duplicate field definition: {definition.key}")
            self._fields[definition.key] = definition

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __iter__(self):
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    @property
    def keys(self) -> list[str]:
        return list(self._fields)

    def get(self, key: str) -> FieldDefinition:
        definition = self._fields.get(key)
        if definition is None:
            raise UnknownFieldError(key)
        return definition

    def read(self, record: Any, key: str) -> Any:
        definition = self._fields.get(key)
        if definition is None:
            return read_field(record, key)
        return definition.read(record)

    # === 구성 시점 검사 ===

    def check_filter(self, cfg: FilterConfig) -> None:
        self.get(cfg.field)
        if not is_operator_allowed(cfg.type, cfg.operator):
            raise UnrecognizedOperatorError(cfg.field, cfg.operator, cfg.type)

    def check_sort(self, sort: SortConfig) -> None:
        self.get(sort.field)

    def check_search_fields(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.get(key)

    def make_filter(self, key: str, operator: OperatorKind | str, value: Any) -> FilterConfig:
        """카탈로그에 정의된 타입으로 FilterConfig 생성"""
        definition = self.get(key)
        cfg = FilterConfig(
            field=key,
            operator=operator,
            value=value,
            type=definition.type,
        )
        self.check_filter(cfg)
        return cfg
