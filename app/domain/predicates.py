"""
조건 평가기
전체 검색어와 필드 필터로 레코드 통과 여부를 판단합니다.
"""

import math
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from dateutil import parser as date_parser
from loguru import logger

from app.config import settings
from app.schemas.query import FieldType, FilterConfig, FilterState, OperatorKind, is_operator_allowed
from .errors import UnrecognizedOperatorError
from .fields import FieldCatalog, read_field, stringify


def _name(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def strict_equals(left: Any, right: Any) -> bool:
    """
    타입을 구분하는 동등 비교

    bool은 숫자와 같지 않습니다 (True != 1).
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    return _name(left) == _name(right)


def to_number(value: Any) -> Optional[float]:
    """숫자로 변환. 변환 불가/NaN이면 None"""
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(result) else result


def to_timestamp(value: Any) -> Optional[float]:
    """날짜를 epoch 초로 변환. 숫자는 epoch 초로 간주"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, date):
        return datetime.combine(value, time()).timestamp()
    if isinstance(value, (int, float)):
        return to_number(value)
    if isinstance(value, str) and value.strip():
        try:
            return date_parser.parse(value).timestamp()
        except (ValueError, OverflowError):
            return None
    return None


class PredicateEvaluator:
    """
    레코드 조건 평가기

    passes = 검색 조건 AND 모든 필터 조건.
    값이 없거나 숫자로 바꿀 수 없으면 숫자 비교는 항상 실패합니다.
    """

    def __init__(
        self,
        catalog: Optional[FieldCatalog] = None,
        strict: Optional[bool] = None,
    ):
        self.catalog = catalog
        self.strict = settings.STRICT_OPERATORS if strict is None else strict
        self._read: Callable[[Any, str], Any] = catalog.read if catalog is not None else read_field
        self._warned: set[tuple[str, str]] = set()

        # 연산자 레지스트리: 연산자명 -> 체크함수
        self._operators: dict[str, Callable[[Any, FilterConfig], bool]] = {
            OperatorKind.EQUALS.value: self._check_equals,
            OperatorKind.CONTAINS.value: self._check_contains,
            OperatorKind.STARTS_WITH.value: self._check_starts_with,
            OperatorKind.ENDS_WITH.value: self._check_ends_with,
            OperatorKind.GT.value: self._check_gt,
            OperatorKind.GTE.value: self._check_gte,
            OperatorKind.LT.value: self._check_lt,
            OperatorKind.LTE.value: self._check_lte,
            OperatorKind.BETWEEN.value: self._check_between,
            OperatorKind.IN.value: self._check_in,
            OperatorKind.NOT_IN.value: self._check_not_in,
        }

        self.logger = logger.bind(component="PredicateEvaluator")

    def passes(
        self,
        record: Any,
        state: FilterState,
        search_fields: Iterable[str] = (),
    ) -> bool:
        """
        레코드가 현재 상태의 검색어와 필터를 모두 통과하는지 판단합니다.

        Args:
            record: 레코드
            state: 조회 상태
            search_fields: 전체 검색 대상 필드 (비어 있으면 검색 무시)

        Returns:
            통과 여부

        Raises:
            UnrecognizedOperatorError: strict 모드에서 허용되지 않은 연산자
        """
        if not self.matches_search(record, state.search, search_fields):
            return False
        return all(self.matches_filter(record, cfg) for cfg in state.filters)

    def matches_search(self, record: Any, search: str, search_fields: Iterable[str]) -> bool:
        fields = list(search_fields)
        # 검색어나 검색 필드가 없으면 통과
        if not search or not fields:
            return True

        needle = search.lower()
        return any(needle in stringify(self._read(record, key)).lower() for key in fields)

    def matches_filter(self, record: Any, cfg: FilterConfig) -> bool:
        operator = _name(cfg.operator)
        check = self._operators.get(operator)

        if check is None or not is_operator_allowed(cfg.type, operator):
            if self.strict:
                raise UnrecognizedOperatorError(cfg.field, operator, _name(cfg.type))
            key = (cfg.field, str(operator))
            if key not in self._warned:
                self._warned.add(key)
                self.logger.warning(
                    f"Ignoring filter on '{cfg.field}': operator '{operator}' "
                    f"not allowed for type '{_name(cfg.type)}'"
                )
            return True

        return check(self._read(record, cfg.field), cfg)

    # === 개별 연산자 함수들 ===

    def _coerce(self, value: Any, cfg: FilterConfig) -> Optional[float]:
        if _name(cfg.type) == FieldType.DATE.value:
            return to_timestamp(value)
        return to_number(value)

    def _compare(self, value: Any, cfg: FilterConfig, test: Callable[[float, float], bool]) -> bool:
        left = self._coerce(value, cfg)
        right = self._coerce(cfg.value, cfg)
        if left is None or right is None:
            return False
        return test(left, right)

    def _same(self, value: Any, expected: Any, cfg: FilterConfig) -> bool:
        # 날짜 필드는 양쪽을 시각으로 바꿔 비교 (변환 불가 시 그대로 비교)
        if _name(cfg.type) == FieldType.DATE.value:
            left, right = to_timestamp(value), to_timestamp(expected)
            if left is not None and right is not None:
                return left == right
        return strict_equals(value, expected)

    def _check_equals(self, value: Any, cfg: FilterConfig) -> bool:
        return self._same(value, cfg.value, cfg)

    def _check_contains(self, value: Any, cfg: FilterConfig) -> bool:
        if value is None:
            return False
        return stringify(cfg.value).lower() in stringify(value).lower()

    def _check_starts_with(self, value: Any, cfg: FilterConfig) -> bool:
        if value is None:
            return False
        return stringify(value).lower().startswith(stringify(cfg.value).lower())

    def _check_ends_with(self, value: Any, cfg: FilterConfig) -> bool:
        if value is None:
            return False
        return stringify(value).lower().endswith(stringify(cfg.value).lower())

    def _check_gt(self, value: Any, cfg: FilterConfig) -> bool:
        return self._compare(value, cfg, lambda a, b: a > b)

    def _check_gte(self, value: Any, cfg: FilterConfig) -> bool:
        return self._compare(value, cfg, lambda a, b: a >= b)

    def _check_lt(self, value: Any, cfg: FilterConfig) -> bool:
        return self._compare(value, cfg, lambda a, b: a < b)

    def _check_lte(self, value: Any, cfg: FilterConfig) -> bool:
        return self._compare(value, cfg, lambda a, b: a <= b)

    def _check_between(self, value: Any, cfg: FilterConfig) -> bool:
        bounds = cfg.value
        if not isinstance(bounds, (list, tuple)) or len(bounds) != 2:
            return False

        current = self._coerce(value, cfg)
        low = self._coerce(bounds[0], cfg)
        high = self._coerce(bounds[1], cfg)
        if current is None or low is None or high is None:
            return False
        return low <= current <= high

    def _check_in(self, value: Any, cfg: FilterConfig) -> bool:
        if not isinstance(cfg.value, (list, tuple)):
            return False
        return any(self._same(value, item, cfg) for item in cfg.value)

    def _check_not_in(self, value: Any, cfg: FilterConfig) -> bool:
        if not isinstance(cfg.value, (list, tuple)):
            return False
        return not any(self._same(value, item, cfg) for item in cfg.value)
