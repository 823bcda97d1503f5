"""
Query Pipeline
필터링 → 정렬 → 페이지 슬라이스 순서로 목록 조회 결과를 만듭니다.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from loguru import logger

from app.domain.fields import FieldCatalog
from app.domain.predicates import PredicateEvaluator
from app.domain.sorting import sort_records
from app.schemas.query import FilterState
from app.schemas.results import QueryResult


def count_pages(total_items: int, limit: int) -> int:
    """전체 페이지 수 (항목이 없으면 0)"""
    if total_items <= 0:
        return 0
    return math.ceil(total_items / limit)


def slice_page(items: Sequence[Any], page: int, limit: int) -> tuple:
    """page는 1부터. 범위를 벗어나면 빈 tuple"""
    start = (page - 1) * limit
    return tuple(items[start:start + limit])


def _typed(value: Any) -> Any:
    # 1 / True / 1.0 을 서로 다른 키로 구분
    if isinstance(value, (list, tuple)):
        return tuple(_typed(v) for v in value)
    return (type(value), value)


def _cache_key(state: FilterState, search_fields: tuple[str, ...]) -> tuple:
    filters = tuple(
        (cfg.field, cfg.operator, cfg.type, _typed(cfg.value)) for cfg in state.filters
    )
    return (filters, state.search, state.sort, search_fields)


@dataclass
class PipelineStats:
    """재계산 횟수 (필터/정렬 전체 계산, 페이지 슬라이스)"""
    recomputes: int = 0
    slices: int = 0


class QueryPipeline:
    """
    조회 파이프라인

    [1단계: 필터/정렬]  source, filters, search, sort, search_fields 변경 시에만
    PredicateEvaluator → 안정 정렬

    [2단계: 페이지]  page, limit 변경 시에는 1단계 결과를 다시 자르기만 함

    직전 결과 하나만 캐시합니다. source는 식별자(is)로 비교하므로
    같은 리스트를 제자리 수정했다면 invalidate()를 호출해야 합니다.
    """

    def __init__(
        self,
        catalog: Optional[FieldCatalog] = None,
        evaluator: Optional[PredicateEvaluator] = None,
    ):
        self.catalog = catalog
        self.evaluator = evaluator or PredicateEvaluator(catalog=catalog)
        self.stats = PipelineStats()

        self._source: Optional[Sequence[Any]] = None
        self._view_key: Optional[tuple] = None
        self._filtered: tuple = ()
        self._page_key: Optional[tuple] = None
        self._page: tuple = ()

        self.logger = logger.bind(component="QueryPipeline")

    def recompute(
        self,
        source: Sequence[Any],
        state: FilterState,
        search_fields: Sequence[str] = (),
    ) -> QueryResult:
        """
        조회 결과 계산

        Args:
            source: 원본 레코드 (변경하지 않음)
            state: 조회 상태
            search_fields: 전체 검색 대상 필드

        Returns:
            QueryResult: 필터/정렬 결과, 현재 페이지, 전체 건수/페이지 수
        """
        filtered = self._filtered_sorted(source, state, tuple(search_fields))
        page = self._slice(filtered, state.page, state.limit)

        total_items = len(filtered)
        return QueryResult(
            filtered=filtered,
            page=page,
            total_items=total_items,
            total_pages=count_pages(total_items, state.limit),
        )

    def invalidate(self) -> None:
        """캐시 초기화"""
        self._source = None
        self._view_key = None
        self._page_key = None

    def _filtered_sorted(
        self,
        source: Sequence[Any],
        state: FilterState,
        search_fields: tuple[str, ...],
    ) -> tuple:
        view_key = _cache_key(state, search_fields)
        if self._source is source and self._view_key == view_key:
            return self._filtered

        if self.catalog is not None:
            self.catalog.check_search_fields(search_fields)

        # 1. 필터링 (원본 순서 유지)
        filtered = [r for r in source if self.evaluator.passes(r, state, search_fields)]

        # 2. 정렬 (안정 정렬)
        if state.sort is not None:
            filtered = sort_records(filtered, state.sort, self.catalog)

        self._source = source
        self._view_key = view_key
        self._filtered = tuple(filtered)
        self._page_key = None
        self.stats.recomputes += 1

        self.logger.debug(
            f"Recomputed view: {len(self._filtered)}/{len(source)} records "
            f"({len(state.filters)} filters, sort={state.sort is not None})"
        )
        return self._filtered

    def _slice(self, filtered: tuple, page: int, limit: int) -> tuple:
        page_key = (page, limit)
        if self._page_key == page_key:
            return self._page

        self._page = slice_page(filtered, page, limit)
        self._page_key = page_key
        self.stats.slices += 1
        return self._page
