"""
Filter Store
목록 화면 하나의 FilterState를 보관하고 변경 연산을 제공합니다.
"""

from typing import Any, Optional, Sequence

from loguru import logger

from app.domain.errors import MalformedStateError
from app.domain.fields import FieldCatalog
from app.domain.serializer import export_state, import_state
from app.schemas.query import FilterConfig, FilterState, SortConfig, SortDirection
from app.schemas.results import ImportResult, ListView
from .query_pipeline import QueryPipeline


class FilterStore:
    """
    필터 상태 저장소

    - 목록 화면마다 하나씩 생성합니다 (화면 간 공유 금지).
    - 모든 변경은 새 FilterState로 통째로 교체됩니다.
    - 필터/정렬/검색어/페이지 크기 변경 시 page는 1로 돌아갑니다.
      단, clear_sort()는 page를 유지합니다.
    """

    def __init__(
        self,
        catalog: Optional[FieldCatalog] = None,
        initial: Optional[FilterState] = None,
        pipeline: Optional[QueryPipeline] = None,
    ):
        self.catalog = catalog
        self.pipeline = pipeline or QueryPipeline(catalog=catalog)
        self._state = initial if initial is not None else FilterState()
        self.logger = logger.bind(component="FilterStore")

    # === 상태 조회 ===

    @property
    def state(self) -> FilterState:
        return self._state

    @property
    def filters(self) -> tuple[FilterConfig, ...]:
        return self._state.filters

    @property
    def sort(self) -> Optional[SortConfig]:
        return self._state.sort

    @property
    def search(self) -> str:
        return self._state.search

    @property
    def page(self) -> int:
        return self._state.page

    @property
    def limit(self) -> int:
        return self._state.limit

    @property
    def has_active_filters(self) -> bool:
        return self._state.has_active_filters

    @property
    def has_active_sort(self) -> bool:
        return self._state.has_active_sort

    def _replace(self, **changes: Any) -> None:
        # 변경 결과도 검증 (잘못된 타입이면 ValidationError, 상태는 그대로)
        self._state = FilterState.model_validate({**self._state.model_dump(), **changes})

    # === 변경 연산 ===

    def add_filter(self, cfg: FilterConfig) -> None:
        """같은 필드의 기존 필터를 제거하고 맨 뒤에 추가"""
        if self.catalog is not None:
            self.catalog.check_filter(cfg)
        remaining = tuple(f for f in self._state.filters if f.field != cfg.field)
        self._replace(filters=remaining + (cfg,), page=1)

    def remove_filter(self, field: str) -> None:
        remaining = tuple(f for f in self._state.filters if f.field != field)
        self._replace(filters=remaining, page=1)

    def clear_filters(self) -> None:
        self._replace(filters=(), page=1)

    def set_sort(self, field: str, direction: SortDirection | str = SortDirection.ASC) -> None:
        sort = SortConfig(field=field, direction=direction)
        if self.catalog is not None:
            self.catalog.check_sort(sort)
        self._replace(sort=sort, page=1)

    def clear_sort(self) -> None:
        # page 유지
        self._replace(sort=None)

    def set_search(self, text: str) -> None:
        self._replace(search=text, page=1)

    def set_page(self, page: int) -> None:
        """전체 페이지 수와 비교하지 않음 (호출 측 책임). 1 미만이면 ValueError"""
        self._replace(page=page)

    def set_limit(self, limit: int) -> None:
        self._replace(limit=limit, page=1)

    def reset(self) -> None:
        """초기 상태로 복원"""
        self._state = FilterState()

    # === 내보내기 / 가져오기 ===

    def export_filters(self) -> str:
        return export_state(self._state)

    def import_filters(self, text: str) -> ImportResult:
        """
        내보낸 텍스트로 상태 전체를 교체합니다 (병합하지 않음).

        실패 시 현재 상태는 그대로 유지되고 실패 사유를 반환합니다.
        """
        try:
            state = import_state(text)
        except MalformedStateError as e:
            self.logger.warning(f"Filter import failed: {e}")
            return ImportResult(success=False, error=str(e))

        self._state = state
        self.logger.info(
            f"Imported filter state: {len(state.filters)} filters, page {state.page}"
        )
        return ImportResult(success=True, state=state)

    # === 조회 ===

    def view(self, source: Sequence[Any], search_fields: Sequence[str] = ()) -> ListView:
        """
        현재 상태로 목록 조회

        Args:
            source: 원본 레코드 (외부 소유, 변경하지 않음)
            search_fields: 전체 검색 대상 필드

        Returns:
            ListView: 현재 페이지와 페이지 정보
        """
        result = self.pipeline.recompute(source, self._state, search_fields)

        return ListView(
            page=list(result.page),
            total_items=result.total_items,
            total_pages=result.total_pages,
            state=self._state,
            has_active_filters=self._state.has_active_filters,
            has_active_sort=self._state.has_active_sort,
        )
