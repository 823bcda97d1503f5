"""
결과 스키마
조회 파이프라인과 상태 저장소의 출력을 정의합니다.
"""

from dataclasses import dataclass
from typing import Any, Optional
from pydantic import BaseModel, Field

from .query import FilterState


@dataclass(frozen=True)
class QueryResult:
    """
    QueryPipeline 출력

    filtered는 캐시된 시퀀스를 그대로 공유하므로 tuple입니다.
    """
    filtered: tuple
    page: tuple
    total_items: int
    total_pages: int


class ListView(BaseModel):
    """목록 화면에 전달되는 조회 결과"""
    page: list[Any] = Field(
        default_factory=list,
        description="현재 페이지 레코드"
    )
    total_items: int = Field(description="필터 통과 레코드 수")
    total_pages: int = Field(description="전체 페이지 수")
    state: FilterState
    has_active_filters: bool = Field(description="필터 또는 검색어 적용 여부")
    has_active_sort: bool = Field(description="정렬 적용 여부")


class ImportResult(BaseModel):
    """필터 상태 가져오기 결과"""
    success: bool
    state: Optional[FilterState] = Field(
        default=None,
        description="적용된 상태 (성공 시)"
    )
    error: Optional[str] = Field(
        default=None,
        description="실패 사유",
        examples=["filter state is not valid JSON"]
    )
