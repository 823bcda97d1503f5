"""
CreditLens API 라우터
"""

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from app.domain.errors import MalformedStateError, QueryEngineError
from app.domain.serializer import export_state, import_state
from app.pipeline import FilterStore
from app.schemas.query import FilterState, OPERATORS_BY_TYPE
from app.schemas.results import ListView

router = APIRouter()


class QueryRequest(BaseModel):
    """목록 조회 요청"""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "records": [
                    {"id": 1, "name": "Alice", "age": 30, "status": "ACTIVE"},
                    {"id": 2, "name": "Bob", "age": 45, "status": "INACTIVE"},
                    {"id": 3, "name": "Carol", "age": 22, "status": "ACTIVE"},
                ],
                "state": {
                    "filters": [
                        {"field": "age", "operator": "gt", "value": 25, "type": "number"}
                    ],
                    "sort": {"field": "age", "direction": "asc"},
                    "search": "",
                    "page": 1,
                    "limit": 10,
                },
                "search_fields": ["name"],
            }
        }
    )

    records: list[dict[str, Any]] = Field(default_factory=list)
    state: FilterState = Field(default_factory=FilterState)
    search_fields: list[str] = Field(default_factory=list)


class StateDocument(BaseModel):
    """내보낸 필터 상태 텍스트"""
    text: str


@router.post("/query", response_model=ListView)
async def query_records(request: QueryRequest) -> ListView:
    """
    레코드 목록 조회

    요청에 포함된 레코드를 상태 기준으로 필터/정렬하고 현재 페이지를 반환합니다.
    """
    store = FilterStore(initial=request.state)
    try:
        return store.view(request.records, request.search_fields)
    except QueryEngineError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/operators")
async def get_operators():
    """필드 타입별 허용 연산자 조회"""
    return {
        field_type.value: [op.value for op in operators]
        for field_type, operators in OPERATORS_BY_TYPE.items()
    }


@router.post("/state/export", response_model=StateDocument)
async def export_filter_state(state: FilterState) -> StateDocument:
    """필터 상태를 텍스트로 내보내기"""
    return StateDocument(text=export_state(state))


@router.post("/state/validate", response_model=FilterState)
async def validate_filter_state(document: StateDocument) -> FilterState:
    """내보낸 텍스트를 검증하고 해석된 상태를 반환"""
    try:
        return import_state(document.text)
    except MalformedStateError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("/schema/filter-state")
async def get_filter_state_schema():
    """필터 상태 스키마 조회"""
    return FilterState.model_json_schema()
