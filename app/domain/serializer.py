"""
필터 상태 직렬화
FilterState를 JSON 텍스트로 내보내고 다시 가져옵니다.

형식 (version 1):
    {"version": 1, "filters": [...], "sort": {...} | null,
     "search": "", "page": 1, "limit": 10}

version 키가 없는 문서는 구버전 웹 클라이언트가 내보낸 형식(version 0)으로
간주합니다. 키 구성은 같고 version만 없습니다.
"""

import json
from typing import Any, Callable, Optional

from loguru import logger
from pydantic import ValidationError

from app.config import settings
from app.schemas.query import FilterState
from .errors import MalformedStateError

STATE_KEYS = ("filters", "sort", "search", "page", "limit")


def _upgrade_v0(payload: dict[str, Any]) -> dict[str, Any]:
    """version 0 -> 1: 상태 키 외의 값은 버림"""
    return {key: payload[key] for key in STATE_KEYS if key in payload}


# 버전별 마이그레이션: 원본 버전 -> 다음 버전으로 변환하는 함수
_MIGRATIONS: dict[int, Callable[[dict[str, Any]], dict[str, Any]]] = {
    0: _upgrade_v0,
}


def export_state(state: FilterState, indent: Optional[int] = None) -> str:
    """
    FilterState 전체를 JSON 텍스트로 변환

    Args:
        state: 조회 상태
        indent: JSON 들여쓰기 (기본값은 settings.STATE_EXPORT_INDENT)
    """
    payload = {"version": settings.STATE_FORMAT_VERSION}
    payload.update(state.model_dump(mode="json"))
    return json.dumps(
        payload,
        ensure_ascii=False,
        indent=indent if indent is not None else settings.STATE_EXPORT_INDENT,
    )


def import_state(text: str) -> FilterState:
    """
    JSON 텍스트를 FilterState로 변환

    Raises:
        MalformedStateError: JSON이 아니거나 구조가 맞지 않는 경우
    """
    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as e:
        raise MalformedStateError(f"filter state is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedStateError("filter state must be a JSON object")

    payload = dict(payload)
    version = payload.pop("version", 0)
    current = settings.STATE_FORMAT_VERSION

    if not isinstance(version, int) or isinstance(version, bool) or version < 0:
        raise MalformedStateError(f"invalid filter state version: {version!r}")
    if version > current:
        raise MalformedStateError(
            f"filter state version {version} is newer than supported version {current}"
        )

    for from_version in range(version, current):
        payload = _MIGRATIONS[from_version](payload)

    try:
        state = FilterState.model_validate(payload)
    except ValidationError as e:
        raise MalformedStateError(
            f"filter state has invalid structure: {e.error_count()} error(s)\n{e}"
        ) from e

    if version < current:
        logger.info(f"Migrated filter state from version {version} to {current}")
    return state
