#!/usr/bin/env python
"""
CreditLens 필터 상태 CLI

사용법:
    python scripts/filters_cli.py init filters.json                  # 초기 상태 파일 생성
    python scripts/filters_cli.py show filters.json                  # 상태 요약 출력
    python scripts/filters_cli.py apply clients.json filters.json    # 레코드에 상태 적용
    python scripts/filters_cli.py apply clients.json filters.json name,email
                                                                     # 검색 대상 필드 지정
"""

import json
import sys
from pathlib import Path

from loguru import logger

# 프로젝트 루트를 path에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.config import settings
from app.domain.errors import QueryEngineError
from app.pipeline import FilterStore


def _read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _load_store(state_path: str) -> FilterStore | None:
    store = FilterStore()
    result = store.import_filters(_read_text(state_path))
    if not result.success:
        print(f"❌ 필터 상태를 읽을 수 없음: {state_path}")
        print(f"   {result.error}")
        return None
    return store


def cmd_init(state_path: str):
    """초기 상태 파일 생성"""
    store = FilterStore()
    Path(state_path).write_text(store.export_filters(), encoding="utf-8")
    print(f"✅ 초기 필터 상태 저장됨: {state_path}")


def cmd_show(state_path: str):
    """상태 요약 출력"""
    store = _load_store(state_path)
    if store is None:
        return

    state = store.state

    print("=" * 50)
    print("🔎 필터 상태")
    print("=" * 50)
    print(f"  검색어: {state.search or '(없음)'}")
    if state.sort:
        print(f"  정렬: {state.sort.field} ({state.sort.direction})")
    else:
        print("  정렬: (없음)")
    print(f"  페이지: {state.page} (페이지당 {state.limit}개)")
    print(f"  필터: {len(state.filters)}개")
    for cfg in state.filters:
        print(f"    - {cfg.field} {cfg.operator} {cfg.value!r} [{cfg.type}]")
    print("=" * 50)


def cmd_apply(records_path: str, state_path: str, search_fields: list[str]):
    """레코드 파일에 상태 적용"""
    store = _load_store(state_path)
    if store is None:
        return

    try:
        records = json.loads(_read_text(records_path))
    except json.JSONDecodeError as e:
        print(f"❌ 레코드 파일을 읽을 수 없음: {records_path}")
        print(f"   {e}")
        return
    if not isinstance(records, list):
        print(f"❌ 레코드 파일은 JSON 배열이어야 합니다: {records_path}")
        return

    try:
        view = store.view(records, search_fields)
    except QueryEngineError as e:
        print(f"❌ 필터를 적용할 수 없음: {state_path}")
        print(f"   {e}")
        return

    print(f"📄 {view.total_items}건 중 {view.state.page}/{view.total_pages} 페이지")
    print("-" * 50)
    for record in view.page:
        print(json.dumps(record, ensure_ascii=False))
    if not view.page:
        print("  (결과 없음)")


def print_help():
    """도움말 출력"""
    print(__doc__)


def main():
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)

    if len(sys.argv) < 2:
        print_help()
        return

    command = sys.argv[1].lower()
    args = sys.argv[2:]

    if command == "init" and len(args) == 1:
        cmd_init(args[0])
    elif command == "show" and len(args) == 1:
        cmd_show(args[0])
    elif command == "apply" and len(args) in (2, 3):
        search_fields = [f.strip() for f in args[2].split(",") if f.strip()] if len(args) == 3 else []
        cmd_apply(args[0], args[1], search_fields)
    elif command in ["help", "-h", "--help"]:
        print_help()
    else:
        print(f"❌ 알 수 없는 명령: {' '.join(sys.argv[1:])}")
        print_help()


if __name__ == "__main__":
    main()
