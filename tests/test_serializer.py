"""
CreditLens 테스트 - 필터 상태 직렬화
"""

import json
from datetime import date

import pytest
import sys
sys.path.insert(0, ".")

from app.domain.errors import MalformedStateError
from app.domain.serializer import export_state, import_state
from app.schemas.query import FilterConfig, FilterState, SortConfig


def full_state():
    return FilterState(
        filters=(
            FilterConfig(field="name", operator="contains", value="mar", type="string"),
            FilterConfig(field="amount", operator="between", value=(5000, 20000), type="number"),
            FilterConfig(field="submitted_at", operator="gte", value=date(2024, 1, 1), type="date"),
            FilterConfig(field="verified", operator="equals", value=False, type="boolean"),
            FilterConfig(field="status", operator="notIn", value=["REJECTED"], type="select"),
        ),
        sort=SortConfig(field="amount", direction="desc"),
        search="dupont",
        page=3,
        limit=25,
    )


class TestExport:
    """내보내기"""

    def test_contains_all_fields(self):
        """version과 다섯 필드를 모두 포함"""
        payload = json.loads(export_state(full_state()))

        assert payload["version"] == 1
        assert set(payload) == {"version", "filters", "sort", "search", "page", "limit"}
        assert payload["filters"][1] == {
            "field": "amount",
            "operator": "between",
            "value": [5000, 20000],
            "type": "number",
        }
        assert payload["filters"][2]["value"] == "2024-01-01"
        assert payload["sort"] == {"field": "amount", "direction": "desc"}

    def test_empty_sort_is_null(self):
        """정렬이 없으면 null"""
        payload = json.loads(export_state(FilterState()))
        assert payload["sort"] is None
        assert payload["filters"] == []

    def test_indent(self):
        """들여쓰기 옵션"""
        assert "\n" in export_state(FilterState(), indent=2)


class TestImport:
    """가져오기"""

    def test_round_trip(self):
        """import(export(S)) == S"""
        state = full_state()
        assert import_state(export_state(state)) == state

    def test_round_trip_initial(self):
        """초기 상태 왕복"""
        assert import_state(export_state(FilterState())) == FilterState()

    def test_unversioned_document(self):
        """version 없는 구버전 문서 (추가 키는 무시)"""
        text = json.dumps({
            "filters": [{"field": "age", "operator": "gt", "value": 25, "type": "number"}],
            "sort": None,
            "search": "",
            "page": 1,
            "limit": 10,
            "selectedRows": [1, 2],
        })
        state = import_state(text)
        assert state.filters[0].field == "age"
        assert state.limit == 10

    @pytest.mark.parametrize("text", [
        "",
        "{not json",
        "[]",
        "\"filters\"",
        json.dumps({"version": 1, "filters": "age>25"}),
        json.dumps({"version": 1, "page": 0}),
        json.dumps({"version": 1, "limit": -5}),
        json.dumps({"version": 1, "sort": {"field": "age", "direction": "sideways"}}),
        json.dumps({"version": 1, "filters": [{"field": "age", "operator": "like", "value": 1, "type": "number"}]}),
        json.dumps({"version": 1, "filters": [{"field": "age", "operator": "gt", "value": 1, "type": "money"}]}),
        json.dumps({"version": 1, "filters": [
            {"field": "age", "operator": "gt", "value": 1, "type": "number"},
            {"field": "age", "operator": "lt", "value": 9, "type": "number"},
        ]}),
        json.dumps({"version": 99}),
        json.dumps({"version": "1"}),
    ])
    def test_malformed(self, text):
        """구조가 맞지 않으면 MalformedStateError"""
        with pytest.raises(MalformedStateError):
            import_state(text)

    def test_non_string_input(self):
        """문자열이 아닌 입력"""
        with pytest.raises(MalformedStateError):
            import_state(None)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
