"""
CreditLens 테스트 - Query Pipeline
"""

import random

import pytest
import sys
sys.path.insert(0, ".")

from app.pipeline import QueryPipeline, count_pages
from app.schemas.query import FilterConfig, FilterState, SortConfig


ALICE = {"id": 1, "name": "Alice", "age": 30, "status": "ACTIVE"}
BOB = {"id": 2, "name": "Bob", "age": 45, "status": "INACTIVE"}
CAROL = {"id": 3, "name": "Carol", "age": 22, "status": "ACTIVE"}
DATASET = [ALICE, BOB, CAROL]


def make_applications(count=47, seed=7):
    rng = random.Random(seed)
    statuses = ["PENDING", "APPROVED", "REJECTED"]
    return [
        {
            "id": i,
            "client": f"client-{i:03d}",
            "amount": rng.choice([5000, 10000, 15000, 20000]),
            "status": rng.choice(statuses),
        }
        for i in range(count)
    ]


class TestScenario:
    """기본 데이터셋 시나리오"""

    def setup_method(self):
        self.pipeline = QueryPipeline()

    def test_search(self):
        """search='ali' → Alice"""
        result = self.pipeline.recompute(DATASET, FilterState(search="ali"), ["name"])
        assert list(result.filtered) == [ALICE]

    def test_filter_keeps_order(self):
        """age > 25 → Alice, Bob (원래 순서)"""
        cfg = FilterConfig(field="age", operator="gt", value=25, type="number")
        result = self.pipeline.recompute(DATASET, FilterState(filters=(cfg,)), ["name"])
        assert list(result.filtered) == [ALICE, BOB]

    def test_sort_ascending(self):
        """나이 오름차순 → Carol, Alice, Bob"""
        state = FilterState(sort=SortConfig(field="age", direction="asc"))
        result = self.pipeline.recompute(DATASET, state, ["name"])
        assert list(result.filtered) == [CAROL, ALICE, BOB]

    def test_second_page(self):
        """limit=2, page=2 → Bob"""
        state = FilterState(sort=SortConfig(field="age", direction="asc"), limit=2, page=2)
        result = self.pipeline.recompute(DATASET, state, ["name"])
        assert list(result.page) == [BOB]
        assert result.total_pages == 2
        assert result.total_items == 3

    def test_status_filter_with_search(self):
        """status=ACTIVE + search='a' → Alice, Carol ('Carol'에도 a가 있음)"""
        cfg = FilterConfig(field="status", operator="equals", value="ACTIVE", type="select")
        state = FilterState(filters=(cfg,), search="a")
        result = self.pipeline.recompute(DATASET, state, ["name"])
        assert list(result.filtered) == [ALICE, CAROL]


class TestPipelineLaws:
    """파이프라인 성질 테스트"""

    def setup_method(self):
        self.pipeline = QueryPipeline()
        self.records = make_applications()

    def test_identity(self):
        """조건이 없으면 원본 그대로"""
        result = self.pipeline.recompute(self.records, FilterState(), ["client"])
        assert list(result.filtered) == self.records

    def test_subset(self):
        """결과는 원본의 부분집합"""
        cfg = FilterConfig(field="amount", operator="gte", value=10000, type="number")
        state = FilterState(filters=(cfg,), search="client-0")
        result = self.pipeline.recompute(self.records, state, ["client"])

        source_ids = {id(r) for r in self.records}
        assert all(id(r) in source_ids for r in result.filtered)
        assert len(result.filtered) <= len(self.records)
        assert len({id(r) for r in result.filtered}) == len(result.filtered)

    def test_stability(self):
        """정렬 키가 같으면 필터 후 순서 유지"""
        cfg = FilterConfig(field="amount", operator="gt", value=5000, type="number")
        for direction in ("asc", "desc"):
            state = FilterState(filters=(cfg,), sort=SortConfig(field="status", direction=direction))
            result = QueryPipeline().recompute(self.records, state)

            pre_sort = [r for r in self.records if r["amount"] > 5000]
            for status in ("PENDING", "APPROVED", "REJECTED"):
                expected = [r["id"] for r in pre_sort if r["status"] == status]
                actual = [r["id"] for r in result.filtered if r["status"] == status]
                assert actual == expected

    def test_pagination_completeness(self):
        """전체 페이지를 이어 붙이면 결과와 같음"""
        state = FilterState(sort=SortConfig(field="amount", direction="desc"), limit=10)
        first = self.pipeline.recompute(self.records, state)
        assert first.total_pages == 5

        pages = []
        for page in range(1, first.total_pages + 1):
            result = self.pipeline.recompute(self.records, state.model_copy(update={"page": page}))
            pages.extend(result.page)
            assert len(result.page) <= state.limit

        assert pages == list(first.filtered)

    def test_page_past_end(self):
        """마지막 페이지 이후는 빈 페이지 (보정 없음)"""
        result = self.pipeline.recompute(self.records, FilterState(page=99, limit=10))
        assert result.page == ()
        assert result.total_pages == 5

    def test_empty_result(self):
        """결과가 없으면 total_pages=0"""
        result = self.pipeline.recompute(self.records, FilterState(search="nobody"), ["client"])
        assert result.total_items == 0
        assert result.total_pages == 0
        assert result.page == ()


class TestMemoization:
    """재계산 분리 테스트"""

    def setup_method(self):
        self.pipeline = QueryPipeline()
        self.records = make_applications()
        self.state = FilterState(sort=SortConfig(field="amount", direction="asc"), limit=5)

    def test_page_change_does_not_refilter(self):
        """page/limit 변경은 슬라이스만 다시 수행"""
        first = self.pipeline.recompute(self.records, self.state)
        second = self.pipeline.recompute(self.records, self.state.model_copy(update={"page": 3}))
        third = self.pipeline.recompute(self.records, self.state.model_copy(update={"limit": 20}))

        assert self.pipeline.stats.recomputes == 1
        assert self.pipeline.stats.slices == 3
        assert first.filtered is second.filtered is third.filtered

    def test_same_state_reuses_page(self):
        """같은 상태는 캐시 재사용"""
        self.pipeline.recompute(self.records, self.state)
        self.pipeline.recompute(self.records, self.state)
        assert self.pipeline.stats.recomputes == 1
        assert self.pipeline.stats.slices == 1

    def test_filter_change_recomputes(self):
        """필터 변경 시 다시 계산"""
        self.pipeline.recompute(self.records, self.state)
        cfg = FilterConfig(field="status", operator="equals", value="PENDING", type="select")
        self.pipeline.recompute(self.records, self.state.model_copy(update={"filters": (cfg,)}))
        assert self.pipeline.stats.recomputes == 2

    def test_new_source_recomputes(self):
        """새 원본이면 다시 계산"""
        self.pipeline.recompute(self.records, self.state)
        self.pipeline.recompute(list(self.records), self.state)
        assert self.pipeline.stats.recomputes == 2

    def test_invalidate(self):
        """invalidate 후 다시 계산"""
        self.pipeline.recompute(self.records, self.state)
        self.pipeline.invalidate()
        self.pipeline.recompute(self.records, self.state)
        assert self.pipeline.stats.recomputes == 2

    def test_bool_and_int_filter_values_not_confused(self):
        """equals 1 → equals True 변경 시 캐시를 재사용하지 않음"""
        one, true = {"v": 1}, {"v": True}
        records = [one, true]

        def state_for(value):
            cfg = FilterConfig(field="v", operator="equals", value=value, type="select")
            return FilterState(filters=(cfg,))

        first = self.pipeline.recompute(records, state_for(1))
        second = self.pipeline.recompute(records, state_for(True))

        assert len(first.filtered) == 1 and first.filtered[0] is one
        assert len(second.filtered) == 1 and second.filtered[0] is true
        assert self.pipeline.stats.recomputes == 2

    def test_cached_result_matches_fresh(self):
        """캐시 결과와 새 계산 결과가 같음"""
        cached = self.pipeline.recompute(self.records, self.state.model_copy(update={"page": 2}))
        fresh = QueryPipeline().recompute(self.records, self.state.model_copy(update={"page": 2}))
        assert cached == fresh


class TestCountPages:
    """페이지 수 계산"""

    def test_count_pages(self):
        assert count_pages(0, 10) == 0
        assert count_pages(1, 10) == 1
        assert count_pages(10, 10) == 1
        assert count_pages(11, 10) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
