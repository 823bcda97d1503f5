"""
조회 파이프라인 패키지
"""

from .query_pipeline import QueryPipeline, PipelineStats, count_pages, slice_page
from .filter_store import FilterStore

__all__ = [
    "QueryPipeline",
    "PipelineStats",
    "count_pages",
    "slice_page",
    "FilterStore",
]
