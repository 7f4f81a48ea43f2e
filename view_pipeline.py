from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import List, Optional, Sequence

import pandas as pd

from column_registry import ColumnDefinition
from field_coercion import display_text, is_number
from pagination import Paginator

ASC = "asc"
DESC = "desc"


@dataclass
class ViewState:
    query: str = ""
    sort_key: Optional[str] = None
    sort_dir: Optional[str] = None  # asc | desc | None
    page: int = 0
    page_size: int = 10


@dataclass
class ViewProjection:
    rows: list
    total: int
    page: int
    page_count: int
    columns: List[ColumnDefinition] = field(default_factory=list)
    sort_key: Optional[str] = None
    sort_dir: Optional[str] = None

    def sort_indicator(self, key: str) -> str:
        if key != self.sort_key or not self.sort_dir:
            return ""
        return "▲" if self.sort_dir == ASC else "▼"


def filter_records(records: Sequence, visible_keys: Sequence[str], query: str) -> list:
    """Keep records where any visible-column value contains the query."""
    if not query:
        return list(records)
    keys = list(visible_keys)
    if not records or not keys:
        return []
    needle = query.lower()
    frame = pd.DataFrame(
        [[display_text(r.get(k)) for k in keys] for r in records],
        columns=range(len(keys)),
        dtype=object,
    )
    hits = pd.Series(False, index=frame.index)
    for col in frame.columns:
        hits |= frame[col].str.lower().str.contains(needle, regex=False)
    return [r for r, hit in zip(records, hits.tolist()) if hit]


def _compare_values(a, b) -> int:
    a = "" if a is None else a
    b = "" if b is None else b
    if not (is_number(a) and is_number(b)):
        a, b = display_text(a), display_text(b)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def sort_records(records: Sequence, key: Optional[str], direction: Optional[str]) -> list:
    if not key or direction not in (ASC, DESC):
        return list(records)
    sign = 1 if direction == ASC else -1

    def _cmp(ra, rb):
        return sign * _compare_values(ra.get(key), rb.get(key))

    # sorted() is stable, so equal values keep store order
    return sorted(records, key=cmp_to_key(_cmp))


def next_sort(sort_key: Optional[str], sort_dir: Optional[str], key: str):
    if sort_key != key or not sort_dir:
        return key, ASC
    if sort_dir == ASC:
        return key, DESC
    return None, None


class ViewPipeline:
    """Derives the visible page of rows from a TableState and a ViewState.

    The ViewState is the only source of view inputs; the paginator is
    re-synced from it before every page computation.
    """

    def __init__(self, state, view: Optional[ViewState] = None):
        self.state = state
        self.view = view if view is not None else ViewState()
        self.paginator = Paginator(0, self.view.page_size)

    def _sync_paginator(self, total_rows: int) -> Paginator:
        self.paginator.page_size = self.view.page_size
        self.paginator.update_total_rows(total_rows)
        self.paginator.go_to(self.view.page)
        return self.paginator

    def set_query(self, query: str):
        self.view.query = query or ""
        self.paginator.reset()
        self.view.page = self.paginator.page_index

    def toggle_sort(self, key: str):
        self.view.sort_key, self.view.sort_dir = next_sort(
            self.view.sort_key, self.view.sort_dir, key
        )
        return self.view.sort_dir

    def set_sort(self, key: Optional[str], direction: Optional[str]):
        if direction not in (ASC, DESC, None):
            raise ValueError(f"Unknown sort direction '{direction}'")
        if key is None or direction is None:
            self.view.sort_key, self.view.sort_dir = None, None
        else:
            self.view.sort_key, self.view.sort_dir = key, direction

    def go_to_page(self, page: int):
        self.paginator.go_to(page)
        self.view.page = self.paginator.page_index

    def next_page(self):
        pager = self._sync_paginator(len(self.filtered()))
        pager.next_page()
        self.view.page = pager.page_index

    def prev_page(self):
        pager = self._sync_paginator(len(self.filtered()))
        pager.prev_page()
        self.view.page = pager.page_index

    def filtered(self) -> list:
        return filter_records(
            self.state.rows.list(), self.state.columns.visible_keys(), self.view.query
        )

    def sorted(self) -> list:
        return sort_records(self.filtered(), self.view.sort_key, self.view.sort_dir)

    def project(self) -> ViewProjection:
        ordered = self.sorted()
        pager = self._sync_paginator(len(ordered))
        return ViewProjection(
            rows=pager.slice(ordered),
            total=len(ordered),
            page=pager.page_index,
            page_count=pager.page_count,
            columns=self.state.columns.visible(),
            sort_key=self.view.sort_key,
            sort_dir=self.view.sort_dir,
        )
