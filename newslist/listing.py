"""Paged news listings read from the Redis indexes."""

from __future__ import annotations

import logging
from typing import Any

import redis

from .entities import BriefInfo, NewsContent, ParamColumnRequest, ParamStockNews
from .indexer import column_list_key
from .redis_store import IMPORTANT_NEWS_LIST_KEY, STOCK_LIST_KEY_PREFIX

log = logging.getLogger(__name__)


def parse_member(value: str) -> BriefInfo:
    """Split an ``id_title_media`` sorted-set member into a brief record.

    Only the first three parts are used. ValueError when fewer are present.
    """
    parts = value.split("_")
    if len(parts) < 3:
        raise ValueError(f"malformed index member: {value!r}")
    if len(parts) > 3:
        log.warning("idTitleMedia length > 3: %s", value)
    return BriefInfo(id=parts[0], title=parts[1], media=parts[2])


def page_bounds(page: int, page_size: int) -> tuple[int, int]:
    """Inclusive start and end ranks of a 1-based page."""
    return (page - 1) * page_size, page * page_size - 1


class ListService:
    """Answers list and content requests from the Redis index and the news store."""

    def __init__(self, index: Any, store: Any) -> None:
        self.index = index
        self.store = store

    def _briefs(self, key: str, start: int, end: int) -> list[BriefInfo]:
        return [parse_member(member) for member in self.index.rev_range(key, start, end)]

    def stock_info(self, params: ParamStockNews) -> list[BriefInfo]:
        """Newest-first page of news for a stock and content type.

        Redis errors propagate to the caller.
        """
        type_market_code = f"{params.txt_type}_{params.market_code}".upper()
        key = f"{STOCK_LIST_KEY_PREFIX}_{type_market_code}"
        start, end = page_bounds(params.page, params.page_size)
        return self._briefs(key, start, end)

    def important_news_info(self, limit: int) -> list[BriefInfo]:
        """The newest ``limit`` important news; empty when Redis fails."""
        try:
            return self._briefs(IMPORTANT_NEWS_LIST_KEY, 0, limit - 1)
        except redis.RedisError as exc:
            log.error("important news list err: %s", exc)
            return []

    def column_info(self, params: ParamColumnRequest) -> list[BriefInfo]:
        """Newest-first page of a column; empty when Redis fails."""
        start, end = page_bounds(params.page, params.page_size)
        try:
            return self._briefs(column_list_key(params.id), start, end)
        except redis.RedisError as exc:
            log.error("column list err: %s", exc)
            return []

    def news_content(self, news_id: str) -> NewsContent:
        """Full content of one news item, empty when not found."""
        return self.store.get_news_content_by_id(news_id)