"""Keeping the Redis news indexes in step with updated news records."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .entities import UpdatedDataResponse
from .redis_store import (
    COLUMN_LIST_KEY_PREFIX,
    IMPORTANT_NEWS_LIST_KEY,
    INDEX_NAME_LIST_PREFIX,
    STOCK_LIST_KEY_PREFIX,
)

log = logging.getLogger(__name__)

ALL_TYPES = 0
IMPORTANT_TYPE = 1


def stock_list_key(txt_type: int, market: str, code: str) -> str:
    """Key of the per-stock news list for one content type."""
    return f"{STOCK_LIST_KEY_PREFIX}_{txt_type}_{market}_{code}"


def column_list_key(column: str) -> str:
    """Key of the news list of one column."""
    return f"{COLUMN_LIST_KEY_PREFIX}_{column}"


def index_name_key(news_id: str) -> str:
    """Key of the set naming every stock list a news id appears in."""
    return f"{INDEX_NAME_LIST_PREFIX}_{news_id}"


class IndexUpdater:
    """Adds news to stock, important-news and column lists, and drops stale entries.

    With ``with_title_media`` the sorted-set members hold id, title and media;
    otherwise they hold the bare id. Redis errors propagate to the caller.
    """

    def __init__(self, index: Any, with_title_media: bool = True) -> None:
        self.index = index
        self.with_title_media = with_title_media

    def _post(self, key: str, updated: UpdatedDataResponse) -> int:
        content = updated.data
        if self.with_title_media:
            return self.index.post_id_title_media_zset(
                key, content.publish_time, content.id, content.title, content.media
            )
        return self.index.post_id_zset(key, content.publish_time, content.id)

    def apply(self, updated: UpdatedDataResponse) -> set[str]:
        """Index one update; returns the stock list keys the news now belongs to."""
        content = updated.data
        names_key = index_name_key(content.id)
        current: set[str] = set()

        for stock in content.stocks:
            typed_key = stock_list_key(content.txt_type, stock.market, stock.code)
            log.debug("stock list add %s: %d", typed_key, self._post(typed_key, updated))
            current.add(typed_key)

            all_key = stock_list_key(ALL_TYPES, stock.market, stock.code)
            log.debug("all-type list add %s: %d", all_key, self._post(all_key, updated))
            current.add(all_key)

            self.index.sadd_id_to_keys(names_key, typed_key)
            self.index.sadd_id_to_keys(names_key, all_key)

        if updated.op == "u":
            old_keys = self.index.smembers(names_key)
            log.debug("id: %s old stock lists: %s", content.id, old_keys)
            for key in sorted(old_keys - current):
                removed = self.index.zremove(key, content.id)
                log.debug("zremove res:%s, key:%s, id:%s", removed, key, content.id)
                removed = self.index.sremove(names_key, key)
                log.debug("sremove res:%s, key:%s, id:%s", removed, key, content.id)

        if content.txt_type == IMPORTANT_TYPE:
            log.debug("important news add: %d", self._post(IMPORTANT_NEWS_LIST_KEY, updated))

        for column in content.columns:
            key = column_list_key(column)
            log.debug("column list add %s: %d", key, self._post(key, updated))

        return current

    def run(self, updates: Iterable[UpdatedDataResponse]) -> int:
        """Index every update in turn; returns how many were applied."""
        count = 0
        for updated in updates:
            self.apply(updated)
            count += 1
            log.info("updates applied: %d", count)
        return count