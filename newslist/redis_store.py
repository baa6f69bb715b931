"""Sorted-set and set indexes of news ids kept in Redis."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

import redis

log = logging.getLogger(__name__)

STOCK_LIST_KEY_PREFIX = "info_stock_list"
IMPORTANT_NEWS_LIST_KEY = "info_important_list"
COLUMN_LIST_KEY_PREFIX = "info_column_list"
INDEX_NAME_LIST_PREFIX = "index_name_list"
LAST_TIME_KEY = "last_time"
KEY_TTL = timedelta(hours=24 * 30)


def member_value(news_id: str, title: str, media: str) -> str:
    """Sorted-set member holding id, title and media joined by underscores."""
    return f"{news_id}_{title}_{media}"


class RedisIndex:
    """News index operations on a Redis client that decodes responses."""

    def __init__(self, client: Any) -> None:
        self.client = client

    def post_id_zset(self, key: str, publish_time: int, news_id: str) -> int:
        log.debug("key: %s publishTime: %d id: %s", key, publish_time, news_id)
        return self.client.zadd(key, {news_id: float(publish_time)})

    def post_id_title_media_zset(
        self, key: str, publish_time: int, news_id: str, title: str, media: str
    ) -> int:
        log.debug("key: %s publishTime: %d id: %s", key, publish_time, news_id)
        return self.client.zadd(key, {member_value(news_id, title, media): float(publish_time)})

    def sadd_id_to_keys(self, key: str, member: str) -> int:
        """Add member to the set at key and refresh its expiry."""
        added = self.client.sadd(key, member)
        self.client.expire(key, KEY_TTL)
        return added

    def set_last_time(self, last_time: int) -> bool:
        return bool(self.client.set(LAST_TIME_KEY, last_time, ex=KEY_TTL))

    def get_last_time(self) -> int:
        """Stored oplog position in seconds; KeyError when none is stored."""
        value = self.client.get(LAST_TIME_KEY)
        if value is None:
            raise KeyError(LAST_TIME_KEY)
        return int(value)

    def smembers(self, key: str) -> set[str]:
        return set(self.client.smembers(key))

    def zremove(self, key: str, *args: str) -> int:
        return self.client.zrem(key, *args)

    def sremove(self, key: str, *args: str) -> int:
        return self.client.srem(key, *args)

    def rev_range(self, key: str, start: int, end: int) -> list[str]:
        """Members from highest score down, ``end`` inclusive."""
        return list(self.client.zrevrange(key, start, end))

    def close(self) -> None:
        self.client.close()


def connect(address: str = "127.0.0.1:6379", password: str | None = None, db: int = 0) -> RedisIndex:
    """Open a Redis connection and report whether it answers a ping."""
    host, sep, port = address.rpartition(":")
    if not sep:
        host, port = address, "6379"
    client = redis.Redis(
        host=host or "127.0.0.1",
        port=int(port),
        password=password,
        db=db,
        decode_responses=True,
    )
    try:
        log.info("pong: %s", client.ping())
    except redis.RedisError as exc:
        log.error("ping err: %s", exc)
    return RedisIndex(client)