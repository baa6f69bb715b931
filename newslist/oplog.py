"""Tailing the MongoDB oplog for changes to the news collection."""

from __future__ import annotations

import logging
from typing import Any, Iterator

import redis
from bson.timestamp import Timestamp
from pymongo import CursorType

from .entities import Oplog

log = logging.getLogger(__name__)

NEWS_NAMESPACE = "gf.NewsContent"
DEFAULT_LAST_TIME = 1670746737 - 40 * 24 * 3600
DEFAULT_TAIL_TIMEOUT = 5.0


def initial_last_time(last_time: int) -> int:
    """Starting position in seconds; a fixed fallback when none is known."""
    if last_time == 0:
        log.info("parse newLastTime: %d", DEFAULT_LAST_TIME)
        return DEFAULT_LAST_TIME
    return last_time


def build_query(last_time: int) -> dict[str, Any]:
    """Query for news-collection oplog entries after the given second."""
    return {"ts": {"$gte": Timestamp(last_time + 1, 0)}, "ns": NEWS_NAMESPACE}


class OplogTailer:
    """Follows the oplog with a tailable cursor, recording progress in Redis."""

    def __init__(self, collection: Any, index: Any, tail_timeout: float = DEFAULT_TAIL_TIMEOUT) -> None:
        self.collection = collection
        self.index = index
        self.tail_timeout = tail_timeout

    def _open(self, last_time: int) -> Any:
        cursor = self.collection.find(
            build_query(last_time),
            cursor_type=CursorType.TAILABLE_AWAIT,
            sort=[("$natural", 1)],
        )
        return cursor.max_await_time_ms(int(self.tail_timeout * 1000))

    def follow(self, last_time: int = 0) -> Iterator[Oplog]:
        """Yield oplog entries forever, starting after ``last_time`` seconds.

        After each entry is consumed its position is stored. When the cursor
        dies, the stored position is read back and a new cursor opened.
        Database errors propagate to the caller.
        """
        last_time = initial_last_time(last_time)
        cursor = self._open(last_time)
        while True:
            for doc in cursor:
                oplog = Oplog.from_dict(doc)
                log.debug("oplog.ts:%d; _id: %s", oplog.seconds(), oplog.o_id)
                yield oplog
                last_time = oplog.seconds()
                try:
                    self.index.set_last_time(last_time)
                except redis.RedisError as exc:
                    log.error("SetLastTime err: %s", exc)
                log.debug("set last time: %d", last_time)
            if cursor.alive:
                continue
            try:
                last_time = self.index.get_last_time()
            except (KeyError, ValueError, redis.RedisError) as exc:
                log.error("parse GetLastTime err: %s", exc)
            else:
                log.debug("last time: %d", last_time)
            cursor = self._open(last_time)