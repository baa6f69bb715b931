"""Turning oplog entries into updated-news records and fanning them out."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable, Sequence

from pymongo.errors import PyMongoError

from .entities import NewsContent, Oplog, UpdatedDataResponse

log = logging.getLogger(__name__)

Sink = Callable[[UpdatedDataResponse], Any]


class SubFlag:
    """Thread-safe switch telling whether a push subscriber is listening."""

    def __init__(self) -> None:
        self._flag = False
        self._lock = threading.Lock()

    def on_push(self) -> bool:
        with self._lock:
            return self._flag

    def set_flag(self, flag: bool) -> None:
        with self._lock:
            self._flag = flag


def updated_data_for(oplog: Oplog, store: Any) -> UpdatedDataResponse | None:
    """Fetch the news touched by an insert or update; None for other ops.

    When the document is gone the record carries empty content.
    """
    object_id = oplog.object_id()
    if oplog.op not in ("i", "u"):
        return None
    try:
        content = store.find_content_by_object_id(object_id)
    except (LookupError, PyMongoError) as exc:
        log.debug("content for %s not found: %s", object_id, exc)
        content = NewsContent()
    return UpdatedDataResponse(op=oplog.op, id=content.id, data=content)


def fan_out(
    oplogs: Iterable[Oplog],
    store: Any,
    sinks: Sequence[Sink],
    sub_flag: SubFlag | None = None,
) -> None:
    """Send each update to the first sink, and to the second while pushing is on."""
    for oplog in oplogs:
        updated = updated_data_for(oplog, store)
        if updated is None:
            continue
        log.debug("GetUpdatedData: %s", updated)
        sinks[0](updated)
        if sub_flag is not None and sub_flag.on_push():
            sinks[1](updated)