"""Lookups of news documents stored in MongoDB."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from .entities import BriefInfo, NewsContent

log = logging.getLogger(__name__)

NEWS_DB = "gf"
NEWS_COLLECTION = "NewsContent"
BRIEF_FIELDS = {"id": 1, "title": 1, "media": 1, "stocks": 1, "publishTime": 1}


def _brief_from_doc(doc: dict[str, Any]) -> BriefInfo:
    content = NewsContent.from_dict(doc)
    return BriefInfo(
        id=content.id,
        title=content.title,
        media=content.media,
        stocks=content.stocks,
        publish_time=content.publish_time,
    )


class NewsStore:
    """Queries on the news collection of a MongoDB client."""

    def __init__(self, client: Any) -> None:
        self.client = client

    @property
    def _news(self) -> Any:
        return self.client[NEWS_DB][NEWS_COLLECTION]

    def find_content_by_object_id(self, object_id: Any) -> NewsContent:
        """Document with the given ``_id``; LookupError when absent."""
        doc = self._news.find_one({"_id": object_id})
        if doc is None:
            raise LookupError(f"no news with _id {object_id}")
        return NewsContent.from_dict(doc)

    def get_brief_info_by_id(self, news_id: str) -> BriefInfo:
        doc = self._news.find_one({"id": news_id})
        if doc is None:
            raise LookupError(f"no news with id {news_id}")
        return _brief_from_doc(doc)

    def get_brief_info_by_ids(self, ids: Iterable[str]) -> list[BriefInfo]:
        """One entry per id, in order; missing ids yield empty entries."""
        result = []
        for news_id in ids:
            try:
                result.append(self.get_brief_info_by_id(news_id))
            except (LookupError, PyMongoError) as exc:
                log.warning("id: %s; GetBriefInfoById err: %s", news_id, exc)
                result.append(BriefInfo())
        return result

    def get_brief_info_by_ids_batch(self, ids: Iterable[str]) -> list[BriefInfo]:
        """All found documents for the ids in one query, in store order."""
        id_list = list(ids)
        try:
            docs = list(self._news.find({"id": {"$in": id_list}}, BRIEF_FIELDS))
        except PyMongoError as exc:
            log.warning("ids: %s; GetBriefInfoById err: %s", id_list, exc)
            return []
        return [_brief_from_doc(doc) for doc in docs]

    def get_news_content_by_id(self, news_id: str) -> NewsContent:
        """Full content for the id, or an empty record when not found."""
        doc = self._news.find_one({"id": news_id})
        if doc is None:
            log.warning("GetNewsContentById err: not found %s", news_id)
            return NewsContent()
        return NewsContent.from_dict(doc)

    def oplog_collection(self) -> Any:
        return self.client["local"]["oplog.rs"]

    def close(self) -> None:
        self.client.close()


def connect(url: str) -> NewsStore:
    """Connect to MongoDB and report whether the server answers a ping."""
    client = MongoClient(url)
    try:
        client.admin.command("ping")
        log.info("connect success")
    except PyMongoError as exc:
        log.error("ping err: %s", exc)
    return NewsStore(client)