"""News, oplog and request/response records."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping


class ParamError(ValueError):
    """Raised when request query parameters are missing or malformed."""


def _lookup(data: Mapping[str, Any], name: str, default: Any = None) -> Any:
    """Fetch a field by name, falling back to a case-insensitive match."""
    if name in data:
        value = data[name]
    else:
        lowered = name.lower()
        value = next(
            (v for k, v in data.items() if isinstance(k, str) and k.lower() == lowered),
            None,
        )
    return default if value is None else value


def _int(data: Mapping[str, Any], name: str) -> int:
    return int(_lookup(data, name, 0))


def _str(data: Mapping[str, Any], name: str) -> str:
    return str(_lookup(data, name, ""))


def _strings(data: Mapping[str, Any], name: str) -> list[str]:
    return [str(item) for item in _lookup(data, name, [])]


@dataclass
class StockTag:
    weight: float = 0.0
    emotion: str = ""
    emotion_weight: int = 0


def _tag_from_dict(data: Mapping[str, Any]) -> StockTag:
    return StockTag(
        weight=float(_lookup(data, "weight", 0.0)),
        emotion=_str(data, "emotion"),
        emotion_weight=_int(data, "emotionWeight"),
    )


def _tag_to_dict(tag: StockTag) -> dict[str, Any]:
    return {"Weight": tag.weight, "Emotion": tag.emotion, "EmotionWeight": tag.emotion_weight}


@dataclass
class Stock:
    market: str = ""
    code: str = ""
    name: str = ""
    type: int = 0
    tag: StockTag = field(default_factory=StockTag)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Stock":
        """Build from a stored document or a decoded JSON object."""
        return cls(
            market=_str(data, "market"),
            code=_str(data, "code"),
            name=_str(data, "name"),
            type=_int(data, "type"),
            tag=_tag_from_dict(_lookup(data, "tag", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON form; stock fields carry no JSON tags, so names are capitalised."""
        return {
            "Market": self.market,
            "Code": self.code,
            "Name": self.name,
            "Type": self.type,
            "Tag": _tag_to_dict(self.tag),
        }


@dataclass
class ColumnsObjection:
    id: str = ""
    title: str = ""


@dataclass
class Link:
    word: str = ""
    type: int = 0
    target: str = ""


@dataclass
class NewsContent:
    source: int = 0
    id: str = ""
    title: str = ""
    subtitle: str = ""
    media: str = ""
    content: str = ""
    status: int = 0
    create_time: int = 0
    update_time: int = 0
    publish_time: int = 0
    categories: list[str] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    stocks: list[Stock] = field(default_factory=list)
    source_name: str = ""
    columns_obj: list[ColumnsObjection] = field(default_factory=list)
    txt_type: int = 0
    links: list[Link] = field(default_factory=list)
    mask_title: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NewsContent":
        """Build from a stored document or a decoded JSON object."""
        return cls(
            source=_int(data, "source"),
            id=_str(data, "id"),
            title=_str(data, "title"),
            subtitle=_str(data, "subtitle"),
            media=_str(data, "media"),
            content=_str(data, "content"),
            status=_int(data, "status"),
            create_time=_int(data, "createTime"),
            update_time=_int(data, "updateTime"),
            publish_time=_int(data, "publishTime"),
            categories=_strings(data, "categories"),
            columns=_strings(data, "columns"),
            stocks=[Stock.from_dict(s) for s in _lookup(data, "stocks", [])],
            source_name=_str(data, "sourceName"),
            columns_obj=[
                ColumnsObjection(id=_str(c, "id"), title=_str(c, "title"))
                for c in _lookup(data, "columnsObj", [])
            ],
            txt_type=_int(data, "txtType"),
            links=[
                Link(word=_str(l, "word"), type=_int(l, "type"), target=_str(l, "target"))
                for l in _lookup(data, "links", [])
            ],
            mask_title=_str(data, "maskTitle"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "media": self.media,
            "content": self.content,
            "status": self.status,
            "createTime": self.create_time,
            "updateTime": self.update_time,
            "publishTime": self.publish_time,
            "categories": list(self.categories),
            "columns": list(self.columns),
            "stocks": [s.to_dict() for s in self.stocks],
            "sourceName": self.source_name,
            "columnsObj": [{"id": c.id, "title": c.title} for c in self.columns_obj],
            "txtType": self.txt_type,
            "links": [{"word": l.word, "type": l.type, "target": l.target} for l in self.links],
            "maskTitle": self.mask_title,
        }


@dataclass
class BriefInfo:
    id: str = ""
    title: str = ""
    media: str = ""
    stocks: list[Stock] = field(default_factory=list)
    publish_time: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "media": self.media,
            "stocks": [s.to_dict() for s in self.stocks],
            "publishTime": self.publish_time,
        }


@dataclass
class OptionalDetail:
    id: str = ""
    title: str = ""
    publish_time: int = 0
    media: str = ""
    stocks: list[Stock] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    txt_type: int = 0
    industries: list[Stock] = field(default_factory=list)


def _timestamp_value(ts: Any) -> int:
    """Turn a BSON timestamp (or its 64-bit integer form) into an integer."""
    if hasattr(ts, "time") and hasattr(ts, "inc"):
        return (int(ts.time) << 32) | int(ts.inc)
    return int(ts or 0)


@dataclass
class Oplog:
    ts: int = 0
    ns: str = ""
    op: str = ""
    o_id: Any = None
    o2_id: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Oplog":
        """Build from a raw oplog entry."""
        return cls(
            ts=_timestamp_value(data.get("ts")),
            ns=str(data.get("ns") or ""),
            op=str(data.get("op") or ""),
            o_id=(data.get("o") or {}).get("_id"),
            o2_id=(data.get("o2") or {}).get("_id"),
        )

    def object_id(self) -> Any:
        """The affected document id: from ``o`` on insert, ``o2`` on update, else None."""
        if self.op == "i":
            return self.o_id
        if self.op == "u":
            return self.o2_id
        return None

    def seconds(self) -> int:
        """Wall-clock seconds part of the timestamp."""
        return self.ts >> 32


@dataclass
class UpdatedDataResponse:
    op: str = ""
    id: str = ""
    data: NewsContent = field(default_factory=NewsContent)

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.op, "id": self.id, "data": self.data.to_dict()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str | bytes) -> "UpdatedDataResponse":
        payload = json.loads(text)
        return cls(
            op=_str(payload, "op"),
            id=_str(payload, "id"),
            data=NewsContent.from_dict(_lookup(payload, "data", {})),
        )


def _jsonable(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    return value


@dataclass
class ResponseData:
    err_code: int = 0
    err_msg: str = ""
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"errCode": self.err_code, "errMsg": self.err_msg, "data": _jsonable(self.data)}


def _query_int(query: Mapping[str, str], name: str, default: int) -> int:
    raw = query.get(name)
    if raw is None:
        return default
    if raw == "":
        return 0
    try:
        return int(raw)
    except ValueError as exc:
        raise ParamError(f"{name}: invalid integer {raw!r}") from exc


def _page_params(query: Mapping[str, str]) -> tuple[int, int]:
    page = _query_int(query, "page", 1)
    page_size = _query_int(query, "pageSize", 10)
    if page == 0:
        raise ParamError("page is required")
    if page_size == 0:
        raise ParamError("pageSize is required")
    return page, page_size


@dataclass
class ParamStockNews:
    market_code: str = ""
    txt_type: int = 0
    page: int = 1
    page_size: int = 10

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> "ParamStockNews":
        page, page_size = _page_params(query)
        return cls(
            market_code=query.get("ids", ""),
            txt_type=_query_int(query, "txtType", 0),
            page=page,
            page_size=page_size,
        )


@dataclass
class ParamColumnRequest:
    id: str = ""
    page: int = 1
    page_size: int = 10

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> "ParamColumnRequest":
        column_id = query.get("id", "")
        if not column_id:
            raise ParamError("id is required")
        page, page_size = _page_params(query)
        return cls(id=column_id, page=page, page_size=page_size)