import json

import pytest
from bson import Timestamp

from newslist.entities import (
    BriefInfo,
    NewsContent,
    Oplog,
    ParamColumnRequest,
    ParamError,
    ParamStockNews,
    ResponseData,
    Stock,
    StockTag,
    UpdatedDataResponse,
)


def _content():
    return NewsContent(
        source=7,
        id="n1",
        title="t",
        media="m",
        publish_time=1670746737,
        columns=["c1", "c2"],
        stocks=[Stock(market="SH", code="600000", name="x", tag=StockTag(0.5, "pos", 3))],
        txt_type=1,
    )


def test_stock_from_bson_document():
    doc = {"market": "SH", "code": "600000", "name": "n", "type": 2,
           "tag": {"weight": 0.25, "emotion": "neg", "emotionWeight": 4}}
    stock = Stock.from_dict(doc)
    assert stock == Stock("SH", "600000", "n", 2, StockTag(0.25, "neg", 4))


def test_stock_json_keys_round_trip():
    stock = Stock("SZ", "000001", "a", 1, StockTag(1.0, "e", 2))
    out = stock.to_dict()
    assert set(out) == {"Market", "Code", "Name", "Type", "Tag"}
    assert Stock.from_dict(out) == stock


def test_news_content_round_trip():
    content = _content()
    assert NewsContent.from_dict(content.to_dict()) == content


def test_news_content_null_fields_default():
    content = NewsContent.from_dict({"id": "x", "stocks": None, "columns": None})
    assert content.id == "x"
    assert content.stocks == []
    assert content.columns == []


def test_brief_info_to_dict():
    info = BriefInfo(id="a", title="b", media="c", publish_time=5)
    assert info.to_dict() == {"id": "a", "title": "b", "media": "c", "stocks": [], "publishTime": 5}


def test_oplog_from_dict_timestamp():
    oplog = Oplog.from_dict({"ts": Timestamp(1670746737, 3), "ns": "gf.NewsContent",
                             "op": "i", "o": {"_id": "oid"}})
    assert oplog.seconds() == 1670746737
    assert oplog.ts & 0xFFFFFFFF == 3
    assert oplog.ns == "gf.NewsContent"


def test_oplog_object_id_by_op():
    insert = Oplog(op="i", o_id="a", o2_id="b")
    update = Oplog(op="u", o_id="a", o2_id="b")
    delete = Oplog(op="d", o_id="a", o2_id="b")
    assert insert.object_id() == "a"
    assert update.object_id() == "b"
    assert delete.object_id() is None


def test_oplog_integer_ts():
    oplog = Oplog.from_dict({"ts": 1670746737 << 32, "op": "u", "o2": {"_id": "z"}})
    assert oplog.seconds() == 1670746737
    assert oplog.object_id() == "z"


def test_updated_data_json_round_trip():
    update = UpdatedDataResponse(op="u", id="n1", data=_content())
    assert UpdatedDataResponse.from_json(update.to_json()) == update


def test_updated_data_to_json_shape():
    update = UpdatedDataResponse(op="i", id="n1", data=_content())
    decoded = json.loads(update.to_json())
    assert decoded["op"] == "i"
    assert decoded["data"]["publishTime"] == 1670746737


def test_response_data_to_dict():
    response = ResponseData(data=[BriefInfo(id="a", title="b", media="c")])
    out = response.to_dict()
    assert out["errCode"] == 0
    assert out["errMsg"] == ""
    assert out["data"] == [BriefInfo(id="a", title="b", media="c").to_dict()]


def test_param_stock_news_defaults():
    params = ParamStockNews.from_query({"ids": "SH_600000"})
    assert (params.page, params.page_size, params.txt_type) == (1, 10, 0)
    assert params.market_code == "SH_600000"


def test_param_stock_news_values():
    params = ParamStockNews.from_query({"ids": "a", "txtType": "2", "page": "3", "pageSize": "20"})
    assert (params.txt_type, params.page, params.page_size) == (2, 3, 20)


@pytest.mark.parametrize("query", [{"page": "0"}, {"pageSize": ""}, {"page": "abc"}])
def test_param_stock_news_errors(query):
    with pytest.raises(ParamError):
        ParamStockNews.from_query(query)


def test_param_column_request():
    params = ParamColumnRequest.from_query({"id": "col", "page": "2"})
    assert (params.id, params.page, params.page_size) == ("col", 2, 10)
    with pytest.raises(ParamError):
        ParamColumnRequest.from_query({"page": "1"})