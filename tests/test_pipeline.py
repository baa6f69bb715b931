import json

from newslist.entities import NewsContent, Oplog, UpdatedDataResponse
from newslist.pipeline import MAX_MESSAGE_BYTES, SyncStats, encode_update, sync_updates


class FakeStore:
    def __init__(self, docs):
        self.docs = docs

    def find_content_by_object_id(self, object_id):
        if object_id not in self.docs:
            raise LookupError(object_id)
        return self.docs[object_id]


def make_store():
    return FakeStore(
        {
            "oid-a": NewsContent(id="news-a", title="标题", columns=["c1"]),
            "oid-b": NewsContent(id="news-b", title="B"),
        }
    )


def test_encode_update_round_trip():
    update = UpdatedDataResponse(op="u", id="news-a", data=NewsContent(id="news-a", title="标题"))
    payload = encode_update(update)
    assert isinstance(payload, bytes)
    assert UpdatedDataResponse.from_json(payload) == update
    assert json.loads(payload)["op"] == "u"


def test_sync_publishes_only_known_inserts_and_updates():
    sent = []

    def publish(payload):
        sent.append(payload)
        return True

    oplogs = [
        Oplog(op="i", o_id="oid-a"),
        Oplog(op="d", o_id="oid-a"),
        Oplog(op="u", o2_id="gone"),
        Oplog(op="u", o2_id="oid-b"),
    ]
    stats = sync_updates(oplogs, make_store(), publish)
    assert [UpdatedDataResponse.from_json(p).id for p in sent] == ["news-a", "news-b"]
    assert stats == SyncStats(enqueued=len(sent), successes=len(sent), errors=0)


def test_failed_deliveries_count_as_errors():
    stats = sync_updates(
        [Oplog(op="i", o_id="oid-a"), Oplog(op="i", o_id="oid-b")],
        make_store(),
        lambda payload: False,
    )
    assert stats.enqueued == 2
    assert stats.errors == 2
    assert stats.successes == 0


def test_timeout_stops_sync():
    calls = []

    def publish(payload):
        calls.append(payload)
        if len(calls) > 1:
            raise TimeoutError
        return True

    oplogs = [Oplog(op="i", o_id="oid-a"), Oplog(op="i", o_id="oid-b"), Oplog(op="i", o_id="oid-a")]
    stats = sync_updates(oplogs, make_store(), publish)
    assert len(calls) == 2
    assert stats.enqueued == 1
    assert stats.successes == 1


def test_oversized_payload_is_not_sent():
    big = NewsContent(id="news-big", content="x" * (MAX_MESSAGE_BYTES + 1))
    sent = []
    stats = sync_updates(
        [Oplog(op="i", o_id="oid-big")],
        FakeStore({"oid-big": big}),
        lambda payload: sent.append(payload) or True,
    )
    assert sent == []
    assert stats.errors == 1
    assert stats.successes == 0