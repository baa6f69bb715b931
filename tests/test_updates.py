import threading

from newslist.entities import NewsContent, Oplog
from newslist.updates import SubFlag, fan_out, updated_data_for


class FakeStore:
    def __init__(self, docs):
        self.docs = docs
        self.calls = []

    def find_content_by_object_id(self, object_id):
        self.calls.append(object_id)
        if object_id not in self.docs:
            raise LookupError(object_id)
        return self.docs[object_id]


def make_store():
    return FakeStore(
        {
            "oid-a": NewsContent(id="news-a", title="A", txt_type=1),
            "oid-b": NewsContent(id="news-b", title="B"),
        }
    )


def test_insert_uses_o_id():
    store = make_store()
    updated = updated_data_for(Oplog(op="i", o_id="oid-a"), store)
    assert updated.op == "i"
    assert updated.id == "news-a"
    assert updated.data.title == "A"
    assert store.calls == ["oid-a"]


def test_update_uses_o2_id():
    store = make_store()
    updated = updated_data_for(Oplog(op="u", o_id="oid-a", o2_id="oid-b"), store)
    assert updated.op == "u"
    assert updated.id == "news-b"
    assert store.calls == ["oid-b"]


def test_other_ops_are_skipped():
    store = make_store()
    assert updated_data_for(Oplog(op="d", o_id="oid-a"), store) is None
    assert store.calls == []


def test_missing_content_gives_empty_record():
    updated = updated_data_for(Oplog(op="i", o_id="gone"), make_store())
    assert updated.op == "i"
    assert updated.id == ""
    assert updated.data == NewsContent()


def test_sub_flag_switches():
    flag = SubFlag()
    assert flag.on_push() is False
    flag.set_flag(True)
    assert flag.on_push() is True
    flag.set_flag(False)
    assert flag.on_push() is False


def test_sub_flag_across_threads():
    flag = SubFlag()
    worker = threading.Thread(target=flag.set_flag, args=(True,))
    worker.start()
    worker.join()
    assert flag.on_push() is True


def test_fan_out_without_subscriber_feeds_first_sink_only():
    first, second = [], []
    oplogs = [Oplog(op="i", o_id="oid-a"), Oplog(op="d", o_id="oid-b"), Oplog(op="u", o2_id="oid-b")]
    fan_out(oplogs, make_store(), [first.append, second.append], SubFlag())
    assert [u.id for u in first] == ["news-a", "news-b"]
    assert second == []


def test_fan_out_with_subscriber_feeds_both_sinks():
    first, second = [], []
    flag = SubFlag()
    flag.set_flag(True)
    fan_out([Oplog(op="i", o_id="oid-a")], make_store(), [first.append, second.append], flag)
    assert [u.id for u in first] == ["news-a"]
    assert first == second