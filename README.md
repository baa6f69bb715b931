# newslist

A small news list service. Articles live in a MongoDB collection
(`gf.NewsContent`); inserts and updates that appear in the replica set's
oplog are turned into entries in Redis sorted sets, and an HTTP service reads
those sets to serve paged lists of articles per stock, per column, and a list
of important news that can also be followed over WebSocket.

## Install

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Running the HTTP service

```
newslist --port 8080 --redis 127.0.0.1:6379 --mongo mongodb://localhost:27017
```

`newslist` (that is, `newslist.web.main`) connects to Redis and MongoDB and
serves the application built by `newslist.web.create_app` with uvicorn.
Options:

| Option | Default |
| --- | --- |
| `--host` | `0.0.0.0` |
| `--port` | `8080` |
| `--redis` | `127.0.0.1:6379` (host:port) |
| `--redis-password` | none |
| `--redis-db` | `0` |
| `--mongo` | `mongodb://localhost:27017` |

Routes:

| Path | What it returns |
| --- | --- |
| `/` | `static/index.html` from the working directory, or 404 when it is missing |
| `/list/article/stocks/batch?ids=SH_600000&txtType=1&page=1&pageSize=10` | newest-first page of articles for one stock and text type |
| `/list/article/column?id=<column>&page=1&pageSize=10` | newest-first page of articles in a column |
| `/ImportantNews` | the latest 30 important news items; as a WebSocket it sends that list, then every message broadcast on the hub |
| `/read/article/{id}` | the full content of one article (an empty record when not found) |

JSON replies have the shape `{"errCode": 0, "errMsg": "", "data": ...}`.
`page` and `pageSize` default to 1 and 10; when parameters are missing or
malformed, or the stock list cannot be read, the reply is an empty 200
response. Cross-origin headers are added by `newslist.cors.CORSMiddleware`,
which echoes the `Origin` header and answers `OPTIONS` requests itself.

## How the indexes look

Index keys are built by `newslist.indexer`:

- `info_stock_list_<txtType>_<market>_<code>` (`stock_list_key`) — articles
  per stock and text type; every article is also filed under text type `0`.
- `info_important_list` — articles with text type `1`.
- `info_column_list_<column>` (`column_list_key`) — articles per column.
- `index_name_list_<id>` (`index_name_key`) — the set of stock keys an article
  is filed under, so that an update (`op == "u"`) removes it from stocks it no
  longer mentions.

Members are scored by publish time. With `IndexUpdater(index, True)` a member
is `<id>_<title>_<media>` (`newslist.redis_store.member_value`), which
`newslist.listing.parse_member` splits back into a `BriefInfo`; the listing
service reads only this form. `IndexUpdater(index, False)` stores bare ids.

## Using the pieces from Python

```python
from newslist import mongo_store, redis_store
from newslist.entities import ParamStockNews
from newslist.listing import ListService

password = "password"
index = redis_store.connect("localhost:6379", password=password, db=0)
store = mongo_store.connect("mongodb://localhost:27017/")

service = ListService(index, store)
params = ParamStockNews.from_query({"ids": "sh_600000", "txtType": "1", "page": "1", "pageSize": "10"})
for brief in service.stock_info(params):
    print(brief.id, brief.title, brief.media)
```

Keeping the indexes current means following the oplog and feeding each
change through the updater. `OplogTailer.follow` stores its position in
Redis after every entry; `get_last_time` raises `KeyError` when none is
stored, and a start of `0` falls back to a fixed initial position.

```python
from newslist.indexer import IndexUpdater
from newslist.oplog import OplogTailer
from newslist.updates import updated_data_for

try:
    start = index.get_last_time()
except KeyError:
    start = 0

tailer = OplogTailer(store.oplog_collection(), index, 5)
updater = IndexUpdater(index, True)
for oplog in tailer.follow(start):
    update = updated_data_for(oplog, store)
    if update is not None:
        updater.apply(update)
```

`newslist.pipeline.sync_updates(oplogs, store, publish)` walks the same
updates, skips those without an op or id, and hands each JSON payload
(`encode_update`) to a `publish` callable that returns whether it was
delivered; a `TimeoutError` from it stops the walk, and payloads over
10485880 bytes are counted as errors without being sent. It returns a
`SyncStats` of enqueued, successes and errors.

`newslist.updates.fan_out(oplogs, store, sinks, sub_flag)` sends every update
to `sinks[0]`, and also to `sinks[1]` while `sub_flag.on_push()` is true.

`newslist.hub.Hub` keeps the WebSocket clients; `Hub.broadcast(message)`
queues bytes for each `Client` (up to 256 queued messages, after which the
client is dropped), and `Client.write_data` sends what is queued as one
newline-joined frame.

## What the package does not do

- It has no message-queue client. `sync_updates` only calls the `publish`
  function it is given, and nothing in the package consumes published
  updates.
- It runs no remote push service. The `/ImportantNews` WebSocket receives
  only what some caller passes to `Hub.broadcast`; the web application does
  not feed the hub from the oplog by itself.
- The only command is `newslist`, the HTTP service. Tailing the oplog and
  updating the indexes are done from Python as shown above.