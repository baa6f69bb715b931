import pytest

from newslist.hub import Client, Hub, join_messages


def test_join_messages():
    assert join_messages([b"a", b"b", b"c"]) == b"a\nb\nc"
    assert join_messages([b"only"]) == b"only"


def test_client_registers_on_creation():
    hub = Hub()
    client = Client(hub, 4)
    assert client in hub.clients


def test_broadcast_reaches_all_clients():
    hub = Hub()
    first, second = Client(hub, 4), Client(hub, 4)
    assert hub.broadcast(b"x") == 2
    assert first.push(b"y") and second.push(b"y")


def test_full_client_is_dropped_and_closed():
    hub = Hub()
    slow = Client(hub, 1)
    fast = Client(hub, 8)
    assert hub.broadcast(b"one") == 2
    assert hub.broadcast(b"two") == 1
    assert slow not in hub.clients
    assert slow.closed
    assert fast in hub.clients


def test_unregister_closes_client():
    hub = Hub()
    client = Client(hub, 4)
    hub.unregister(client)
    assert client not in hub.clients
    assert client.closed
    assert client.push(b"late") is False


def test_unregister_unknown_client_is_ignored():
    hub = Hub()
    client = Client(hub, 4)
    other_hub = Hub()
    other_hub.unregister(client)
    assert not client.closed


@pytest.mark.asyncio
async def test_write_data_joins_queued_and_stops_on_close():
    hub = Hub()
    client = Client(hub, 4)
    client.push(b"a")
    client.push(b"b")
    client.close()
    sent = []

    async def send(message):
        sent.append(message)

    await client.write_data(send)
    assert sent == [join_messages([b"a", b"b"])]
    assert client not in hub.clients


@pytest.mark.asyncio
async def test_write_data_stops_on_send_failure():
    hub = Hub()
    client = Client(hub, 4)
    client.push(b"a")

    async def send(message):
        raise ConnectionError("gone")

    await client.write_data(send)
    assert client not in hub.clients
    assert client.closed


@pytest.mark.asyncio
async def test_write_data_delivers_broadcast_before_close():
    hub = Hub()
    client = Client(hub, 4)
    assert hub.broadcast(b"news") == 1
    hub.unregister(client)
    assert client.closed
    sent = []

    async def send(message):
        sent.append(message)

    await client.write_data(send)
    assert sent == [b"news"]
    assert client not in hub.clients