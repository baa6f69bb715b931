"""Publishing news updates derived from the oplog to a message queue."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .entities import Oplog, UpdatedDataResponse
from .updates import updated_data_for

log = logging.getLogger(__name__)

TOPIC = "UpdatedData"
MAX_MESSAGE_BYTES = 10485880


@dataclass
class SyncStats:
    enqueued: int = 0
    successes: int = 0
    errors: int = 0


def encode_update(update: UpdatedDataResponse) -> bytes:
    """Message payload for an update: its JSON form in UTF-8."""
    return update.to_json().encode("utf-8")


def sync_updates(
    oplogs: Iterable[Oplog],
    store: Any,
    publish: Callable[[bytes], bool],
) -> SyncStats:
    """Publish an update for every insert or update with a known news id.

    ``publish`` returns whether the message was delivered and raises
    TimeoutError when it cannot accept one; a timeout stops the sync.
    Payloads over the size limit are counted as errors and not sent.
    """
    stats = SyncStats()
    for oplog in oplogs:
        updated = updated_data_for(oplog, store)
        if updated is None or not updated.op or not updated.id:
            continue
        payload = encode_update(updated)
        if len(payload) > MAX_MESSAGE_BYTES:
            stats.enqueued += 1
            stats.errors += 1
            log.warning("large message id: %s size: %d", updated.id, len(payload))
            continue
        try:
            delivered = publish(payload)
        except TimeoutError:
            log.error("timeout updatedData: %s", updated.id)
            break
        stats.enqueued += 1
        if delivered:
            stats.successes += 1
        else:
            stats.errors += 1
    log.info(
        "enqueued:%d successes:%d errors:%d", stats.enqueued, stats.successes, stats.errors
    )
    return stats