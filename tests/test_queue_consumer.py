"""Tests for the queue worker loop."""

import pytest
from redis.exceptions import ConnectionError

from cyberprobe_bigquery.extract.queue_consumer import QueueWorker


class FakeRedis:
    """Serves queued payloads, then stops the worker once the list is empty."""

    def __init__(self, payloads):
        self.payloads = list(payloads)
        self.worker = None
        self.calls = []

    def blpop(self, keys, timeout=0):
        self.calls.append((tuple(keys), timeout))
        if self.payloads:
            return keys[0].encode(), self.payloads.pop(0)
        self.worker.stop()
        return None


def _make_worker(payloads, output_queues=()):
    redis = FakeRedis(payloads)
    worker = QueueWorker(redis, "cyberprobe", output_queues, poll_timeout=1)
    redis.worker = worker
    return worker, redis


def test_every_payload_reaches_the_handler_in_order():
    worker, redis = _make_worker([b"a", b"b", b"c"])
    seen = []

    worker.run(seen.append)

    assert seen == [b"a", b"b", b"c"]
    assert worker.received == 3
    assert redis.calls[0] == (("cyberprobe",), 1)


def test_handler_exceptions_do_not_stop_the_loop():
    worker, _ = _make_worker([b"bad", b"good"])
    seen = []

    def handler(payload):
        if payload == b"bad":
            raise RuntimeError("unexpected")
        seen.append(payload)

    worker.run(handler)

    assert seen == [b"good"]


def test_output_queues_are_accepted_but_unused():
    worker, _ = _make_worker([], output_queues=["out1", "out2"])
    worker.run(lambda payload: None)
    assert worker.output_queues == ["out1", "out2"]


def test_connection_errors_propagate():
    class BrokenRedis:
        def blpop(self, keys, timeout=0):
            raise ConnectionError("lost connection")

    worker = QueueWorker(BrokenRedis(), "cyberprobe")
    with pytest.raises(ConnectionError):
        worker.run(lambda payload: None)
