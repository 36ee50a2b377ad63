"""Tests for opening the queue connection (no network)."""

from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import ConnectionError

from cyberprobe_bigquery.utils import redis_client
from cyberprobe_bigquery.utils.redis_client import get_redis_client


def test_connection_is_pinged():
    fake = MagicMock()
    with patch.object(redis_client.redis, "from_url", return_value=fake) as from_url:
        assert get_redis_client("redis://queue:6379/1") is fake

    assert from_url.call_args[0][0] == "redis://queue:6379/1"
    fake.ping.assert_called_once()


def test_unreachable_broker_is_fatal():
    fake = MagicMock()
    fake.ping.side_effect = ConnectionError("refused")
    with patch.object(redis_client.redis, "from_url", return_value=fake):
        with pytest.raises(ConnectionError):
            get_redis_client("redis://nowhere:6379/0")
