"""Generated sample events must map onto declared table columns."""

import json
from unittest.mock import MagicMock

import pytest

from cyberprobe_bigquery.api.mock_event_generator import generate_event, generate_events, publish_events
from cyberprobe_bigquery.schema.table_schema import Action, HEADER_COLUMNS, SCHEMA_FIELD_NAMES
from cyberprobe_bigquery.transform.event_mapper import map_event


@pytest.mark.parametrize("action", list(Action))
def test_rows_only_use_declared_columns(action):
    row = map_event(generate_event(action))

    assert set(row) <= set(SCHEMA_FIELD_NAMES)
    assert row["action"] == action.value
    for required in ["id", "time", "device"]:
        assert row[required]
    if "header" in row:
        assert set(row["header"]) <= set(HEADER_COLUMNS)


def test_generate_events_covers_every_action():
    events = generate_events(len(Action))
    assert {event["action"] for event in events} == {action.value for action in Action}


def test_http_request_headers_are_filtered():
    row = map_event(generate_event(Action.HTTP_REQUEST))
    assert "dnt" not in row["header"]
    assert "xrequestid" not in row["header"]
    assert row["header"]["xforwardedfor"] == "203.0.113.7"


def test_publish_events_pushes_json():
    redis = MagicMock()

    assert publish_events(redis, "cyberprobe", 3) == 3

    assert redis.rpush.call_count == 3
    queue, payload = redis.rpush.call_args[0]
    assert queue == "cyberprobe"
    assert json.loads(payload)["action"] in {action.value for action in Action}
