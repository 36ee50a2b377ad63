"""Tests for decoding raw queue payloads."""

import pytest

from cyberprobe_bigquery.validation.decode_event import decode_event


def test_decodes_bytes():
    event = decode_event(b'{"id": "e1", "action": "icmp"}')
    assert event == {"id": "e1", "action": "icmp"}


def test_decodes_str():
    assert decode_event('{"id": "e1"}') == {"id": "e1"}


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        b"   ",
        b"not json",
        b"\xff\xfe\x00",
        b"[1, 2, 3]",
        b'"just a string"',
        b'{"id": "e1", "src": "ipv4:10.0.0.1"}',
        12345,
    ],
)
def test_malformed_payloads_raise_value_error(payload):
    with pytest.raises(ValueError):
        decode_event(payload)


def test_null_address_list_is_accepted():
    assert decode_event(b'{"id": "e1", "src": null}')["src"] is None
