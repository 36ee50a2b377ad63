"""Tests for the BatchWriter module."""

from unittest.mock import MagicMock

import pytest

from cyberprobe_bigquery.load.batch_writer import BatchWriter


TABLE_ID = "proj.cyberprobe.cyberprobe"


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _make_writer(batch_size=100):
    client = MagicMock()
    client.insert_rows_json.return_value = []
    return BatchWriter(client, TABLE_ID, batch_size=batch_size), client


def _row(i: int) -> dict:
    return {"id": f"e{i}", "action": "icmp"}


# ------------------------------------------------------------------
# Tests
# ------------------------------------------------------------------

class TestSizeTriggeredFlush:
    """Flushing triggered by crossing the batch-size threshold."""

    def test_no_flush_at_threshold(self):
        """Exactly batch_size rows does NOT trigger a flush."""
        writer, client = _make_writer()

        for i in range(100):
            writer.submit(_row(i))

        client.insert_rows_json.assert_not_called()
        assert writer.pending_count == 100

    def test_flush_one_past_threshold(self):
        """batch_size + 1 rows triggers exactly one flush carrying all of them."""
        writer, client = _make_writer()

        for i in range(101):
            writer.submit(_row(i))

        client.insert_rows_json.assert_called_once()
        table_id, rows = client.insert_rows_json.call_args[0]
        assert table_id == TABLE_ID
        assert len(rows) == 101
        assert rows[0] == _row(0)
        assert rows[-1] == _row(100)
        assert writer.pending_count == 0

    def test_multiple_batches(self):
        writer, client = _make_writer(batch_size=2)

        for i in range(9):
            writer.submit(_row(i))

        assert client.insert_rows_json.call_count == 3
        assert writer.pending_count == 0
        assert writer.flush_count == 3


class TestFailedFlush:
    """Data from a failed flush is discarded, never retried."""

    def test_exception_clears_batch(self):
        writer, client = _make_writer(batch_size=1)
        client.insert_rows_json.side_effect = RuntimeError("quota exceeded")

        writer.submit(_row(0))
        writer.submit(_row(1))  # triggers the failing flush; must not raise

        assert writer.pending_count == 0
        client.insert_rows_json.assert_called_once()

    def test_next_flush_does_not_resend_lost_rows(self):
        writer, client = _make_writer(batch_size=1)
        client.insert_rows_json.side_effect = [RuntimeError("boom"), []]

        for i in range(4):
            writer.submit(_row(i))

        second_rows = client.insert_rows_json.call_args_list[1][0][1]
        assert second_rows == [_row(2), _row(3)]

    def test_row_errors_are_not_retried(self):
        writer, client = _make_writer(batch_size=1)
        client.insert_rows_json.return_value = [{"index": 0, "errors": [{"reason": "invalid"}]}]

        writer.submit(_row(0))
        writer.submit(_row(1))

        client.insert_rows_json.assert_called_once()
        assert writer.pending_count == 0


class TestExplicitFlush:

    def test_empty_flush_is_a_no_op(self):
        writer, client = _make_writer()
        assert writer.flush() == 0
        client.insert_rows_json.assert_not_called()

    def test_close_flushes_pending_rows(self):
        writer, client = _make_writer()
        for i in range(5):
            writer.submit(_row(i))

        assert writer.close() == 5
        assert len(client.insert_rows_json.call_args[0][1]) == 5
        assert writer.pending_count == 0

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            BatchWriter(MagicMock(), TABLE_ID, batch_size=0)
