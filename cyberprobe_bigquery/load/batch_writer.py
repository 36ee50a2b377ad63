# Buffers mapped rows and streams them into BigQuery once the batch is full
from cyberprobe_bigquery.utils.logger import get_logger


# Initialize logger
logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 100


# Owns the in-memory batch for one destination table
# A flush happens once the batch grows past batch_size rows (strictly greater)
# and sends the whole batch in one insert_rows_json call. The batch is emptied
# whether or not the call succeeded; rows from a failed flush are not retried
class BatchWriter:
    def __init__(self, client, table_id, batch_size=DEFAULT_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got: {batch_size}")
        self.client = client
        self.table_id = table_id
        self.batch_size = batch_size
        self.rows = []
        self.flush_count = 0

    @property
    def pending_count(self):
        return len(self.rows)

    def submit(self, row):
        self.rows.append(row)

        if len(self.rows) > self.batch_size:
            self.flush()

    def flush(self):
        if not self.rows:
            logger.info(f"Skipping BigQuery insert, empty batch (table={self.table_id})")
            return 0  # Deliberate no-op

        rows = self.rows
        # Reset before the call so the batch is empty whatever happens below
        self.rows = []
        self.flush_count += 1

        try:
            errors = self.client.insert_rows_json(self.table_id, rows)
        except Exception as e:
            logger.error(f"InsertAll failed for {len(rows)} rows into {self.table_id}: {e}")
            return 0

        if errors:
            logger.error(
                f"InsertAll into {self.table_id} reported {len(errors)} failed rows "
                f"out of {len(rows)}; first error: {errors[0]}"
            )
        else:
            logger.info(f"Inserted {len(rows)} rows into {self.table_id}")

        return len(rows)

    # Flush-on-shutdown so the tail batch isn't lost on a clean exit
    def close(self):
        if self.rows:
            logger.info(f"Flushing {len(self.rows)} pending rows before shutdown")
        return self.flush()
