# Run this script in terminal: python3 -m cyberprobe_bigquery.main <input-queue> [output-queue ...]
# BigQuery loader: takes cyberprobe events off the input queue and loads one row per event
# into the cyberprobe table. No output queues are used.
import signal
from cyberprobe_bigquery.extract.queue_consumer import QueueWorker
from cyberprobe_bigquery.load.batch_writer import BatchWriter
from cyberprobe_bigquery.load.table_provisioner import ensure_table
from cyberprobe_bigquery.transform.handle_events import EventHandler
from cyberprobe_bigquery.utils.bigquery_client import get_bigquery_client, get_table_id
from cyberprobe_bigquery.utils.config import get_settings, parse_queue_args
from cyberprobe_bigquery.utils.redis_client import get_redis_client
from cyberprobe_bigquery.utils.logger import get_logger


logger = get_logger(__name__)


# BigQuery side of startup: client, destination table, batch writer
# Any failure here is fatal, nothing is consumed without a usable table
def initialise(settings):
    client = get_bigquery_client(settings)
    ensure_table(client, settings["project"], settings["dataset"], settings["table"])
    return BatchWriter(client, get_table_id(settings), batch_size=settings["insert_batch"])


# SIGTERM / SIGINT stop the worker after its current poll
def install_signal_handlers(worker):
    def _stop(signum, frame):
        logger.info(f"Received signal {signum}, stopping...")
        worker.stop()

    signal.signal(signal.SIGTERM, _stop)
    signal.signal(signal.SIGINT, _stop)


def main(argv=None):
    input_queue, output_queues = parse_queue_args(argv)

    logger.info("Initialising...")
    try:
        settings = get_settings()
        batch_writer = initialise(settings)
        redis_client = get_redis_client(settings["redis_url"])
    except Exception as e:
        logger.error(f"init: {e}")
        raise

    handler = EventHandler(batch_writer)
    worker = QueueWorker(redis_client, input_queue, output_queues)
    install_signal_handlers(worker)

    logger.info("Initialisation complete.")

    try:
        worker.run(handler)
    finally:
        # Flush the tail batch so a clean shutdown loses nothing
        batch_writer.close()
        logger.info(
            f"Shutdown: {handler.handled} events handled, {handler.dropped} dropped, "
            f"{batch_writer.flush_count} flushes."
        )


if __name__ == "__main__":
    main()
