# Pulls event payloads off the input queue (a Redis list) and hands them to the handler
from cyberprobe_bigquery.utils.logger import get_logger


logger = get_logger(__name__)


class QueueWorker:
    def __init__(self, redis_client, input_queue, output_queues=(), poll_timeout=1):
        self.redis = redis_client
        self.input_queue = input_queue
        # Accepted for a uniform command line across stages, nothing is published
        self.output_queues = list(output_queues)
        self.poll_timeout = poll_timeout
        self.running = False
        self.received = 0

    def stop(self):
        self.running = False

    def run(self, handler):
        self.running = True
        logger.info(
            f"Consuming from queue '{self.input_queue}' "
            f"(output queues: {self.output_queues or 'none'})"
        )

        while self.running:
            # BLPOP returns (queue, payload) or None once the timeout expires
            # Redis connection errors are not caught here and stop the worker
            item = self.redis.blpop([self.input_queue], timeout=self.poll_timeout)
            if item is None:
                continue

            _, payload = item
            self.received += 1

            try:
                handler(payload)
            except Exception as e:
                logger.exception(f"Unexpected error while handling message: {e}")

        logger.info(f"Stopped consuming from '{self.input_queue}' after {self.received} messages")
