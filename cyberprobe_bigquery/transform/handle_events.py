# Message handler invoked once per queue payload: decode -> map -> batch
from cyberprobe_bigquery.transform.event_mapper import map_event
from cyberprobe_bigquery.validation.decode_event import decode_event
from cyberprobe_bigquery.utils.logger import get_logger


logger = get_logger(__name__)


class EventHandler:
    def __init__(self, batch_writer):
        self.batch_writer = batch_writer
        self.handled = 0
        self.dropped = 0

    def __call__(self, payload):
        # Malformed payloads are dropped, processing continues with the next message
        try:
            event = decode_event(payload)
        except ValueError as e:
            self.dropped += 1
            logger.error(f"Couldn't decode event, message dropped: {e}")
            return

        row = map_event(event)
        self.batch_writer.submit(row)
        self.handled += 1

        logger.debug(f"Event {event.get('id')} ({event.get('action')}) added to batch")
