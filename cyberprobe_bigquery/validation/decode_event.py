# Turns one raw queue payload into an event dictionary
import json
from json import JSONDecodeError


# Fields that must be lists when they are present
address_list_fields = ["src", "dest"]


def decode_event(payload):
    # Payloads come off the queue as bytes
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueError(f"Payload is not valid UTF-8: {e}")

    if not isinstance(payload, str):
        raise ValueError(f"Payload must be bytes or str. Current Data Type is: {type(payload)}")

    if not payload.strip():
        raise ValueError("Payload is empty")

    try:
        event = json.loads(payload)
    except JSONDecodeError as e:
        raise ValueError(f"Couldn't decode JSON payload: {e}")

    # Make sure the event is a JSON object
    if not isinstance(event, dict):
        raise ValueError(f"Event needs to be an object. Current Data Type is: {type(event)}")

    for field in address_list_fields:
        if field in event and event[field] is not None and not isinstance(event[field], list):
            raise ValueError(f"{field} needs to be a list. Current Data Type is: {type(event[field])}")

    return event
