# Run this script in terminal: python3 -m cyberprobe_bigquery.transform.event_mapper
# Reshapes one decoded cyberprobe event into one row of the BigQuery table
import json
from cyberprobe_bigquery.schema.table_schema import Action, ALLOWED_HTTP_HEADERS
from cyberprobe_bigquery.utils.logger import get_logger


logger = get_logger(__name__)

# Allow-list lookup is case-insensitive
allowed_header_names = {h.lower() for h in ALLOWED_HTTP_HEADERS}

# Common fields copied from every event when non-empty
common_fields = ["id", "action", "device", "time"]

# Address classes and the column prefix they populate
address_classes = {"ipv4", "tcp", "udp"}


# ========================================= VALUE HELPERS ========================================= #
# Only set a column when the source value is present
def _put(row, column, value):
    if value is not None:
        row[column] = value


def _as_string(value):
    if value is None:
        return None
    return str(value)


# code is an INTEGER column; unparseable values are dropped
def _as_integer(value, column):
    if value is None:
        return None
    if isinstance(value, bool):
        logger.warning(f"Dropping non-integer value for '{column}': {value!r}")
        return None
    # 200.7 or inf would be truncated or overflow
    if isinstance(value, float) and not value.is_integer():
        logger.warning(f"Dropping non-integer value for '{column}': {value!r}")
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Dropping non-integer value for '{column}': {value!r}")
        return None


# ftp/smtp response text may arrive as a list of lines
def _as_text(value):
    if value is None:
        return None
    if isinstance(value, list):
        return "\n".join(str(line) for line in value)
    return str(value)


def _as_string_list(value):
    if value is None:
        return None
    if isinstance(value, list):
        return [str(item) for item in value]
    return [str(value)]


# The payload object for an action, e.g. event["dns_message"]
def _payload(event, action):
    payload = event.get(action.value)
    if isinstance(payload, dict):
        return payload
    return None


# ========================================= HEADERS ========================================= #
# "X-Forwarded-For" -> "xforwardedfor"
def normalize_header_name(name):
    return name.replace("-", "").lower()


# Filters headers to the allow-list and normalizes their names
# Later dictionaries (and later keys) overwrite earlier ones on a name collision
def build_header_map(*header_dicts):
    headers = {}
    for header_dict in header_dicts:
        if not isinstance(header_dict, dict):
            continue
        for name, value in header_dict.items():
            if not isinstance(name, str) or name.lower() not in allowed_header_names:
                continue
            headers[normalize_header_name(name)] = _as_string(value)
    return headers


# ========================================= ADDRESSES ========================================= #
# "ipv4:10.0.0.1" -> ("ipv4", "10.0.0.1"); split on the first ':' only
def split_address(entry):
    cls, _, address = entry.partition(":")
    return cls, address


def _map_addresses(row, entries, suffix):
    for entry in entries or []:
        if not isinstance(entry, str):
            continue
        cls, address = split_address(entry)
        if cls in address_classes:
            row[f"{cls}_{suffix}"] = address


# ========================================= ACTION FIELDS ========================================= #
def _http_request_fields(event, row):
    request = _payload(event, Action.HTTP_REQUEST)
    if request:
        _put(row, "method", _as_string(request.get("method")))
    row["header"] = build_header_map(request.get("header") if request else None)


def _http_response_fields(event, row):
    response = _payload(event, Action.HTTP_RESPONSE)
    if response:
        _put(row, "status", _as_string(response.get("status")))
        _put(row, "code", _as_integer(response.get("code"), "code"))
    row["header"] = build_header_map(response.get("header") if response else None)


def _command_fields(event, row):
    command = _payload(event, Action(event["action"]))
    if command:
        _put(row, "command", _as_string(command.get("command")))


def _response_text_fields(event, row):
    response = _payload(event, Action(event["action"]))
    if response:
        _put(row, "status", _as_string(response.get("status")))
        _put(row, "text", _as_text(response.get("text")))


def _dns_message_fields(event, row):
    message = _payload(event, Action.DNS_MESSAGE)
    if message is None:
        return

    queries = []
    for query in message.get("query") or []:
        # Queries may be plain names or {"name": ...} objects
        if isinstance(query, dict):
            query = query.get("name")
        if query is not None:
            queries.append(str(query))
    if queries:
        row["query"] = queries

    answers = []
    for answer in message.get("answer") or []:
        if not isinstance(answer, dict):
            continue
        record = {}
        _put(record, "name", _as_string(answer.get("name")))
        _put(record, "address", _as_string(answer.get("address")))
        answers.append(record)
    if answers:
        row["answer"] = answers

    # type is set whenever the dns payload exists, empty when it carries none
    row["type"] = _as_string(message.get("type")) or ""


def _sip_request_fields(event, row):
    request = _payload(event, Action.SIP_REQUEST)
    if request:
        _put(row, "method", _as_string(request.get("method")))
        _put(row, "from", _as_string(request.get("from")))
        to = request.get("to")
        if to is not None:
            row["to"] = [str(to)]


def _sip_response_fields(event, row):
    response = _payload(event, Action.SIP_RESPONSE)
    if response:
        _put(row, "code", _as_integer(response.get("code"), "code"))
        _put(row, "status", _as_string(response.get("status")))
        _put(row, "from", _as_string(response.get("from")))
        to = response.get("to")
        if to is not None:
            row["to"] = [str(to)]


def _smtp_data_fields(event, row):
    data = _payload(event, Action.SMTP_DATA)
    if data:
        _put(row, "from", _as_string(data.get("from")))
        _put(row, "to", _as_string_list(data.get("to")))


def _no_fields(event, row):
    return None


# One entry per action; anything not listed here gets no extra fields
action_field_builders = {
    Action.HTTP_REQUEST: _http_request_fields,
    Action.HTTP_RESPONSE: _http_response_fields,
    Action.FTP_COMMAND: _command_fields,
    Action.FTP_RESPONSE: _response_text_fields,
    Action.ICMP: _no_fields,
    Action.DNS_MESSAGE: _dns_message_fields,
    Action.SIP_REQUEST: _sip_request_fields,
    Action.SIP_RESPONSE: _sip_response_fields,
    Action.SMTP_COMMAND: _command_fields,
    Action.SMTP_RESPONSE: _response_text_fields,
    Action.SMTP_DATA: _smtp_data_fields,
    Action.NTP_TIMESTAMP: _no_fields,
    Action.NTP_CONTROL: _no_fields,
    Action.NTP_PRIVATE: _no_fields,
}


def _parse_action(value):
    try:
        return Action(value)
    except ValueError:
        return None


# ========================================= EVENT -> ROW ========================================= #
def map_event(event):
    row = {}

    # Common fields, omitted when empty
    for field in common_fields:
        value = event.get(field)
        if value:
            row[field] = value

    # Exactly one action branch; unknown actions add nothing
    action = _parse_action(event.get("action"))
    if action is not None:
        action_field_builders[action](event, row)

    if event.get("url"):
        row["url"] = event["url"]

    _map_addresses(row, event.get("src"), "src")
    _map_addresses(row, event.get("dest"), "dest")

    return row


if __name__ == "__main__":
    sample = {
        "id": "e1",
        "action": "dns_message",
        "device": "d1",
        "time": "2024-01-01T00:00:00Z",
        "dns_message": {"type": "A", "query": ["example.com"]},
        "src": ["ipv4:10.0.0.1", "udp:53000"],
        "dest": ["ipv4:10.0.0.53", "udp:53"],
    }
    logger.info(f"Mapped sample event: {json.dumps(map_event(sample))}")
