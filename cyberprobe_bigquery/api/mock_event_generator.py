# Run this script in terminal: python3 -m cyberprobe_bigquery.api.mock_event_generator <queue> [count]
# Generates cyberprobe-style events and pushes them onto a queue for local smoke runs
import os
import sys
import json
import uuid
import random
from datetime import datetime, timezone, timedelta  # timedelta used to store time interval
from cyberprobe_bigquery.schema.table_schema import Action
from cyberprobe_bigquery.utils.config import DEFAULT_REDIS_URL
from cyberprobe_bigquery.utils.logger import get_logger


logger = get_logger(__name__)

# =================================== SAMPLE VALUES =========================================#
devices = ["probe-lon-01", "probe-lon-02", "probe-nyc-01", "probe-sfo-01"]

hostnames = ["example.com", "www.example.org", "mail.example.net", "cdn.example.io"]

http_methods = ["GET", "POST", "PUT", "HEAD"]

http_statuses = {200: "OK", 301: "Moved Permanently", 404: "Not Found", 500: "Internal Server Error"}

ftp_commands = ["USER anonymous", "PASV", "LIST", "RETR report.pdf", "QUIT"]

smtp_commands = ["EHLO mail.example.net", "MAIL FROM:<alice@example.net>", "RCPT TO:<bob@example.com>", "DATA"]

sip_methods = ["INVITE", "REGISTER", "BYE", "ACK"]

# Mixes allow-listed headers with ones that should be filtered out
request_headers = {
    "Host": "www.example.org",
    "User-Agent": "Mozilla/5.0",
    "Accept": "text/html",
    "Accept-Language": "en-GB",
    "Cookie": "session=abc123",
    "X-Forwarded-For": "203.0.113.7",
    "DNT": "1",
    "X-Request-Id": "7f3a",
}

response_headers = {
    "Server": "nginx",
    "Content-Type": "text/html; charset=utf-8",
    "Set-Cookie": "session=abc123; HttpOnly",
    "ETag": '"33a64df5"',
    "X-Powered-By": "PHP/8.1",
}


# Generates unique event id
def generate_unique_event_id():
    return str(uuid.uuid4())


# Generate timestamp for events
def generate_timestamp():
    now = datetime.now(timezone.utc)
    # Subtract a random number of seconds to simulate realistic event timing
    delta = timedelta(seconds=random.randint(0, 3599))
    return (now - delta).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def generate_private_ip():
    return f"10.{random.randint(0, 255)}.{random.randint(0, 255)}.{random.randint(1, 254)}"


def generate_public_ip():
    return f"{random.randint(1, 223)}.{random.randint(0, 255)}.{random.randint(0, 255)}.{random.randint(1, 254)}"


# Address lists as cyberprobe emits them: network layer first, then transport
def generate_addresses(transport, dest_port):
    src = ["ipv4:" + generate_private_ip(), f"{transport}:{random.randint(1024, 65535)}"]
    dest = ["ipv4:" + generate_public_ip(), f"{transport}:{dest_port}"]
    return src, dest


# =================================== PAYLOAD BUILDERS =========================================#
def _http_request():
    return {"method": random.choice(http_methods), "header": dict(request_headers)}


def _http_response():
    code = random.choice(list(http_statuses))
    return {"code": code, "status": http_statuses[code], "header": dict(response_headers)}


def _dns_message():
    name = random.choice(hostnames)
    message = {"type": random.choice(["query", "response"]), "query": [name], "answer": []}
    if message["type"] == "response":
        message["answer"] = [{"name": name, "address": generate_public_ip()}]
    return message


def _sip_request():
    return {
        "method": random.choice(sip_methods),
        "from": "<sip:alice@example.net>",
        "to": "<sip:bob@example.com>",
    }


def _sip_response():
    return {"code": 200, "status": "OK", "from": "<sip:alice@example.net>", "to": "<sip:bob@example.com>"}


# action -> (payload builder or None, transport, destination port)
action_profiles = {
    Action.HTTP_REQUEST: (_http_request, "tcp", 80),
    Action.HTTP_RESPONSE: (_http_response, "tcp", 80),
    Action.FTP_COMMAND: (lambda: {"command": random.choice(ftp_commands)}, "tcp", 21),
    Action.FTP_RESPONSE: (lambda: {"status": 226, "text": ["Transfer complete."]}, "tcp", 21),
    Action.ICMP: (None, None, None),
    Action.DNS_MESSAGE: (_dns_message, "udp", 53),
    Action.SIP_REQUEST: (_sip_request, "udp", 5060),
    Action.SIP_RESPONSE: (_sip_response, "udp", 5060),
    Action.SMTP_COMMAND: (lambda: {"command": random.choice(smtp_commands)}, "tcp", 25),
    Action.SMTP_RESPONSE: (lambda: {"status": 250, "text": ["OK"]}, "tcp", 25),
    Action.SMTP_DATA: (
        lambda: {"from": "<alice@example.net>", "to": ["<bob@example.com>", "<carol@example.com>"]},
        "tcp",
        25,
    ),
    Action.NTP_TIMESTAMP: (None, "udp", 123),
    Action.NTP_CONTROL: (None, "udp", 123),
    Action.NTP_PRIVATE: (None, "udp", 123),
}


# Generate one event for the given action
def generate_event(action):
    action = Action(action)
    builder, transport, dest_port = action_profiles[action]

    event = {
        "id": generate_unique_event_id(),
        "action": action.value,
        "device": random.choice(devices),
        "time": generate_timestamp(),
    }

    if transport:
        event["src"], event["dest"] = generate_addresses(transport, dest_port)
    else:
        event["src"] = ["ipv4:" + generate_private_ip()]
        event["dest"] = ["ipv4:" + generate_public_ip()]

    if builder:
        event[action.value] = builder()

    if action in (Action.HTTP_REQUEST, Action.HTTP_RESPONSE):
        event["url"] = f"http://{random.choice(hostnames)}/index.html"

    return event


# Cycles through every action so a small sample still covers all of them
def generate_events(count):
    actions = list(Action)
    return [generate_event(actions[i % len(actions)]) for i in range(count)]


# =================================== QUEUE PUBLISHER =========================================#
def publish_events(redis_client, queue, count):
    events = generate_events(count)
    for event in events:
        redis_client.rpush(queue, json.dumps(event))
    logger.info(f"Published {len(events)} sample events to queue '{queue}'")
    return len(events)


# Smoke test
if __name__ == "__main__":
    from cyberprobe_bigquery.utils.redis_client import get_redis_client

    if len(sys.argv) < 2:
        print("usage: python3 -m cyberprobe_bigquery.api.mock_event_generator <queue> [count]")
        sys.exit(2)

    queue = sys.argv[1]
    count = int(sys.argv[2]) if len(sys.argv) > 2 else 250

    try:
        client = get_redis_client(os.getenv("REDIS_URL", DEFAULT_REDIS_URL))
        publish_events(client, queue, count)
    except Exception as e:
        logger.error(f"Publishing sample events failed: {e}")
        raise
