"""
BigQuery table schema for the cyberprobe event table.

This is the wire contract with the warehouse: column names, types, modes and
nesting must match what the event mapper writes, otherwise streaming inserts
are rejected. Imported by the table provisioner and the event mapper.
"""
from enum import Enum
from google.cloud.bigquery import SchemaField


# Event kinds produced by cyberprobe
class Action(str, Enum):
    HTTP_REQUEST = "http_request"
    HTTP_RESPONSE = "http_response"
    FTP_COMMAND = "ftp_command"
    FTP_RESPONSE = "ftp_response"
    ICMP = "icmp"
    DNS_MESSAGE = "dns_message"
    SIP_REQUEST = "sip_request"
    SIP_RESPONSE = "sip_response"
    SMTP_COMMAND = "smtp_command"
    SMTP_RESPONSE = "smtp_response"
    SMTP_DATA = "smtp_data"
    NTP_TIMESTAMP = "ntp_timestamp"
    NTP_CONTROL = "ntp_control"
    NTP_PRIVATE = "ntp_private"


# HTTP headers stored in the header record
# Don't forget the header record below is generated from this list
ALLOWED_HTTP_HEADERS = [
    "Accept",
    "Accept-Charset",
    "Accept-Language",
    "Access-Control-Allow-Origin",
    "Authorization",
    "Connection",
    "Content-Encoding",
    "Content-Language",
    "Content-Location",
    "Content-Type",
    "Cookie",
    "Date",
    "ETag",
    "Forwarded",
    "Host",
    "Link",
    "Location",
    "Origin",
    "Proxy-Authorization",
    "Referer",
    "Server",
    "Set-Cookie",
    "Upgrade",
    "User-Agent",
    "Via",
    "WWW-Authenticate",
    "X-Forwarded-For",
    "X-Forwarded-Host",
]

# "X-Forwarded-For" -> "xforwardedfor"
HEADER_COLUMNS = [h.replace("-", "").lower() for h in ALLOWED_HTTP_HEADERS]


# Destination table schema
CYBERPROBE_SCHEMA = [
    SchemaField("id", "STRING", mode="REQUIRED"),
    SchemaField("time", "TIMESTAMP", mode="REQUIRED"),
    SchemaField("action", "STRING", mode="REQUIRED"),
    SchemaField("device", "STRING", mode="REQUIRED"),
    # Ports are stored as the raw address text from the event
    SchemaField("udp_src", "STRING", mode="NULLABLE"),
    SchemaField("udp_dest", "STRING", mode="NULLABLE"),
    SchemaField("tcp_src", "STRING", mode="NULLABLE"),
    SchemaField("tcp_dest", "STRING", mode="NULLABLE"),
    SchemaField("ipv4_src", "STRING", mode="NULLABLE"),
    SchemaField("ipv4_dest", "STRING", mode="NULLABLE"),
    SchemaField("type", "STRING", mode="NULLABLE"),
    SchemaField("query", "STRING", mode="REPEATED"),
    SchemaField(
        "answer",
        "RECORD",
        mode="REPEATED",
        fields=[
            SchemaField("name", "STRING", mode="NULLABLE"),
            SchemaField("address", "STRING", mode="NULLABLE"),
        ],
    ),
    SchemaField("method", "STRING", mode="NULLABLE"),
    SchemaField("status", "STRING", mode="NULLABLE"),
    SchemaField("code", "INTEGER", mode="NULLABLE"),
    SchemaField("size", "INTEGER", mode="NULLABLE"),
    SchemaField(
        "header",
        "RECORD",
        mode="NULLABLE",
        fields=[SchemaField(column, "STRING", mode="NULLABLE") for column in HEADER_COLUMNS],
    ),
    SchemaField("url", "STRING", mode="NULLABLE"),
    SchemaField("from", "STRING", mode="NULLABLE"),
    SchemaField("to", "STRING", mode="REPEATED"),
    # ftp/smtp command and response text
    SchemaField("command", "STRING", mode="NULLABLE"),
    SchemaField("text", "STRING", mode="NULLABLE"),
]

SCHEMA_FIELD_NAMES = [field.name for field in CYBERPROBE_SCHEMA]

TABLE_DESCRIPTION = "cyberprobe event table"
