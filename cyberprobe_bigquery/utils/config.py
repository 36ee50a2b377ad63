# Run this script in the terminal using: python3 -m cyberprobe_bigquery.utils.config
# Process configuration: environment variables (optionally from config/.env) and queue arguments
import os
import argparse
from dotenv import load_dotenv
from cyberprobe_bigquery.utils.logger import get_logger


# Load environment variables from .env file into memory
load_dotenv("config/.env")

logger = get_logger(__name__)

# Defaults for every optional setting
DEFAULT_KEY_FILE = "private.json"
DEFAULT_DATASET = "cyberprobe"
DEFAULT_TABLE = "cyberprobe"
DEFAULT_INSERT_BATCH = 100
DEFAULT_REDIS_URL = "redis://localhost:6379/0"


# Reads the settings at call time so tests and callers can change the environment
def get_settings():
    project = os.getenv("BIGQUERY_PROJECT")

    # BIGQUERY_PROJECT has no default
    if not project:
        raise EnvironmentError("Missing environment variable: BIGQUERY_PROJECT")

    raw_batch = os.getenv("INSERT_BATCH", str(DEFAULT_INSERT_BATCH))
    try:
        insert_batch = int(raw_batch)
    except ValueError:
        raise ValueError(f"INSERT_BATCH must be an integer, got: {raw_batch!r}")

    if insert_batch < 1:
        raise ValueError(f"INSERT_BATCH must be >= 1, got: {insert_batch}")

    return {
        "key_file": os.getenv("KEY", DEFAULT_KEY_FILE),
        "project": project,
        "dataset": os.getenv("BIGQUERY_DATASET", DEFAULT_DATASET),
        "table": os.getenv("RAW_TABLE", DEFAULT_TABLE),
        "insert_batch": insert_batch,
        "redis_url": os.getenv("REDIS_URL", DEFAULT_REDIS_URL),
        "environment": os.getenv("ENVIRONMENT", "local").lower(),
    }


# Positional arguments: input queue followed by zero or more output queues
# Output queues are accepted so every pipeline stage has the same command line
def parse_queue_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="cyberprobe-bigquery",
        description="Load cyberprobe events from a queue into BigQuery.",
    )
    parser.add_argument("input", help="input queue name")
    parser.add_argument("output", nargs="*", help="output queue names (unused by this sink)")

    args = parser.parse_args(argv)
    return args.input, list(args.output)


if __name__ == "__main__":
    try:
        settings = get_settings()
        logger.info(
            f"Settings loaded: project={settings['project']}, dataset={settings['dataset']}, "
            f"table={settings['table']}, insert_batch={settings['insert_batch']} "
            f"(ENV={settings['environment']})."
        )
    except Exception as e:
        logger.error(f"Configuration error: {e}")
        raise
