# Run this script in the terminal using: python3 -m cyberprobe_bigquery.load.table_provisioner
# Creates the destination table on first run
from google.cloud import bigquery
from cyberprobe_bigquery.schema.table_schema import CYBERPROBE_SCHEMA, TABLE_DESCRIPTION
from cyberprobe_bigquery.utils.logger import get_logger


logger = get_logger(__name__)


# Builds the table definition: fixed schema, partitioned by day
def build_table_definition(table_id):
    table = bigquery.Table(table_id, schema=CYBERPROBE_SCHEMA)
    table.time_partitioning = bigquery.TimePartitioning(type_=bigquery.TimePartitioningType.DAY)
    table.description = TABLE_DESCRIPTION
    return table


# ===================================== CREATES TABLE IF MISSING =============================== #
def ensure_table(client, project, dataset, table):
    table_id = f"{project}.{dataset}.{table}"

    # See if the table already exists
    # Any lookup error (not only NotFound) leads to a create attempt
    try:
        existing = client.get_table(table_id)
        logger.info(f"Table {table_id} exists.")
        return existing
    except Exception as e:
        logger.info(f"Table {table_id} does not exist, creating... (lookup error: {e})")

    try:
        created = client.create_table(build_table_definition(table_id))
    except Exception as e:
        logger.error(f"Table create error for {table_id}: {e}")
        # Can't consume events without a destination, bubble up the error
        raise

    logger.info(f"Table {table_id} created.")
    return created


if __name__ == "__main__":
    from cyberprobe_bigquery.utils.bigquery_client import get_bigquery_client
    from cyberprobe_bigquery.utils.config import get_settings

    try:
        settings = get_settings()
        client = get_bigquery_client(settings)
        ensure_table(client, settings["project"], settings["dataset"], settings["table"])
        logger.info("Table check completed successfully.")
    except Exception as e:
        logger.error(f"Table setup failed: {e}")
        raise
