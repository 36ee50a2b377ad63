# Run this script in the terminal using: python3 -m cyberprobe_bigquery.utils.bigquery_client
# The -m flag runs the file as a module (required because it imports other modules from the same package)
from google.cloud import bigquery  # Used to create tables and stream rows into BigQuery
from google.oauth2 import service_account  # Builds credentials from the service-account key file
from cyberprobe_bigquery.utils.config import get_settings
from cyberprobe_bigquery.utils.logger import get_logger


# Initialize logger functionality
logger = get_logger(__name__)

# Access scope requested for the service account
BIGQUERY_SCOPES = ["https://www.googleapis.com/auth/bigquery"]


# =============================== LOADS SERVICE-ACCOUNT CREDENTIALS ==================================== #
# Raises FileNotFoundError when the key file is missing and ValueError when it is malformed
def load_credentials(key_path):
    try:
        credentials = service_account.Credentials.from_service_account_file(
            key_path, scopes=BIGQUERY_SCOPES
        )
    except FileNotFoundError as e:
        logger.error(f"Couldn't read key file '{key_path}': {e}")
        raise
    except ValueError as e:
        logger.error(f"Key file '{key_path}' is not a valid service-account key: {e}")
        raise

    logger.info(f"Loaded service-account credentials from '{key_path}'.")
    return credentials


# =============================== SETS UP/INITIALIZES CONNECTION  ==================================== #
# DOESN'T TEST THE CONNECTION
# Returns a BigQuery client object authenticated with the configured key file
def get_bigquery_client(settings=None):
    # Read settings from the environment when the caller doesn't pass them
    if settings is None:
        settings = get_settings()

    credentials = load_credentials(settings["key_file"])

    try:
        client = bigquery.Client(project=settings["project"], credentials=credentials)
    except Exception as e:
        logger.error(f"Couldn't create BigQuery client: {e}")
        # Stop execution immediately and bubble up the error
        raise

    logger.info(
        f"Connected to BigQuery project '{settings['project']}' "
        f"(ENV={settings.get('environment', 'local')})."
    )
    return client


# Fully qualified table id: project.dataset.table
def get_table_id(settings):
    return f"{settings['project']}.{settings['dataset']}.{settings['table']}"


# ===================================== TESTS DATASET CONNECTION =============================== #
def test_bigquery_connection(client, settings):
    dataset_id = f"{settings['project']}.{settings['dataset']}"
    try:
        # .get_dataset() checks that the dataset exists and we have access to it
        client.get_dataset(dataset_id)
        logger.info(f"Connection to BigQuery dataset '{dataset_id}' successful.")
    except Exception as e:
        logger.error(f"Error connecting to BigQuery dataset '{dataset_id}': {e}")
        raise


# Smoke test: authenticate and check the dataset is reachable
if __name__ == "__main__":
    try:
        logger.info("Starting BigQuery connectivity check...")
        settings = get_settings()
        client = get_bigquery_client(settings)
        test_bigquery_connection(client, settings)
        logger.info("All BigQuery checks completed successfully.")
    except Exception as e:
        logger.error(f"BigQuery setup failed: {e}")
        raise
