# Run this script in the terminal using: python3 -m cyberprobe_bigquery.utils.redis_client
# The input queue is a Redis list; this module only opens and checks the connection
import redis
from redis.exceptions import ConnectionError, RedisError
from cyberprobe_bigquery.utils.config import DEFAULT_REDIS_URL
from cyberprobe_bigquery.utils.logger import get_logger


logger = get_logger(__name__)


# Opens a Redis connection and pings it. Payloads stay as raw bytes (no decode_responses)
def get_redis_client(redis_url=DEFAULT_REDIS_URL):
    try:
        client = redis.from_url(
            redis_url,
            socket_connect_timeout=5,  # Wait 5 seconds to connect before giving up
            health_check_interval=30,
        )
        # Test connection
        client.ping()
    except (ConnectionError, RedisError) as e:
        logger.error(f"Redis connection to '{redis_url}' failed: {e}")
        # Can't consume events without a queue, bubble up the error
        raise

    logger.info(f"Redis connection to '{redis_url}' established.")
    return client


if __name__ == "__main__":
    try:
        logger.info("Starting Redis connectivity check...")
        client = get_redis_client()
        client.close()
        logger.info("Redis connection closed.")
    except Exception as e:
        logger.error(f"Error: {e}")
        raise
