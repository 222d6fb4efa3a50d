"""
PostgreSQL connection factory

Repositories never hold a connection between calls: each operation asks this
module for a fresh psycopg2 connection and closes it when it is done.

- get_db_connection_dict(): connection with RealDictCursor (rows as dicts)
- get_db_connection_dict_with_retry(): same, retried on OperationalError
  (used by the health check)
"""
import time
import logging

import psycopg2
from psycopg2.extras import RealDictCursor

from .config import settings

logger = logging.getLogger(__name__)

CONNECTION_TIMEOUT = settings.DB_CONNECT_TIMEOUT


def _database_url() -> str:
    database_url = settings.DATABASE_URL
    if not database_url:
        raise Exception("DATABASE_URL not configured")
    return database_url


def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    psycopg2 opens a transaction implicitly on the first statement, so
    callers that write must call commit() or rollback() themselves.

    Returns:
        psycopg2 connection with RealDictCursor

    Raises:
        Exception if DATABASE_URL is not configured

    Example:
        conn = get_db_connection_dict()
        cursor = conn.cursor()
        cursor.execute("SELECT * FROM customer")
        results = cursor.fetchall()  # Returns list of dicts
        cursor.close()
        conn.close()
    """
    return psycopg2.connect(
        _database_url(),
        cursor_factory=RealDictCursor,
        connect_timeout=CONNECTION_TIMEOUT,
    )


def get_db_connection_dict_with_retry(max_retries=None, retry_delay=1.0):
    """
    Get a RealDictCursor connection with automatic retry on connection failures

    Args:
        max_retries: Maximum number of connection attempts (default: DB_CONNECT_RETRIES)
        retry_delay: Initial delay between retries in seconds (default: 1.0)

    Returns:
        psycopg2 connection with RealDictCursor

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    if max_retries is None:
        max_retries = settings.DB_CONNECT_RETRIES

    database_url = _database_url()
    last_error = None

    for attempt in range(1, max_retries + 1):
        conn = None
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(
                database_url,
                cursor_factory=RealDictCursor,
                connect_timeout=CONNECTION_TIMEOUT,
            )

            # Test connection with a simple query
            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()

            logger.debug(f"Database connection successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            if conn is not None:
                conn.close()
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            if attempt < max_retries:
                # Exponential backoff
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)
            else:
                logger.error(f"All {max_retries} connection attempts failed")

    raise last_error if last_error else Exception("Connection failed after all retries")
