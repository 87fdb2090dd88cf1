"""
Database connection wrapper for PostgreSQL.

This module provides a connection pooling wrapper used by
``PostgresRecordStore``.

Environment requirements:
- DATABASE_URL: PostgreSQL connection string (required)
"""

import logging
import os
from typing import Optional

import psycopg2
from psycopg2 import pool  # noqa: F401 - used via psycopg2.pool
from psycopg2.extras import RealDictCursor

logger = logging.getLogger(__name__)


class DatabaseAdapter:
    """PostgreSQL connection pooling wrapper."""

    def __init__(self, database_url: Optional[str] = None, maxconn: int = 10):
        """
        Initialize PostgreSQL connection pool.

        Args:
            database_url: Connection string (defaults to DATABASE_URL env var)
            maxconn: Maximum pooled connections

        Raises:
            ValueError: If no connection string is available
            psycopg2.Error: If connection pool creation fails
        """
        self._pool = None

        database_url = database_url or os.environ.get('DATABASE_URL')
        if not database_url:
            raise ValueError("DATABASE_URL environment variable required for PostgreSQL.")

        try:
            self._pool = psycopg2.pool.SimpleConnectionPool(
                minconn=1,
                maxconn=maxconn,
                dsn=database_url
            )
            logger.info(f"PostgreSQL connection pool initialized (1-{maxconn} connections)")
        except Exception as e:
            logger.error(f"Failed to create PostgreSQL connection pool: {e}")
            raise

    def get_connection(self):
        """Get database connection from pool."""
        try:
            return self._pool.getconn()
        except Exception as e:
            logger.error(f"Failed to get connection from pool: {e}")
            raise

    def release_connection(self, conn):
        """
        Release connection back to pool.

        Args:
            conn: PostgreSQL connection to release
        """
        if conn is None:
            return

        try:
            self._pool.putconn(conn)
        except Exception as e:
            logger.error(f"Failed to return connection to pool: {e}")

    def get_cursor(self, conn):
        """
        Get cursor with RealDictCursor factory (dict-like row access).

        Example:
            cursor = adapter.get_cursor(conn)
            cursor.execute("SELECT * FROM profiles WHERE user_id = %s", (user_id,))
            profile = cursor.fetchone()
            # Access columns as dict: profile['full_name']
        """
        return conn.cursor(cursor_factory=RealDictCursor)

    def close(self):
        """Close all database connections and clean up pool."""
        if self._pool:
            try:
                self._pool.closeall()
                logger.info("PostgreSQL connection pool closed")
            except Exception as e:
                logger.error(f"Failed to close PostgreSQL connection pool: {e}")
