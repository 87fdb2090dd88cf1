"""
Record store interface and implementations.

The translation boundary only needs create / read / update by key. Each
``insert`` and ``update`` is applied as a single write so that a provenance
triple and the rest of the patch land together or not at all.
"""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import psycopg2
from psycopg2 import sql

from .db_adapter import DatabaseAdapter

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class RecordStore(ABC):
    """Generic create/read/update record store."""

    @abstractmethod
    def insert(self, table: str, record: Record) -> Record:
        """Insert one record and return it as stored."""

    @abstractmethod
    def update(self, table: str, key: Dict[str, Any], patch: Record) -> Optional[Record]:
        """Apply ``patch`` atomically to the record matching ``key``."""

    @abstractmethod
    def select(self, table: str, filter: Optional[Dict[str, Any]] = None) -> List[Record]:
        """Return records whose columns equal every value in ``filter``."""


def _matches(record: Record, filter: Optional[Dict[str, Any]]) -> bool:
    return all(record.get(k) == v for k, v in (filter or {}).items())


class InMemoryRecordStore(RecordStore):
    """Dict-backed store for tests and local development."""

    def __init__(self):
        self._tables: Dict[str, List[Record]] = {}
        self._lock = threading.Lock()

    def insert(self, table: str, record: Record) -> Record:
        stored = copy.deepcopy(record)
        stored.setdefault("id", str(uuid.uuid4()))
        with self._lock:
            self._tables.setdefault(table, []).append(stored)
        return copy.deepcopy(stored)

    def update(self, table: str, key: Dict[str, Any], patch: Record) -> Optional[Record]:
        if not key:
            raise ValueError("update requires a non-empty key")
        with self._lock:
            for record in self._tables.get(table, []):
                if _matches(record, key):
                    record.update(copy.deepcopy(patch))
                    return copy.deepcopy(record)
        return None

    def select(self, table: str, filter: Optional[Dict[str, Any]] = None) -> List[Record]:
        with self._lock:
            return [
                copy.deepcopy(record)
                for record in self._tables.get(table, [])
                if _matches(record, filter)
            ]


def _where(filter: Dict[str, Any]):
    clauses = [
        sql.SQL("{} = {}").format(sql.Identifier(column), sql.Placeholder())
        for column in filter
    ]
    return sql.SQL(" AND ").join(clauses), list(filter.values())


class PostgresRecordStore(RecordStore):
    """
    PostgreSQL-backed store.

    Every write is a single statement committed in its own transaction and
    rolled back on error.
    """

    def __init__(self, adapter: Optional[DatabaseAdapter] = None):
        self._adapter = adapter
        self._adapter_lock = threading.Lock()

    @property
    def adapter(self) -> DatabaseAdapter:
        if self._adapter is None:
            with self._adapter_lock:
                if self._adapter is None:
                    try:
                        self._adapter = DatabaseAdapter()
                    except Exception as e:
                        logger.error(f"Failed to create database adapter: {e}")
                        raise RuntimeError(f"Database unavailable: {e}") from e
        return self._adapter

    def _execute(self, query, params: List[Any], *, write: bool, many: bool) -> Any:
        adapter = self.adapter
        conn = adapter.get_connection()
        cursor = adapter.get_cursor(conn)
        try:
            cursor.execute(query, params)
            rows = cursor.fetchall() if many else cursor.fetchone()
            if write:
                conn.commit()
            return rows
        except psycopg2.Error as e:
            logger.error(f"Database error: {e}")
            conn.rollback()
            raise
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            adapter.release_connection(conn)

    def insert(self, table: str, record: Record) -> Record:
        if not record:
            raise ValueError("insert requires at least one column")
        columns = list(record)
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING *").format(
            sql.Identifier(table),
            sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )
        row = self._execute(query, [record[c] for c in columns], write=True, many=False)
        return dict(row) if row else dict(record)

    def update(self, table: str, key: Dict[str, Any], patch: Record) -> Optional[Record]:
        if not key:
            raise ValueError("update requires a non-empty key")
        if not patch:
            raise ValueError("update requires at least one column")
        where, where_params = _where(key)
        query = sql.SQL("UPDATE {} SET {} WHERE {} RETURNING *").format(
            sql.Identifier(table),
            sql.SQL(", ").join(
                sql.SQL("{} = {}").format(sql.Identifier(c), sql.Placeholder())
                for c in patch
            ),
            where,
        )
        row = self._execute(
            query, list(patch.values()) + where_params, write=True, many=False
        )
        return dict(row) if row else None

    def select(self, table: str, filter: Optional[Dict[str, Any]] = None) -> List[Record]:
        if filter:
            where, params = _where(filter)
            query = sql.SQL("SELECT * FROM {} WHERE {}").format(sql.Identifier(table), where)
        else:
            params = []
            query = sql.SQL("SELECT * FROM {}").format(sql.Identifier(table))
        rows = self._execute(query, params, write=False, many=True)
        return [dict(row) for row in rows or []]
