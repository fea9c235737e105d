"""
Backing store primitives used by every service.

Services never build PostgREST queries directly; they go through
``BackingStore`` so the same code runs against Supabase in production and
against an in-memory store in tests.

Filters are a dict of ``column -> value``. A list/tuple/set value means
membership (``IN``), anything else means equality.
"""

from abc import ABC, abstractmethod
from fastapi import Depends
from postgrest.exceptions import APIError
from supabase import Client
from typing import Any, Dict, List, Optional
import logging

from app.database.supabase_client import get_supabase

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
Filters = Dict[str, Any]


class StoreError(Exception):
    """A backing-store read or write failed. ``message`` is safe to show to users."""

    def __init__(self, message: str, table: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.table = table


class BackingStore(ABC):
    @abstractmethod
    def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order: Optional[str] = None,
        desc: bool = True,
        limit: Optional[int] = None,
        columns: str = "*",
    ) -> List[Row]:
        ...

    @abstractmethod
    def insert(self, table: str, row: Row) -> Row:
        ...

    @abstractmethod
    def update(self, table: str, patch: Row, filters: Filters) -> List[Row]:
        ...

    def select_one(self, table: str, filters: Filters, columns: str = "*") -> Optional[Row]:
        rows = self.select(table, filters, limit=1, columns=columns)
        return rows[0] if rows else None


def _is_membership(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))


class SupabaseStore(BackingStore):
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _apply_filters(self, query, filters: Optional[Filters]):
        for column, value in (filters or {}).items():
            if _is_membership(value):
                query = query.in_(column, list(value))
            else:
                query = query.eq(column, value)
        return query

    def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order: Optional[str] = None,
        desc: bool = True,
        limit: Optional[int] = None,
        columns: str = "*",
    ) -> List[Row]:
        try:
            query = self._apply_filters(self.supabase.table(table).select(columns), filters)
            if order:
                query = query.order(order, desc=desc)
            if limit is not None:
                query = query.limit(limit)
            result = query.execute()
            return result.data or []
        except APIError as e:
            logger.error(f"Select on {table} failed: {e.message}")
            raise StoreError(e.message or f"Failed to load {table}", table) from e

    def insert(self, table: str, row: Row) -> Row:
        try:
            result = self.supabase.table(table).insert(row).execute()
        except APIError as e:
            logger.error(f"Insert into {table} failed: {e.message}")
            raise StoreError(e.message or f"Failed to save to {table}", table) from e
        if not result.data:
            raise StoreError(f"Failed to save to {table}", table)
        return result.data[0]

    def update(self, table: str, patch: Row, filters: Filters) -> List[Row]:
        if not filters:
            raise ValueError("update requires at least one filter")
        try:
            query = self._apply_filters(self.supabase.table(table).update(patch), filters)
            result = query.execute()
            return result.data or []
        except APIError as e:
            logger.error(f"Update on {table} failed: {e.message}")
            raise StoreError(e.message or f"Failed to update {table}", table) from e


def get_store(supabase: Client = Depends(get_supabase)) -> BackingStore:
    return SupabaseStore(supabase)
