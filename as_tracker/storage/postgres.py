"""
Relational storage backend on PostgreSQL.

Every operation checks one connection out of a psycopg ConnectionPool and runs
inside that connection's transaction; the pool commits on success and rolls back
when the block raises. Table and column names come exclusively from the static
category registry, values are always bound as parameters.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Generator, List, Mapping, Optional, Sequence

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from as_tracker.config import Settings
from as_tracker.domain.categories import Category
from as_tracker.domain.codec import (
    WireRecord,
    coerce_id,
    decode,
    encode,
    full_row,
    known_fields,
)
from as_tracker.domain.errors import BackendError, NotFoundError
from as_tracker.domain.models import ActivityEntry
from as_tracker.infrastructure.db_factory import (
    ACTIVITY_TABLE,
    PoolManager,
    get_pool,
    schema_statements,
)
from as_tracker.storage.abstract import AbstractRecordStore, StatusCounts
from as_tracker.utils.logging import get_logger

log = get_logger(__name__)

_ORDER_BY_NO = "ORDER BY no ASC NULLS LAST, id ASC"


class PostgresRecordStore(AbstractRecordStore):
    """
    Category tables in PostgreSQL accessed through a shared connection pool.

    Parameters
    ----------
    pool : ConnectionPool, optional
        Pool to use; defaults to the process-wide pool from PoolManager.
    settings : Settings, optional
        Connection settings for the process-wide pool when `pool` is omitted.
    """

    name: str = "postgres"

    def __init__(
        self, pool: Optional[ConnectionPool] = None, settings: Optional[Settings] = None
    ) -> None:
        self._managed = pool is None
        self._pool = pool if pool is not None else get_pool(settings)

    @contextmanager
    def _cursor(self, operation: str) -> Generator[psycopg.Cursor, None, None]:
        try:
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    yield cur
        except psycopg.Error as exc:
            log.exception(f"[BACKEND FAILED] {operation}", extra={"operation": operation})
            raise BackendError(str(exc)) from exc

    def init_schema(self) -> None:
        with self._cursor("init_schema") as cur:
            for statement in schema_statements():
                cur.execute(statement)
        log.info("Schema initialized")

    def list_records(self, category: Category) -> List[WireRecord]:
        with self._cursor("list") as cur:
            cur.execute(f"SELECT * FROM {category.table} {_ORDER_BY_NO};")
            rows = cur.fetchall()
        return [decode(row, category) for row in rows]

    def get_record(self, category: Category, record_id: int) -> WireRecord:
        with self._cursor("get") as cur:
            cur.execute(f"SELECT * FROM {category.table} WHERE id = %s;", (record_id,))
            row = cur.fetchone()
        if row is None:
            raise NotFoundError()
        return decode(row, category)

    def insert_record(self, category: Category, data: Mapping[str, Any]) -> WireRecord:
        row = encode(data, category)
        columns = list(row)
        placeholders = ", ".join(["%s"] * len(columns))
        sql = (
            f"INSERT INTO {category.table} ({', '.join(columns)}) "
            f"VALUES ({placeholders}) RETURNING *;"
        )
        with self._cursor("insert") as cur:
            cur.execute(sql, [row[c] for c in columns])
            stored = cur.fetchone()
        record = decode(stored, category)
        return {**record, **known_fields(data, category), "id": record["id"]}

    def update_record(
        self, category: Category, record_id: int, data: Mapping[str, Any]
    ) -> WireRecord:
        changes = encode(data, category, partial=True)
        if not changes:
            return self.get_record(category, record_id)
        columns = list(changes)
        set_clause = ", ".join(f"{c} = %s" for c in columns)
        sql = f"UPDATE {category.table} SET {set_clause} WHERE id = %s RETURNING *;"
        with self._cursor("update") as cur:
            cur.execute(sql, [*(changes[c] for c in columns), record_id])
            stored = cur.fetchone()
        if stored is None:
            raise NotFoundError()
        return decode(stored, category)

    def delete_record(self, category: Category, record_id: int) -> None:
        with self._cursor("delete") as cur:
            cur.execute(f"DELETE FROM {category.table} WHERE id = %s;", (record_id,))
            deleted = cur.rowcount
        if deleted == 0:
            raise NotFoundError()

    def delete_all(self, category: Category) -> None:
        with self._cursor("delete_all") as cur:
            cur.execute(f"DELETE FROM {category.table};")
            removed = cur.rowcount
        log.info("Category cleared", extra={"category": category.key, "removed": removed})

    def bulk_upsert(
        self, category: Category, items: Sequence[Mapping[str, Any]], clear_first: bool
    ) -> int:
        keys = list(category.field_keys) + ["status"]
        with_id: List[List[Any]] = []
        without_id: List[List[Any]] = []
        for item in items:
            row = full_row(item, category)
            values = [row[k] for k in keys]
            requested = coerce_id(item.get("id"))
            if requested is None:
                without_id.append(values)
            else:
                with_id.append([requested, *values])

        column_list = ", ".join(keys)
        placeholders = ", ".join(["%s"] * len(keys))
        replace_all = ", ".join(f"{k} = EXCLUDED.{k}" for k in keys)
        upsert_sql = (
            f"INSERT INTO {category.table} (id, {column_list}) VALUES (%s, {placeholders}) "
            f"ON CONFLICT (id) DO UPDATE SET {replace_all};"
        )
        insert_sql = f"INSERT INTO {category.table} ({column_list}) VALUES ({placeholders});"

        with self._cursor("bulk_upsert") as cur:
            if clear_first:
                cur.execute(f"DELETE FROM {category.table};")
            if with_id:
                cur.executemany(upsert_sql, with_id)
                # Explicit ids bypass the identity sequence; move it past them.
                cur.execute(
                    "SELECT setval(pg_get_serial_sequence(%s, 'id'), "
                    f"GREATEST((SELECT MAX(id) FROM {category.table}), 1));",
                    (category.table,),
                )
            if without_id:
                cur.executemany(insert_sql, without_id)

        log.info(
            "Bulk upsert completed",
            extra={"category": category.key, "count": len(items), "clear_first": clear_first},
        )
        return len(items)

    def renumber(self, category: Category) -> None:
        with self._cursor("renumber") as cur:
            cur.execute(f"SELECT id FROM {category.table} {_ORDER_BY_NO};")
            ids = [row["id"] for row in cur.fetchall()]
            if ids:
                cur.executemany(
                    f"UPDATE {category.table} SET no = %s WHERE id = %s;",
                    [(position, record_id) for position, record_id in enumerate(ids, start=1)],
                )
        log.info("Renumbered records", extra={"category": category.key, "count": len(ids)})

    def next_no(self, category: Category) -> int:
        with self._cursor("next_no") as cur:
            cur.execute(f"SELECT MAX(no) AS max_no FROM {category.table};")
            row = cur.fetchone()
        return (row["max_no"] or 0) + 1

    def count_by_status(self, category: Category) -> StatusCounts:
        with self._cursor("count_by_status") as cur:
            cur.execute(
                f"SELECT status, COUNT(*) AS count FROM {category.table} GROUP BY status;"
            )
            rows = cur.fetchall()
        return {row["status"]: row["count"] for row in rows}

    def append_activity(self, entry: ActivityEntry) -> ActivityEntry:
        with self._cursor("append_activity") as cur:
            cur.execute(
                f'INSERT INTO {ACTIVITY_TABLE} (id, type, message, item_name, "timestamp", icon) '
                "VALUES (%s, %s, %s, %s, %s, %s);",
                (entry.id, entry.type, entry.message, entry.item_name, entry.timestamp, entry.icon),
            )
        return entry

    def list_activities(self, limit: int) -> List[ActivityEntry]:
        with self._cursor("list_activities") as cur:
            cur.execute(
                f'SELECT id, type, message, item_name, "timestamp", icon FROM {ACTIVITY_TABLE} '
                "ORDER BY id DESC LIMIT %s;",
                (limit,),
            )
            rows = cur.fetchall()
        return [ActivityEntry(**row) for row in rows]

    def close(self) -> None:
        if self._managed:
            PoolManager().close_all()
        else:
            self._pool.close()
        log.info("Postgres store closed")


__all__ = ["PostgresRecordStore"]
