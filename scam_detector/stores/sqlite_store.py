"""
scam_detector/stores/sqlite_store.py
Reads snapshots of the Android provider databases pulled off a device:

  calllog.db  — table `calls`  (number, name, date, duration, type)
  mmssms.db   — table `sms`    (address, body, date, type)

Databases are opened read-only (mode=ro) so a wrong path never creates
an empty file. Columns missing from an older schema are left out of the
row rather than failing the query.
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import Iterator, List, Sequence

from scam_detector.errors import PermissionDeniedError
from scam_detector.stores.base import (
    CALL_COLUMNS,
    SMS_COLUMNS,
    SMS_INBOX_TYPE,
    CallLogStore,
    Row,
    SmsStore,
)

logger = logging.getLogger(__name__)


def _connect(db_path: Path) -> sqlite3.Connection:
    if not db_path.exists():
        raise FileNotFoundError(f"Database not found: {db_path}")
    if not os.access(db_path, os.R_OK):
        raise PermissionDeniedError(
            f"Not authorized to read {db_path.name}",
            details=str(db_path),
        )
    uri = db_path.resolve().as_uri() + '?mode=ro'
    conn = sqlite3.connect(uri, uri=True)
    conn.row_factory = sqlite3.Row
    return conn


def _available_columns(
    conn: sqlite3.Connection, table: str, wanted: Sequence[str],
) -> List[str]:
    present = {r['name'] for r in conn.execute(f"PRAGMA table_info({table})")}
    if not present:
        raise sqlite3.OperationalError(f"no such table: {table}")
    return [c for c in wanted if c in present]


def _select(
    conn:   sqlite3.Connection,
    table:  str,
    wanted: Sequence[str],
    limit:  int,
    where:  str = '',
) -> Iterator[Row]:
    # Table and column names come from the fixed projections only
    columns = _available_columns(conn, table, wanted)
    sql = f"SELECT {', '.join(columns) or 'NULL AS _none'} FROM {table}"
    if where:
        sql += f" WHERE {where}"
    if 'date' in columns:
        # NULL or text dates sort as numbers, the way the reader maps them
        sql += " ORDER BY COALESCE(CAST(date AS INTEGER), 0) DESC"
    sql += " LIMIT ?"
    for row in conn.execute(sql, (limit,)):
        yield {c: row[c] for c in columns}


class SqliteCallLogStore(CallLogStore):

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)

    def query(self, limit: int) -> Iterator[Row]:
        conn = _connect(self.db_path)
        logger.debug(f"Querying calls from {self.db_path.name} (limit={limit})")
        try:
            yield from _select(conn, 'calls', CALL_COLUMNS, limit)
        finally:
            conn.close()


class SqliteSmsStore(SmsStore):

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)

    def query(self, limit: int) -> Iterator[Row]:
        conn = _connect(self.db_path)
        logger.debug(f"Querying inbox from {self.db_path.name} (limit={limit})")
        try:
            has_type = 'type' in _available_columns(conn, 'sms', ('type',))
            where = f"type = {SMS_INBOX_TYPE}" if has_type else ''
            yield from _select(conn, 'sms', SMS_COLUMNS, limit, where=where)
        finally:
            conn.close()
