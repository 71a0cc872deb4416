"""
Database access - SQLAlchemy engine and table definitions for the sqlite store.
"""
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import (
    BigInteger, Boolean, Column, DateTime, Float, Integer, MetaData, String, Table,
    create_engine, event, func, text,
)
from sqlalchemy.engine import Connection, Engine, make_url

logger = logging.getLogger(__name__)

metadata = MetaData()

products = Table(
    'products',
    metadata,
    Column('sku', String, primary_key=True),
    Column('name', String, nullable=False),
    Column('stock', Integer, nullable=False, default=0),
    Column('cost_price', Float, nullable=False, default=0.0),
    Column('current_price', Float, nullable=False, default=0.0),
    Column('sales_qty', Integer, nullable=False, default=0),
    Column('abc_margin', String, nullable=False, default='N'),
    Column('margin_total', Float, nullable=False, default=0.0),
    Column('source_status', String, nullable=False, default=''),
    Column('new_price', Float, nullable=True),
    Column('status', String, nullable=False, default='pending', server_default='pending'),
    Column('batch_id', BigInteger, nullable=True),
    Column('manual_flag', Boolean, nullable=False, default=False, server_default=text('0')),
)

batches = Table(
    'batches',
    metadata,
    Column('id', BigInteger, primary_key=True, autoincrement=False),
    Column('created_at', DateTime, nullable=False, server_default=func.current_timestamp()),
    Column('item_count', Integer, nullable=False),
    Column('filename', String, nullable=False),
)


def _unicode_lower(value):
    # sqlite's builtin lower() only folds ASCII; product names are Cyrillic
    if isinstance(value, str):
        return value.lower()
    return value


class Database:
    """Owns the SQLAlchemy engine for one sqlite file."""

    def __init__(self, database_url: str):
        self.url = make_url(database_url)
        self.database_path = Path(self.url.database)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine: Engine = create_engine(self.url, future=True)
        event.listen(self.engine, 'connect', self._on_connect)

    @staticmethod
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.create_function('lower', 1, _unicode_lower, deterministic=True)

    def init_db(self):
        """Create tables if they do not exist."""
        metadata.create_all(self.engine)
        logger.debug("Database initialised at %s", self.database_path)

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Transactional connection, committed on success and rolled back on error."""
        with self.engine.begin() as connection:
            yield connection

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Read-only style connection without an explicit transaction."""
        with self.engine.connect() as connection:
            yield connection

    def backup_to(self, destination: Path):
        """Copy the live database into destination using sqlite's online backup."""
        raw = self.engine.raw_connection()
        try:
            target = sqlite3.connect(str(destination))
            try:
                raw.driver_connection.backup(target)
            finally:
                target.close()
        finally:
            raw.close()

    def dispose(self):
        self.engine.dispose()

